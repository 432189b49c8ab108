import pickle
import pytest
from asciiramp.core import BrightnessRamp, SampleGrid, DEFAULT_RAMP, GLYPHS, THRESHOLDS, brightness


def expected_glyph(value):
    for threshold, glyph in zip(THRESHOLDS, GLYPHS):
        if value < threshold:
            return glyph
    return GLYPHS[-1]


def test_every_brightness_picks_first_greater_threshold():
    for value in range(256):
        assert DEFAULT_RAMP.glyph_for(value) == expected_glyph(value)
    for value in (0.5, 50.999, 101.5, 209.99, 254.9):
        assert DEFAULT_RAMP.glyph_for(value) == expected_glyph(value)


@pytest.mark.parametrize('value, glyph', [
    (0, ' '), (50, ' '), (51, "'"), (101, "'"), (102, ':'), (140, 'i'), (170, 'I'), (200, 'J'), (209, 'J'),
    (210, '$'), (255, '$')])
def test_ties_fall_into_the_next_bucket(value, glyph):
    assert DEFAULT_RAMP.glyph_for(value) == glyph


def test_out_of_range_values():
    assert DEFAULT_RAMP.glyph_for(-40) == ' '
    assert DEFAULT_RAMP.glyph_for(1000) == '$'


def test_custom_ramp():
    ramp = BrightnessRamp((100, 200), ('.', '#'))
    assert ramp.glyph_for(99) == '.'
    assert ramp.glyph_for(100) == '#'
    assert ramp.glyph_for(250) == '#'


@pytest.mark.parametrize('thresholds, glyphs', [
    ((), ()), ((10, 20), ('a',)), ((20, 10), ('a', 'b')), ((10, 10), ('a', 'b'))])
def test_invalid_ramps(thresholds, glyphs):
    with pytest.raises(ValueError):
        BrightnessRamp(thresholds, glyphs)


def test_ramp_is_immutable_and_picklable():
    with pytest.raises(AttributeError):
        DEFAULT_RAMP.glyphs = ('x',)
    assert pickle.loads(pickle.dumps(DEFAULT_RAMP)) == DEFAULT_RAMP


def test_brightness_is_plain_average():
    assert brightness(255, 0, 0) == 85
    assert brightness(10, 20, 31) == pytest.approx(61 / 3)


@pytest.mark.parametrize('width, height, step', [(10, 10, 1), (10, 7, 3), (1244, 700, 9), (5, 1, 8), (3, 3, 3)])
def test_grid_length_and_bounds(width, height, step):
    grid = SampleGrid(width, height, step)
    points = list(grid)
    assert len(points) == len(grid) == -(-width // step) * -(-height // step)
    assert points[0] == (0, 0)
    assert all(x < width and y < height for x, y in points)


def test_grid_is_row_major_and_restartable():
    grid = SampleGrid(4, 4, 2)
    assert list(grid) == [(0, 0), (2, 0), (0, 2), (2, 2)]
    assert list(grid) == list(grid)
    assert (grid.columns, grid.rows) == (2, 2)


@pytest.mark.parametrize('step', [0, -3, -12])
def test_grid_clamps_non_positive_step(step):
    grid = SampleGrid(3, 2, step)
    assert grid.step == 1
    assert len(list(grid)) == 6
