import pytest
from PIL import Image
from asciiramp.core import CoreRenderer, output_dimensions
from asciiramp.typealiases import DecodeError, ZeroDimensionError, WriteError


def test_output_dimensions_keep_aspect_ratio():
    assert output_dimensions(1920, 1080, 700) == (1244, 700)
    assert output_dimensions(100, 100, 100) == (100, 100)


@pytest.mark.parametrize('width, height, output_height', [(10, 0, 100), (0, 10, 100), (10, 10, 0), (1, 1000, 100)])
def test_output_dimensions_reject_empty_sizes(width, height, output_height):
    with pytest.raises(ZeroDimensionError):
        output_dimensions(width, height, output_height)


def test_white_square_renders_brightest_glyph(make_image):
    path = make_image(size=(2, 2), color=(255, 255, 255, 255))
    renderer = CoreRenderer(font_size=1, distance=0, output_height=2)
    assert renderer.frame_to_text(path) == '$$\n$$\n'


def test_gray_columns_follow_the_ramp(make_image):
    shades = [0, 51, 102, 140, 170, 200, 255]
    path = make_image(size=(7, 1), columns=[(s, s, s, 255) for s in shades])
    renderer = CoreRenderer(font_size=1, distance=0, output_height=1)
    assert renderer.frame_to_text(path) == " ':iIJ$\n"


def test_transparent_cells_are_spaces_in_text(make_image):
    clear, solid = (255, 255, 255, 0), (255, 255, 255, 255)
    path = make_image(size=(4, 2), columns=[clear, clear, solid, solid])
    renderer = CoreRenderer(font_size=1, distance=0, output_height=2)
    assert renderer.frame_to_text(path) == '  $$\n  $$\n'


def test_text_rows_follow_the_step(make_image):
    path = make_image(size=(20, 10), color=(255, 255, 255, 255))
    text = CoreRenderer(font_size=7, distance=1, output_height=10).frame_to_text(path)
    # 20x10 stepped by 8 -> 3 columns, 2 rows
    assert text == '$$$\n$$$\n'


def test_text_is_deterministic(make_image):
    path = make_image(size=(30, 20), columns=[(8 * x, 4 * x, 2 * x, 255) for x in range(30)])
    renderer = CoreRenderer(font_size=2, distance=0, output_height=20)
    img = renderer.load(path)
    assert renderer.render_text(img) == renderer.render_text(img)
    assert renderer.frame_to_text(path) == renderer.frame_to_text(path)


def test_negative_step_is_clamped(make_image):
    path = make_image(size=(3, 2))
    renderer = CoreRenderer(font_size=1, distance=-5, output_height=2)
    assert renderer.step == 1
    assert renderer.frame_to_text(path) == '$$$\n$$$\n'


def test_load_resizes_to_output_height(make_image):
    path = make_image(size=(32, 18))
    img = CoreRenderer(output_height=9).load(path)
    assert img.size == (16, 9)
    assert img.mode == 'RGBA'


def test_samples_report_brightness_and_alpha(make_image):
    path = make_image(size=(2, 1), columns=[(30, 60, 90, 255), (255, 255, 255, 0)])
    renderer = CoreRenderer(font_size=1, distance=0, output_height=1)
    assert list(renderer.samples(renderer.load(path))) == [(0, 0, 60, 255), (1, 0, 255, 0)]


def test_visual_canvas_size_and_glyphs(make_image):
    path = make_image(size=(60, 40), color=(255, 255, 255, 255))
    renderer = CoreRenderer(font_size=12, distance=-3, output_height=40, color=(0, 255, 34))
    canvas = renderer.render_visual(renderer.load(path))
    assert canvas.size == (60, 40)
    red, green, blue, alpha = canvas.getextrema()
    assert red == (0, 0)
    assert green[1] > 0


def test_visual_skips_transparent_cells(make_image):
    path = make_image(size=(40, 40), color=(255, 255, 255, 0))
    black = CoreRenderer(font_size=12, distance=-3, output_height=40).render_visual
    clear = CoreRenderer(font_size=12, distance=-3, output_height=40, bg=None).render_visual
    img = CoreRenderer(output_height=40).load(path)
    assert black(img).getcolors() == [(1600, (0, 0, 0, 255))]
    assert clear(img).getextrema()[3] == (0, 0)


def test_visual_dark_source_draws_nothing(make_image):
    path = make_image(size=(40, 40), color=(10, 10, 10, 255))
    renderer = CoreRenderer(font_size=8, distance=-3, output_height=40)
    assert renderer.render_visual(renderer.load(path)).getcolors() == [(1600, (0, 0, 0, 255))]


def test_gray_integer_colors():
    renderer = CoreRenderer(color=200, bg=30)
    assert renderer.color == (200, 200, 200)
    assert renderer.bg == (30, 30, 30)


def test_frame_to_file_writes_png(make_image, tmp_path):
    path = make_image(size=(30, 30))
    out = tmp_path / 'ascii.png'
    assert CoreRenderer(output_height=30).frame_to_file(path, out) == str(out)
    with Image.open(out) as img:
        assert img.size == (30, 30)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CoreRenderer().load(tmp_path / 'nope.png')


def test_corrupt_file_is_a_decode_error(tmp_path):
    path = tmp_path / 'broken.png'
    path.write_bytes(b'not an image at all')
    with pytest.raises(DecodeError) as info:
        CoreRenderer().load(path)
    assert info.value.path == str(path)
    assert str(path) in str(info.value)


def test_unwritable_output_is_a_write_error(make_image, tmp_path):
    path = make_image(size=(10, 10))
    out = tmp_path / 'missing_dir' / 'ascii.png'
    with pytest.raises(WriteError) as info:
        CoreRenderer(output_height=10).frame_to_file(path, out)
    assert info.value.path == str(out)
