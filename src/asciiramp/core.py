from __future__ import annotations
from typing import Any, Optional, Tuple, List, Iterable, Iterator, NamedTuple, Sequence
from bisect import bisect_right
from contextlib import contextmanager
from enum import Enum
from math import ceil
from pathlib import Path
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError
from . import utils
from .typealiases import (
    SomeSortOfPath, Number, Color, OptionalColor, Sample, AsciirampException, DecodeError, ZeroDimensionError,
    ExtractionError, EncodingError, WriteError)


__all__ = [
    'BrightnessRamp', 'SampleGrid', 'CoreRenderer', 'BatchAsciifier', 'FFmpeg', 'Stage', 'GifResult', 'VideoResult',
    'DEFAULT_RAMP', 'DEFAULT_COLOR', 'ASCII_BLACK', 'output_dimensions', 'brightness', 'frame_files']


ffmpeg = 'ffmpeg'

GLYPHS = (' ', "'", ':', 'i', 'I', 'J', '$')
THRESHOLDS = (51, 102, 140, 170, 200, 210, 255)
DEFAULT_COLOR = '#00ff22'
ASCII_BLACK = (0, 0, 0)
VIDEO_FPS = 30


class BrightnessRamp:
    """An ordered threshold-to-glyph mapping. A brightness selects the glyph of the first threshold that is
    strictly greater than it; anything at or above the last threshold gets the last glyph.

        >>> DEFAULT_RAMP.glyph_for(50)
        ' '
        >>> DEFAULT_RAMP.glyph_for(51)
        "'"
        >>> DEFAULT_RAMP.glyph_for(300)
        '$'
    """

    __slots__ = ('thresholds', 'glyphs')

    def __init__(self, thresholds: Sequence[Number] = THRESHOLDS, glyphs: Sequence[str] = GLYPHS) -> None:
        if not thresholds or len(thresholds) != len(glyphs):
            raise ValueError('A ramp needs the same, non-zero number of thresholds and glyphs.')
        if any(a >= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError('Ramp thresholds must be strictly ascending.')
        object.__setattr__(self, 'thresholds', tuple(thresholds))
        object.__setattr__(self, 'glyphs', tuple(glyphs))

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError('BrightnessRamp is immutable.')

    def __reduce__(self):
        return BrightnessRamp, (self.thresholds, self.glyphs)

    def __repr__(self) -> str:
        return f'BrightnessRamp({self.thresholds!r}, {self.glyphs!r})'

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BrightnessRamp):
            return NotImplemented
        return self.thresholds == other.thresholds and self.glyphs == other.glyphs

    def __hash__(self) -> int:
        return hash((self.thresholds, self.glyphs))

    def glyph_for(self, brightness: Number) -> str:
        # bisect_right finds the first threshold > brightness, so ties fall into the next bucket.
        index = bisect_right(self.thresholds, brightness)
        if index == len(self.thresholds):
            return self.glyphs[-1]
        return self.glyphs[index]


DEFAULT_RAMP = BrightnessRamp()


class SampleGrid:
    """Grid coordinates ``(x, y)`` in row-major order, stepping by ``step`` from 0 up to (not including)
    ``width`` and ``height``. A step below 1 is clamped to 1. Every ``iter()`` starts from (0, 0) again."""

    def __init__(self, width: int, height: int, step: Number) -> None:
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self.step = max(1, int(step))

    @property
    def columns(self) -> int:
        return ceil(self.width / self.step)

    @property
    def rows(self) -> int:
        return ceil(self.height / self.step)

    def __len__(self) -> int:
        return self.columns * self.rows

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        for y in range(0, self.height, self.step):
            for x in range(0, self.width, self.step):
                yield x, y


class GifResult(NamedTuple):
    path: str
    frames_processed: int
    total_frames: int
    single_frame_only: bool = True


class VideoResult(NamedTuple):
    frame_count: int
    frames_dir: str
    video_path: Optional[str]


class Stage(Enum):
    IDLE = 'idle'
    EXTRACTING = 'extracting'
    RENDERING = 'rendering'
    WRITING = 'writing'
    DONE = 'done'
    FAILED = 'failed'


def brightness(r: int, g: int, b: int) -> float:
    """Plain average of the three channels (not luma weighted)."""
    return (r + g + b) / 3


def output_dimensions(width: int, height: int, output_height: int) -> Tuple[int, int]:
    """Output size that keeps the source aspect ratio at the given height.

        >>> output_dimensions(1920, 1080, 700)
        (1244, 700)
    """
    if height == 0:
        raise ZeroDimensionError('Source image has zero height, aspect ratio is undefined.')
    if output_height <= 0:
        raise ZeroDimensionError(f'Output height must be positive, got {output_height}.')
    out_width = int(output_height * width / height)
    if out_width <= 0:
        raise ZeroDimensionError(f'Output width rounds to zero for a {width}x{height} source.')
    return out_width, output_height


def frame_sort_key(path: SomeSortOfPath) -> Tuple[str, int, str]:
    """Sort key for frame names: lexicographic, except that extracted ``frame_*`` names are compared by length
    first so they keep temporal order once the index outgrows its padding (frame_999.png < frame_1000.png).
    For fixed-width ``frame_NNN`` names both orders are the same."""
    name = Path(path).name
    if name.startswith('frame_'):
        return 'frame_', len(name), name
    return name, 0, ''


def frame_files(folder: SomeSortOfPath, prefix: str = 'frame_') -> List[str]:
    """The extracted ``frame_*.png`` files of ``folder``, in temporal order."""
    files = [p for p in Path(folder).iterdir() if p.name.startswith(prefix) and p.suffix.lower() == '.png']
    return [str(p) for p in sorted(files, key=frame_sort_key)]


class CoreRenderer:
    """Turns one decoded image into ASCII art, either drawn on a canvas or as text.

    The sampling is the same for both modes: the source is resized to ``output_height`` (width follows the
    source aspect ratio), then read every ``font_size + distance`` pixels. Instances are picklable so they can be
    shipped to worker processes.

        >>> renderer = CoreRenderer(font_size=7, distance=1, output_height=100)
        >>> text = renderer.frame_to_text('foo.png')
    """

    def __init__(
            self, font_size: int = 12, distance: int = -3, output_height: int = 700, color: Color = DEFAULT_COLOR,
            bg: OptionalColor = ASCII_BLACK, ramp: BrightnessRamp = DEFAULT_RAMP,
            font_path: Optional[str] = None) -> None:

        """**Initialize the CoreRenderer class.**

        :param font_size: The glyph size in pixels, used for drawing and as the base of the sampling step.
        :param distance: Added to ``font_size`` to get the sampling step. Negative values overlap glyphs.
        :param output_height: The height of the output canvas. The width follows the source aspect ratio.
        :param color: The glyph color, as a Pillow color string, a tuple or a gray integer (0-255).
        :param bg: The background color, or ``None`` for a transparent canvas. Defaults to black.
        :param ramp: The brightness ramp. Defaults to ``DEFAULT_RAMP``.
        :param font_path: A TrueType/OpenType font file. Defaults to Pillow's built-in font.
        :return: ``None``.
        """

        self.font_size = font_size
        self.distance = distance
        self.output_height = output_height
        self.color = _color(color)
        self.bg = None if bg is None else _color(bg)
        self.ramp = ramp
        self.font_path = font_path

    @property
    def step(self) -> int:
        return max(1, self.font_size + self.distance)

    def font(self) -> ImageFont.ImageFont:
        if self.font_path is not None:
            return ImageFont.truetype(self.font_path, self.font_size)
        return ImageFont.load_default(self.font_size)

    def load(self, path: SomeSortOfPath) -> Image.Image:
        """Decode ``path`` and resample it to the output dimensions as an RGBA image. Only the first frame of
        multi-frame files is read."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f'The file path \'{path}\' does not exist.')
        try:
            with Image.open(path) as source:
                source.load()
                size = output_dimensions(*source.size, self.output_height)
                return source.convert('RGBA').resize(size)
        except (UnidentifiedImageError, OSError) as e:
            raise DecodeError(f'Could not decode image: {e}', path) from e

    def samples(self, img: Image.Image) -> Iterator[Sample]:
        """Yield ``(x, y, brightness, alpha)`` for every grid point of ``img``."""
        pixels = img.load()
        for x, y in SampleGrid(img.width, img.height, self.step):
            r, g, b, a = pixels[x, y]
            yield x, y, brightness(r, g, b), a

    def render_visual(self, img: Image.Image) -> Image.Image:
        canvas = Image.new('RGBA', img.size, (0, 0, 0, 0) if self.bg is None else self.bg)
        draw = ImageDraw.Draw(canvas)
        font = self.font()
        # Canvas-style placement: (x, y) is the left end of the glyph baseline.
        anchor = 'ls' if isinstance(font, ImageFont.FreeTypeFont) else None
        for x, y, value, alpha in self.samples(img):
            if not alpha:
                continue
            glyph = self.ramp.glyph_for(value)
            if glyph != ' ':
                draw.text((x, y), glyph, fill=self.color, font=font, anchor=anchor)
        return canvas

    def render_text(self, img: Image.Image) -> str:
        grid = SampleGrid(img.width, img.height, self.step)
        columns = grid.columns
        rows = []
        row = []
        for x, y, value, alpha in self.samples(img):
            row.append(self.ramp.glyph_for(value) if alpha else ' ')
            if len(row) == columns:
                rows.append(''.join(row) + '\n')
                row = []
        return ''.join(rows)

    def frame_to_image(self, path: SomeSortOfPath) -> Image.Image:
        return self.render_visual(self.load(path))

    def frame_to_file(self, path: SomeSortOfPath, out_path: SomeSortOfPath) -> str:
        """Render ``path`` in visual mode and save it as ``out_path``."""
        return self.save(self.frame_to_image(path), out_path)

    def save(self, canvas: Image.Image, out_path: SomeSortOfPath) -> str:
        try:
            canvas.save(out_path)
        except OSError as e:
            raise WriteError(f'Could not write image: {e}', out_path) from e
        return str(out_path)

    def frame_to_text(self, path: SomeSortOfPath) -> str:
        return self.render_text(self.load(path))


class BatchAsciifier:
    """Drives a ``CoreRenderer`` over a single image or an ordered sequence of frames and writes the results.

    Frames go through the renderer strictly in order and each one is written (or, in text mode, added to the
    current window) before the next result is taken, so output N always belongs to input N. With ``workers``
    greater than one the rendering runs in a process pool, and the entry point then needs a
    ``if __name__ == '__main__'`` check.

    This class can be used on its own, and inside a ``with`` block when ``workers`` is set:

        >>> with BatchAsciifier(CoreRenderer(font_size=8, bg=None), workers=4) as batch:
        ...     batch.render_frames(frame_files('temp_frames'), 'ascii_frames')
    """

    def __init__(self, renderer: CoreRenderer, quiet: bool = False, workers: Optional[int] = None) -> None:
        self.renderer = renderer
        self.workers = workers
        self._print = utils.conditional_print(quiet)
        self.stage = Stage.IDLE
        self.frames_done = 0
        self.files_written = 0

    def __enter__(self) -> BatchAsciifier:
        if self.workers is not None and self.workers > 1:
            utils.multiprocessing_guard()
        return self

    def __exit__(self, *args: Any) -> None:
        if self.workers is not None and self.workers > 1:
            utils.release_guard()

    @contextmanager
    def _running(self, stage: Stage) -> Iterator[None]:
        self.stage = stage
        try:
            yield
        except AsciirampException as e:
            if e.frame is None and self.stage is Stage.RENDERING:
                e.frame = self.frames_done
            self.stage = Stage.FAILED
            raise
        except Exception:
            self.stage = Stage.FAILED
            raise

    def extract(self, video_path: SomeSortOfPath, folder: SomeSortOfPath) -> List[str]:
        """Extract every frame of ``video_path`` into ``folder`` and return the frame paths in order."""
        with self._running(Stage.EXTRACTING):
            count = FFmpeg.video_to_frames(video_path, folder)
        self._print(f'Extracted {count} frames')
        return frame_files(folder)

    def render_one(self, path: SomeSortOfPath, out_path: SomeSortOfPath) -> str:
        with self._running(Stage.RENDERING):
            self.frames_done = 0
            resp = self.renderer.frame_to_file(path, out_path)
            self.frames_done = 1
        self.stage = Stage.DONE
        return resp

    def text_one(self, path: SomeSortOfPath, out_path: Optional[SomeSortOfPath] = None) -> str:
        with self._running(Stage.RENDERING):
            self.frames_done = 0
            resp = self.renderer.frame_to_text(path)
            self.frames_done = 1
        if out_path is not None:
            with self._running(Stage.WRITING):
                _write_text(out_path, resp)
                self.files_written = 1
        self.stage = Stage.DONE
        return resp

    def render_frames(self, frame_paths: Iterable[SomeSortOfPath], out_dir: SomeSortOfPath) -> List[str]:
        """Render every frame to ``out_dir/ascii_<frame name>``. Progress is printed every 10 frames.

        Workers only render; every frame is saved here, in order, so a failing frame stops the output at the
        frame before it.

        :param frame_paths: The extracted frames. They are put in temporal order by name before rendering, see
            ``frame_sort_key``.
        :param out_dir: An existing directory for the rendered frames.
        :return: The paths of the rendered frames, in order.
        """
        paths = sorted((str(p) for p in frame_paths), key=frame_sort_key)
        outputs = [str(Path(out_dir) / f'ascii_{Path(p).name}') for p in paths]
        total = len(paths)
        self.frames_done = 0
        with self._running(Stage.RENDERING):
            canvases = utils.ordered_map(self.renderer.frame_to_image, ((p,) for p in paths), self.workers)
            for k, (canvas, out_path) in enumerate(zip(canvases, outputs), 1):
                self.renderer.save(canvas, out_path)
                self.frames_done = k
                if not k % 10:
                    self._print(f'Processed {k}/{total} frames')
        self.stage = Stage.DONE
        return outputs

    def text_frames(
            self, frame_paths: Iterable[SomeSortOfPath], out_dir: SomeSortOfPath, frames_per_file: int = 100) -> int:
        """Render every frame as text and write them in windows of ``frames_per_file`` frames to
        ``out_dir/ascii_frames_K.txt``. A window is written as soon as it is full, so at most one window of text
        is held in memory.

        :return: The number of files written.
        """
        if frames_per_file < 1:
            raise ValueError(f'frames_per_file must be at least 1, got {frames_per_file}.')
        paths = sorted((str(p) for p in frame_paths), key=frame_sort_key)
        self.frames_done = 0
        self.files_written = 0
        window = []
        with self._running(Stage.RENDERING):
            for text in utils.ordered_map(self.renderer.frame_to_text, ((p,) for p in paths), self.workers):
                self.frames_done += 1
                window.append(text)
                if len(window) == frames_per_file:
                    self._write_window(window, out_dir)
                    window = []
            if window:
                self._write_window(window, out_dir)
        self.stage = Stage.DONE
        return self.files_written

    def _write_window(self, window: List[str], out_dir: SomeSortOfPath) -> None:
        with self._running(Stage.WRITING):
            _write_text(Path(out_dir) / f'ascii_frames_{self.files_written}.txt', '\n\n'.join(window))
            self.files_written += 1
        self.stage = Stage.RENDERING

    def encode(self, video_path: SomeSortOfPath, frames_dir: SomeSortOfPath, out_path: SomeSortOfPath) -> str:
        """Assemble ``frames_dir/ascii_frame_%03d.png`` and the audio of ``video_path`` into ``out_path``."""
        with self._running(Stage.WRITING):
            FFmpeg.frames_to_video(str(Path(frames_dir) / 'ascii_frame_%03d.png'), str(video_path), str(out_path))
        self.stage = Stage.DONE
        return str(out_path)


class FFmpeg:
    """Class with static functions wrapping the FFmpeg commands used for video."""

    @staticmethod
    def video_to_frames(path: SomeSortOfPath, folder: SomeSortOfPath) -> int:
        code, stderr = utils.run(ffmpeg, '-i', str(path), str(Path(folder) / 'frame_%03d.png'), get_stderr=True)
        if code:
            raise ExtractionError(f'Frame extraction failed: {_last_line(stderr)}', path)
        return len(frame_files(folder))

    @staticmethod
    def frames_to_video(path_pattern: str, audio_source: str, out_path: str, fps: int = VIDEO_FPS) -> None:
        # libx264 with yuv420p needs even dimensions, frames keep their own size and get a 1px pad if odd.
        code, stderr = utils.run(
            ffmpeg, '-y', '-framerate', str(fps), '-i', path_pattern, '-i', audio_source,
            '-vf', 'pad=ceil(iw/2)*2:ceil(ih/2)*2', '-c:v', 'libx264', '-pix_fmt', 'yuv420p', '-c:a', 'aac',
            '-shortest', out_path, get_stderr=True)
        if code:
            raise EncodingError(f'Video encoding failed: {_last_line(stderr)}', out_path)


def _color(value: Color) -> Color:
    if isinstance(value, int):
        return value, value, value
    return value


def _last_line(text: str) -> str:
    lines = text.strip().splitlines()
    return lines[-1] if lines else 'no output'


def _write_text(path: SomeSortOfPath, text: str) -> None:
    try:
        Path(path).write_text(text, encoding='utf-8')
    except OSError as e:
        raise WriteError(f'Could not write text: {e}', path) from e
