from typing import Optional
from pathlib import Path
from time import perf_counter
from ..core import CoreRenderer, BatchAsciifier, VideoResult, DEFAULT_COLOR, ASCII_BLACK
from .. import utils
from ..typealiases import SomeSortOfPath, Number, Color


__all__ = ['asciify', 'asciify_text', 'create_mp4']


def in_minutes(seconds: Number) -> str:
    """Display a seconds value as MM:SS"""
    minutes, seconds = divmod(int(seconds), 60)
    return f'{minutes:02d}:{seconds:02d}'


def _check_input(path: SomeSortOfPath) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'The file path \'{path}\' does not exist.')
    return path


def asciify(
        path: SomeSortOfPath, out_dir: SomeSortOfPath = 'output_video', font_size: int = 8, distance: int = -3,
        output_height: int = 700, color: Color = DEFAULT_COLOR, transparent: bool = True,
        font_path: Optional[str] = None, encode: bool = True, workers: Optional[int] = None,
        quiet: bool = False) -> VideoResult:

    """**Convert a video to ASCII art frames and, by default, reassemble them into a video.**

    The frames are extracted to ``out_dir/temp_frames``, rendered to ``out_dir/ascii_frames/ascii_frame_NNN.png``
    and encoded with the original audio track to ``out_dir/ascii_art_video.mp4`` at 30 fps. If encoding fails the
    rendered frames stay on disk.

    When ``workers`` is greater than one this function **needs** a ``if __name__ == "__main__"`` check in the entry
    point of your code, unless you are using interactive python on the command line.

        >>> asciify('foo.mp4')
        VideoResult(frame_count=300, frames_dir='output_video/ascii_frames',
                    video_path='output_video/ascii_art_video.mp4')

        >>> asciify('foo.mp4', 'out', output_height=1080, encode=False, workers=4)
        [Renders the frames only, using four processes.]

    :param path: The path to the video file.
    :param out_dir: The output directory. Created if missing. Defaults to 'output_video'.
    :param font_size: The glyph size in pixels. Defaults to 8.
    :param distance: Added to the font size to get the spacing between glyphs. Defaults to -3.
    :param output_height: The pixel height of the frames. The width keeps the source proportions. Defaults to 700.
    :param color: The color of the glyphs. Defaults to '#00ff22'.
    :param transparent: Leave the frame background transparent instead of black. Defaults to True.
    :param font_path: A TrueType/OpenType font file. Defaults to Pillow's built-in font.
    :param encode: Whether to build the mp4 after rendering the frames. Defaults to True.
    :param workers: The number of processes rendering frames. Defaults to rendering in this process.
    :param quiet: Set to True to avoid printing progress to the console. Defaults to False.
    :return: A ``VideoResult`` with the frame count, the rendered frames directory and the video path (or None).
    """

    _print = utils.conditional_print(quiet)
    path = _check_input(path)
    out_dir = Path(out_dir)
    frames_dir = out_dir / 'temp_frames'
    ascii_dir = out_dir / 'ascii_frames'
    frames_dir.mkdir(parents=True, exist_ok=True)
    ascii_dir.mkdir(parents=True, exist_ok=True)

    renderer = CoreRenderer(
        font_size, distance, output_height, color, None if transparent else ASCII_BLACK, font_path=font_path)

    with BatchAsciifier(renderer, quiet, workers) as batch:
        _print('Extracting frames from video...')
        frames = batch.extract(path, frames_dir)

        _print('Processing frames to ASCII art...')
        start_time = perf_counter()
        batch.render_frames(frames, ascii_dir)
        _print(f'All frames processed in {in_minutes(perf_counter() - start_time)}.')

        video_path = None
        if encode:
            _print('Creating final video...')
            video_path = batch.encode(path, ascii_dir, out_dir / 'ascii_art_video.mp4')
            _print(f'ASCII video saved to: {video_path}')

    return VideoResult(len(frames), str(ascii_dir), video_path)


def create_mp4(
        path: SomeSortOfPath, out_dir: SomeSortOfPath = 'output_video', out_path: Optional[SomeSortOfPath] = None,
        quiet: bool = False) -> str:

    """**Encode previously rendered frames in ``out_dir/ascii_frames`` into a video with the audio of ``path``.**

    :param path: The original video, used for its audio track.
    :param out_dir: The directory given to ``asciify``. Defaults to 'output_video'.
    :param out_path: The output video. Defaults to ``out_dir/ascii_art_video.mp4``.
    :param quiet: Set to True to avoid printing to the console. Defaults to False.
    :return: The output path.
    """

    _print = utils.conditional_print(quiet)
    path = _check_input(path)
    out_dir = Path(out_dir)
    if out_path is None:
        out_path = out_dir / 'ascii_art_video.mp4'
    resp = BatchAsciifier(CoreRenderer(), quiet).encode(path, out_dir / 'ascii_frames', out_path)
    _print(f'ASCII video saved to: {resp}')
    return resp


def asciify_text(
        path: SomeSortOfPath, out_dir: SomeSortOfPath = 'output_txt', font_size: int = 7, density: int = 1,
        output_height: int = 100, frames_per_file: int = 100, workers: Optional[int] = None,
        quiet: bool = False) -> int:

    """**Convert a video to plain ASCII text, split over files of ``frames_per_file`` frames.**

    The files are named ``ascii_frames_0.txt``, ``ascii_frames_1.txt``... in ``out_dir``. Frames inside a file are
    separated by a blank line.

        >>> asciify_text('foo.mp4')
        3

    :param path: The path to the video file.
    :param out_dir: The output directory. Created if missing. Defaults to 'output_txt'.
    :param font_size: Base of the sampling step: one character per ``font_size + density`` pixels. Defaults to 7.
    :param density: Added to the font size to get the sampling step. Defaults to 1.
    :param output_height: The pixel height frames are resized to before sampling. Defaults to 100.
    :param frames_per_file: The number of frames in every text file. Defaults to 100.
    :param workers: The number of processes rendering frames. Defaults to rendering in this process.
    :param quiet: Set to True to avoid printing progress to the console. Defaults to False.
    :return: The number of text files written.
    """

    _print = utils.conditional_print(quiet)
    path = _check_input(path)
    out_dir = Path(out_dir)
    frames_dir = out_dir / 'temp_frames'
    frames_dir.mkdir(parents=True, exist_ok=True)

    renderer = CoreRenderer(font_size, density, output_height)

    with BatchAsciifier(renderer, quiet, workers) as batch:
        _print('Converting video to ASCII text...')
        frames = batch.extract(path, frames_dir)
        files = batch.text_frames(frames, out_dir, frames_per_file)

    _print(f'ASCII text files saved to: {out_dir}')
    return files
