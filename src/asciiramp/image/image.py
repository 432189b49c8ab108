from typing import Optional
from pathlib import Path
import warnings
from PIL import Image
from ..core import CoreRenderer, BatchAsciifier, GifResult, DEFAULT_COLOR, ASCII_BLACK
from .. import utils
from ..typealiases import SomeSortOfPath, Color


__all__ = ['asciify', 'asciify_text', 'gif_asciify']


def asciify(
        path: SomeSortOfPath, out_dir: SomeSortOfPath = 'output', font_size: int = 12, distance: int = -3,
        output_height: int = 700, color: Color = DEFAULT_COLOR, transparent: bool = False,
        font_path: Optional[str] = None, quiet: bool = False) -> str:

    """**Convert an image to ASCII art and save it as ``ascii_art.png`` in ``out_dir``.**

        >>> asciify('foo.png')
        'output/ascii_art.png'

        >>> asciify('foo.png', 'art', font_size=8, output_height=1080, color='white')
        'art/ascii_art.png'

    :param path: The path to the image file.
    :param out_dir: The output directory. Created if missing. Defaults to 'output'.
    :param font_size: The glyph size in pixels. Defaults to 12.
    :param distance: Added to the font size to get the spacing between glyphs. Defaults to -3 (slight overlap).
    :param output_height: The pixel height of the new image. The width keeps the source proportions.
        Defaults to 700.
    :param color: The color of the glyphs. Defaults to '#00ff22'.
    :param transparent: Leave the background transparent instead of black. Defaults to False.
    :param font_path: A TrueType/OpenType font file. Defaults to Pillow's built-in font.
    :param quiet: Set to True to avoid printing to the console. Defaults to False.
    :return: The path of the saved image.
    """

    _print = utils.conditional_print(quiet)
    renderer = CoreRenderer(
        font_size, distance, output_height, color, None if transparent else ASCII_BLACK, font_path=font_path)

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = BatchAsciifier(renderer, quiet).render_one(path, out_dir / 'ascii_art.png')
    _print(f'ASCII art saved to: {out_path}')
    return out_path


def gif_asciify(
        path: SomeSortOfPath, out_dir: SomeSortOfPath = 'output', font_size: int = 12, distance: int = -3,
        output_height: int = 700, color: Color = DEFAULT_COLOR, transparent: bool = False,
        font_path: Optional[str] = None, quiet: bool = False) -> GifResult:

    """**Convert the first frame of a GIF to ASCII art.**

    Animated GIFs are not decoded frame by frame: only the first frame is rendered, a ``RuntimeWarning`` is
    issued when the GIF has more than one, and the returned ``GifResult`` says how many frames were skipped.

        >>> gif_asciify('foo.gif')
        GifResult(path='output/ascii_art.png', frames_processed=1, total_frames=24, single_frame_only=True)

    Takes the same parameters as ``asciify``.

    :return: A ``GifResult``.
    """

    _print = utils.conditional_print(quiet)
    _print('Processing GIF (first frame only)')
    out_path = asciify(path, out_dir, font_size, distance, output_height, color, transparent, font_path, quiet)

    with Image.open(path) as gif:
        total_frames = getattr(gif, 'n_frames', 1)
    if total_frames > 1:
        warnings.warn(
            f'\'{path}\' has {total_frames} frames, only the first one was converted.', RuntimeWarning)
    return GifResult(out_path, 1, total_frames)


def asciify_text(
        path: SomeSortOfPath, out_path: Optional[SomeSortOfPath] = None, font_size: int = 7, density: int = 1,
        output_height: int = 100, quiet: bool = False) -> str:

    """**Convert an image to plain ASCII text.**

        >>> print(asciify_text('foo.png', output_height=40))
        [Prints the ascii art]

        >>> asciify_text('foo.png', 'foo.txt')
        [Saves the ascii art in foo.txt and returns it]

    :param path: The path to the image file.
    :param out_path: Where to save the text. Defaults to not saving it.
    :param font_size: Base of the sampling step: one character per ``font_size + density`` pixels. Defaults to 7.
    :param density: Added to the font size to get the sampling step. Defaults to 1.
    :param output_height: The pixel height the image is resized to before sampling. Defaults to 100.
    :param quiet: Set to True to avoid printing to the console. Defaults to False.
    :return: The ascii art as a string, one line per row.
    """

    _print = utils.conditional_print(quiet)
    renderer = CoreRenderer(font_size, density, output_height)
    resp = BatchAsciifier(renderer, quiet).text_one(path, out_path)
    if out_path is not None:
        _print(f'ASCII text saved to: {out_path}')
    return resp
