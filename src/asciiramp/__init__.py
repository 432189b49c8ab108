"""
:Version: 0.1.0

asciiramp
=========

Turn images, GIFs and videos into ASCII art, drawn on a canvas or as plain text.

`asciiramp` resizes the source to a chosen height, reads it on a regular grid, averages the red, green and blue of
every grid point and swaps it for a glyph from a fixed brightness ramp::

    ' '  <  51  <=  "'"  <  102  <=  ':'  <  140  <=  'i'  <  170  <=  'I'  <  200  <=  'J'  <  210  <=  '$'

Fully transparent points are left empty.

Basic Usage
-----------

Use the corresponding function depending on your use case:

- ``image.asciify()`` converts an image to an ASCII art image, ``output/ascii_art.png``.

- ``image.gif_asciify()`` does the same with the **first frame** of a GIF and tells you how many frames it skipped.

- ``image.asciify_text()`` converts an image to text. The text is returned and optionally saved.

- ``video.asciify()`` converts a video to ASCII art frames and an mp4, ``output_video/ascii_art_video.mp4``.

- ``video.asciify_text()`` converts a video to text files of 100 frames each, ``output_txt/ascii_frames_0.txt``...

All of them take the **path** of the input file as the first argument. The rest of the arguments have
**default values**, which differ between image, video and text output:

    >>> import asciiramp as ar
    >>> ar.image.asciify('foo.png')
    'output/ascii_art.png'

The spacing between glyphs is ``font_size + distance`` pixels (``font_size + density`` for text). A negative
distance makes glyphs overlap, and anything that adds up to less than one pixel is treated as one.

Video needs the ``ffmpeg`` executable on the PATH. Passing ``workers`` to the video functions renders frames in
several processes; the output order never changes, but the entry point of your code then **needs** a
``if __name__ == '__main__'`` check.

The same is available from the command line, see ``python -m asciiramp --help``.
"""

from . import image, video
from .core import *
from .typealiases import (
    AsciirampException, DecodeError, ZeroDimensionError, ExtractionError, EncodingError, WriteError)


__version__ = '0.1.0'
