from typing import List, Optional
import argparse
import sys
from pathlib import Path
from . import image, video, __version__
from .typealiases import AsciirampException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='asciiramp', description='Transform images and videos into ASCII art.')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    commands = parser.add_subparsers(dest='command', metavar='command')

    for name, help_text in [
            ('image-to-ascii', 'Convert an image or GIF (first frame) to an ASCII art image.'),
            ('image-to-text', 'Convert an image to ASCII text.'),
            ('video-to-ascii', 'Convert a video to an ASCII art video.'),
            ('video-to-text', 'Convert a video to ASCII text files.')]:
        command = commands.add_parser(name, help=help_text, description=help_text)
        command.add_argument('input', help='Input file path.')
        command.add_argument('-o', '--output', help='Output directory (output file for image-to-text).')
        command.add_argument('--height', type=int, help='Output height in pixels.')
        command.add_argument('-f', '--font-size', type=int, help='Font size in pixels.')
        command.add_argument('-q', '--quiet', action='store_true', help='Do not print progress.')
        if name in ('image-to-ascii', 'video-to-ascii'):
            command.add_argument('-d', '--distance', type=int, help='Character distance (default: -3).')
            command.add_argument('-c', '--color', help='ASCII color (default: #00ff22).')
            command.add_argument('--font', dest='font_path', help='TrueType/OpenType font file.')
        else:
            command.add_argument('--density', type=int, help='Character distance (default: 1).')
        if name.startswith('video'):
            command.add_argument('-w', '--workers', type=int, help='Number of rendering processes.')
        if name == 'video-to-ascii':
            command.add_argument('--no-video', dest='encode', action='store_false', help='Only render the frames.')
        if name == 'video-to-text':
            command.add_argument('--frames-per-file', type=int, help='Frames per text file (default: 100).')
    return parser


def given(args: argparse.Namespace, *names: str) -> dict:
    """The options that were actually passed, so every function keeps its own defaults."""
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    options = given(args, 'font_size', 'quiet')
    if args.height is not None:
        options['output_height'] = args.height

    try:
        if args.command == 'image-to-ascii':
            options.update(given(args, 'distance', 'color', 'font_path'))
            out_dir = args.output or 'output'
            if Path(args.input).suffix.lower() == '.gif':
                image.gif_asciify(args.input, out_dir, **options)
            else:
                image.asciify(args.input, out_dir, **options)
        elif args.command == 'image-to-text':
            options.update(given(args, 'density'))
            text = image.asciify_text(args.input, args.output, **options)
            if args.output is None:
                print(text, end='')
        elif args.command == 'video-to-ascii':
            options.update(given(args, 'distance', 'color', 'font_path', 'workers'))
            video.asciify(args.input, args.output or 'output_video', encode=args.encode, **options)
        elif args.command == 'video-to-text':
            options.update(given(args, 'density', 'workers', 'frames_per_file'))
            video.asciify_text(args.input, args.output or 'output_txt', **options)
    except (AsciirampException, FileNotFoundError, ValueError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
