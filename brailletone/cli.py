import argparse
import logging
import shutil
import sys
import textwrap
from functools import partial
from pathlib import Path

from brailletone.base import BRAILLE_COLS, BRAILLE_ROWS
from brailletone.errors import BrailleError
from brailletone.transformer import ImageTransformer

try:
    from PIL.Image import Image, open as image_open
except ImportError:
    raise ImportError(
        "Image display requires the Pillow library. Please install it with 'pip install Pillow'."
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brailletone",
        description="Convert images to braille text.",
        usage=textwrap.dedent(
            """
            Convert an image to braille, writing to the terminal or to a file.
            By default, the output is as wide as the terminal and its height follows
            the image's aspect ratio. A specific size can be given with the --size option.

              Examples:

                # Convert an image to braille and display it in the terminal:
                $ brailletone input.png

                # Convert an image to 40x20 characters and save it to a file:
                $ brailletone input.png -s 40 20 -o output.txt

                # Plot lighter areas too, and ignore pixels between dots:
                $ brailletone input.png --threshold 0.3 --edge-weight 0

                # Write an HTML page instead of plain text:
                $ brailletone input.png --html -o output.html
            """
        ).strip(),
        add_help=True,
    )
    parser.add_argument(
        "input",
        type=Path,
        help="The input image.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        type=Path,
        help="Output file. If not specified, output will be written to stdout.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Output logs verbosely",
    )
    parser.add_argument(
        "-s",
        "--size",
        type=int,
        nargs=2,
        default=None,
        metavar=("WIDTH", "HEIGHT"),
        help="size of the output in characters",
    )
    parser.add_argument(
        "-k",
        "--keep-ratio",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="derive the height from the image's aspect ratio when no size is given",
    )
    parser.add_argument(
        "-t",
        "--tracking",
        type=int,
        default=0,
        help="extra spacing between characters, in dots",
    )
    parser.add_argument(
        "-l",
        "--leading",
        type=int,
        default=0,
        help="extra spacing between lines, in dots",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=0.5,
        help="darkness between 0 (white) and 1 (black) at which a dot is plotted",
    )
    parser.add_argument(
        "--edge-weight",
        type=float,
        default=1.0,
        help="weight of the pixels sitting between dots",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        default=False,
        help="write a compact HTML page instead of text (ignores tracking and leading)",
    )
    return parser


def output_size(image: Image, keep_ratio: bool) -> tuple[int, int]:
    """Size in characters used when none is given: fit the terminal's width."""
    term_size = shutil.get_terminal_size()
    width = max(1, term_size[0] - 1)
    if not keep_ratio:
        return width, max(1, term_size[1] - 1)

    # Braille dots are roughly square in a monospace font
    height_dots = width * BRAILLE_COLS * image.height / image.width
    return width, max(1, round(height_dots / BRAILLE_ROWS))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    log = partial(print, file=sys.stderr) if args.verbose else lambda message: None
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    log(f"Loading image {args.input}")
    try:
        image = image_open(args.input)
    except OSError as e:
        print(f"Unable to open image '{args.input}': {e}", file=sys.stderr)
        return 1

    with image:
        size = tuple(args.size) if args.size else output_size(image, args.keep_ratio)
        log(f"Converting image to braille with size {'x'.join(map(str, size))}")

        try:
            transformer = ImageTransformer(
                width=size[0],
                height=size[1],
                tracking=args.tracking,
                leading=args.leading,
                threshold=args.threshold,
                edge_weight=args.edge_weight,
            )
            if args.html:
                result_text = transformer.transform_compact_html(image)
            else:
                result_text = transformer.transform(image)
        except BrailleError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    if (output_file := args.output) is not None:
        log(f"Writing output to {output_file}")
        # newline="" keeps the CR-LF line endings untouched
        with output_file.open("w", encoding="utf-8", newline="") as f:
            f.write(result_text)
        log(f"Output written to {output_file}")
    else:
        sys.stdout.write(result_text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
