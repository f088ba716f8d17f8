"""Command-line interface for PDF to reflowable HTML conversion."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from pdfreflow import __version__
from pdfreflow.converter import MARKUP_FORMATS, PDFReflower, ReflowOptions


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments. Uses sys.argv if None.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="pdfreflow",
        description="Reconstruct headings, paragraphs and images from PDF documents as clean, reflowable HTML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pdfreflow paper.pdf                     Convert to stdout
  pdfreflow paper.pdf -o paper.html       Convert to file
  pdfreflow paper.pdf --standalone        Emit a complete HTML page
  pdfreflow *.pdf -o ./output/            Batch convert multiple files
        """,
    )

    parser.add_argument(
        "input",
        nargs="+",
        type=Path,
        help="Input PDF file(s) to convert",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file or directory. If directory, creates .html files with same names as inputs.",
    )

    parser.add_argument(
        "--width",
        type=float,
        default=595.0,
        help="Layout width in points for reflowable documents (default: 595)",
    )

    parser.add_argument(
        "--height",
        type=float,
        default=842.0,
        help="Layout height in points for reflowable documents (default: 842)",
    )

    parser.add_argument(
        "--em-size",
        type=float,
        default=12.0,
        help="Base font size in points for reflowable documents (default: 12)",
    )

    parser.add_argument(
        "--markup",
        choices=MARKUP_FORMATS,
        default="html",
        dest="markup_format",
        help="Markup flavour requested from the PDF engine (default: html)",
    )

    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Do not extract or reference images",
    )

    parser.add_argument(
        "--no-hyphenation",
        action="store_true",
        help="Do not rejoin words hyphenated across lines",
    )

    parser.add_argument(
        "--no-paragraph-merge",
        action="store_true",
        help="Do not merge paragraphs split by layout boundaries",
    )

    parser.add_argument(
        "--no-heading-merge",
        action="store_true",
        help="Do not merge heading continuations and same-level headings",
    )

    parser.add_argument(
        "--standalone",
        action="store_true",
        help="Wrap the output in a complete HTML document",
    )

    parser.add_argument(
        "--dump-raw",
        type=Path,
        dest="raw_markup_path",
        help="Write the raw per-page markup from the PDF engine to this file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print progress information to stderr",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def create_options(args: argparse.Namespace) -> ReflowOptions:
    """Create ReflowOptions from parsed arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Configured ReflowOptions object.
    """
    return ReflowOptions(
        width=args.width,
        height=args.height,
        em_size=args.em_size,
        preserve_images=not args.no_images,
        markup_format=args.markup_format,
        fix_hyphenation=not args.no_hyphenation,
        merge_paragraphs=not args.no_paragraph_merge,
        merge_headings=not args.no_heading_merge,
        standalone=args.standalone,
        raw_markup_path=args.raw_markup_path,
    )


def raw_markup_path_for(raw_markup_path: Path | None, input_path: Path, batch: bool) -> Path | None:
    """Return where to dump an input's raw markup.

    In batch mode each input gets its own `<stem>.raw.html` next to the
    requested dump path so files do not overwrite each other.
    """
    if raw_markup_path is None or not batch:
        return raw_markup_path
    return raw_markup_path.parent / (input_path.stem + ".raw.html")


def create_reflower(options: ReflowOptions, input_path: Path, batch: bool) -> PDFReflower:
    """Create a PDFReflower for one input file."""
    raw_markup_path = raw_markup_path_for(options.raw_markup_path, input_path, batch)
    return PDFReflower(replace(options, raw_markup_path=raw_markup_path))


def process_single_file(input_path: Path, output_path: Path | None, reflower: PDFReflower, verbose: bool) -> bool:
    """Process a single PDF file.

    Args:
        input_path: Path to the input PDF.
        output_path: Path to write output, or None for stdout.
        reflower: Configured PDFReflower instance.
        verbose: Whether to print progress messages.

    Returns:
        True if conversion succeeded, False otherwise.
    """
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return False

    if not input_path.suffix.lower() == ".pdf":
        print(f"Warning: {input_path} may not be a PDF file", file=sys.stderr)

    if verbose:
        print(f"Converting: {input_path}", file=sys.stderr)

    try:
        html = reflower.convert_file(input_path, output_path)

        if output_path:
            if verbose:
                print(f"  -> {output_path}", file=sys.stderr)
        else:
            print(html)

        return True

    except Exception as e:
        print(f"Error converting {input_path}: {e}", file=sys.stderr)
        return False


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments. Uses sys.argv if None.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    parsed_args = parse_args(args)

    if parsed_args.verbose:
        logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    options = create_options(parsed_args)

    input_files = parsed_args.input
    batch = len(input_files) > 1
    output = parsed_args.output
    verbose = parsed_args.verbose

    success_count = 0
    error_count = 0

    if output and batch:
        # Output is a directory for multiple files.
        output.mkdir(parents=True, exist_ok=True)
        for input_path in input_files:
            output_path = output / (input_path.stem + ".html")
            reflower = create_reflower(options, input_path, batch)
            if process_single_file(input_path, output_path, reflower, verbose):
                success_count += 1
            else:
                error_count += 1
    else:
        # Single file or stdout.
        for input_path in input_files:
            reflower = create_reflower(options, input_path, batch)
            if process_single_file(input_path, output, reflower, verbose):
                success_count += 1
            else:
                error_count += 1

    if verbose and batch:
        print(f"\nProcessed {success_count} files, {error_count} errors", file=sys.stderr)

    return 0 if error_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
