"""Command line interface for palmap."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from palmap.pipeline import Vectorizer
from palmap.raster_ingest import open_row_source
from palmap.types import VectorizeConfig, VectorizationError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='palmap',
        description='Extract ranked color palettes and trace flat-color SVG polygons',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  palmap palette photo.jpg --colors 8
  palmap vectorize mapped.png -o mapped.svg --min-area 16
  palmap vectorize photo.jpg --auto-palette --colors 6 --simplify 0.5
  palmap vectorize photo.jpg --auto-palette --dither --colors 4
        """,
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log pipeline stages'
    )

    # Lets --verbose follow the subcommand too; SUPPRESS keeps the top-level value
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '-v', '--verbose',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Log pipeline stages'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    palette = subparsers.add_parser(
        'palette', parents=[common], help='Print the ranked palette of an image'
    )
    palette.add_argument('input', type=str, help='Input image path')
    _add_clustering_args(palette)

    vectorize = subparsers.add_parser(
        'vectorize', parents=[common], help='Trace an image into SVG polygons'
    )
    vectorize.add_argument('input', type=str, help='Input image path')
    vectorize.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output SVG path (default: input name with .svg extension)'
    )
    vectorize.add_argument(
        '--simplify',
        type=float,
        default=0.35,
        help='Decimation ratio in [0, 1]; 1 keeps every traced point (default: 0.35)'
    )
    vectorize.add_argument(
        '--min-area',
        type=float,
        default=8.0,
        help='Minimum region area in pixels (default: 8)'
    )
    vectorize.add_argument(
        '--palette',
        nargs='+',
        default=None,
        metavar='HEX',
        help='Only trace regions of these colors'
    )
    vectorize.add_argument(
        '--auto-palette',
        action='store_true',
        help='Map the image onto its extracted palette before tracing'
    )
    vectorize.add_argument(
        '--dither',
        action='store_true',
        help='Use Floyd-Steinberg error diffusion when mapping onto the palette'
    )
    _add_clustering_args(vectorize)

    return parser


def _add_clustering_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-c', '--colors',
        type=int,
        default=10,
        help='Palette size (default: 10)'
    )
    parser.add_argument(
        '--iterations',
        type=int,
        default=8,
        help='Clustering iterations (default: 8)'
    )
    parser.add_argument(
        '--target-pixels',
        type=int,
        default=120000,
        help='Sampling budget for clustering (default: 120000)'
    )
    parser.add_argument(
        '--max-width',
        type=int,
        default=None,
        help='Downsize wider images on load'
    )


def _run_palette(parsed) -> int:
    config = VectorizeConfig(
        k=parsed.colors,
        iterations=parsed.iterations,
        target_pixels=parsed.target_pixels,
    )
    source = open_row_source(parsed.input, max_width=parsed.max_width)
    for hex_color in Vectorizer(config).palette(source):
        print(hex_color)
    return 0


def _run_vectorize(parsed) -> int:
    input_path = Path(parsed.input)
    output_path = Path(parsed.output) if parsed.output else input_path.with_suffix('.svg')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config = VectorizeConfig(
        k=parsed.colors,
        iterations=parsed.iterations,
        target_pixels=parsed.target_pixels,
        simplify=parsed.simplify,
        min_area=parsed.min_area,
        palette=parsed.palette,
    )

    print(f"Processing: {input_path}")
    print(f"  Simplify: {config.simplify}")
    print(f"  Min area: {config.min_area}")
    if config.palette:
        print(f"  Palette filter: {' '.join(config.palette)}")
    if parsed.auto_palette:
        print(f"  Auto palette: {config.k} colors")
    if parsed.dither:
        print("  Dither: on")

    Vectorizer(config).process(
        input_path,
        output_path,
        auto_palette=parsed.auto_palette,
        max_width=parsed.max_width,
        dither=parsed.dither,
    )
    print(f"  Output saved: {output_path}")
    return 0


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if getattr(parsed, 'verbose', False):
        logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')

    try:
        if parsed.command == 'palette':
            return _run_palette(parsed)
        return _run_vectorize(parsed)
    except (FileNotFoundError, VectorizationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
