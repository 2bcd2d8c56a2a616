"""Command-line interface for negative conversion."""

import argparse
import logging
import sys
from pathlib import Path

DEFAULT_DELIM = "_"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger once."""
    logger = logging.getLogger("negative_converter")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Avoid duplicate handlers when main() runs more than once
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - [%(name)s] - %(message)s")
    )
    logger.addHandler(handler)
    return logger


def parse_config(config_arg: str | None):
    """Parse conversion config from CLI argument.

    Args:
        config_arg: Either inline JSON string or path to .json file

    Returns:
        ConversionConfig object (defaults if not provided)
    """
    from .models import ConversionConfig

    if not config_arg:
        return ConversionConfig()

    # Check if it looks like a file path
    config_path = Path(config_arg)
    if config_path.exists() and config_path.suffix == ".json":
        return ConversionConfig.from_file(config_path)

    # Try parsing as inline JSON
    try:
        return ConversionConfig.from_json(config_arg)
    except Exception as e:
        raise ValueError(f"Invalid --config: {e}")


def add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    """Add conversion arguments to a parser."""
    parser.add_argument("inputs", nargs="+", help="Input scans (camera RAW or 16-bit TIFF/PNG)")
    parser.add_argument("-o", "--output-dir", help="Output directory (default: next to input)")
    parser.add_argument("--prefix", default="", help="Prefix for output filename")
    parser.add_argument("--suffix", default="positive", help="Suffix for output filename")
    parser.add_argument(
        "--delim",
        help="Delimiter between prefix/name/suffix (auto-detected from filename if not set)",
    )
    parser.add_argument(
        "--default-delim",
        default=DEFAULT_DELIM,
        help=f"Default delimiter if not detected (default: '{DEFAULT_DELIM}')",
    )
    parser.add_argument(
        "--format",
        default="tiff",
        help="Output file format extension, e.g. tiff, png, jpg (default: tiff)",
    )
    parser.add_argument(
        "-r",
        "--ratio",
        default="3/2",
        help="Frame aspect ratio, e.g. 3/2, 6/6, 6/4.5, 4/5 (orientation auto-detected from image)",
    )
    parser.add_argument(
        "--crop-in",
        type=float,
        default=0.0,
        help="Percentage of the image size to crop inward from the frame edges (0-25)",
    )
    parser.add_argument(
        "--debug-dir",
        help="Directory to save debug visualization images (one subdirectory per input)",
    )
    parser.add_argument(
        "--config",
        help="JSON conversion configuration (inline JSON string or path to .json file)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Number of files to convert in parallel (default: 1)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")


def run_convert(args: argparse.Namespace) -> None:
    """Convert negative scans to positives."""
    from .batch import ConversionOptions, convert_batch, parse_aspect_ratio

    configure_logging(args.verbose)

    if not (0.0 <= args.crop_in <= 25.0):
        sys.exit(f"--crop-in must be 0-25, got {args.crop_in}")

    try:
        parse_aspect_ratio(args.ratio, landscape=True)
    except ValueError:
        sys.exit(f"--ratio must look like 3/2, 6:6 or 1.5, got {args.ratio!r}")

    try:
        config = parse_config(args.config)
    except (ValueError, OSError) as e:
        sys.exit(str(e))

    options = ConversionOptions(
        output_dir=Path(args.output_dir) if args.output_dir else None,
        ratio=args.ratio,
        inset=args.crop_in / 100,
        prefix=args.prefix,
        suffix=args.suffix,
        delim=args.delim,
        default_delim=args.default_delim,
        extension="." + args.format.lstrip("."),
        debug_dir=Path(args.debug_dir) if args.debug_dir else None,
        config=config,
    )

    results = convert_batch(args.inputs, options, jobs=args.jobs)

    failures = [r for r in results if not r.ok]
    for result in failures:
        print(f"{result.input_path}: {result.user_message}", file=sys.stderr)

    sys.exit(1 if failures else 0)


def run_config(args: argparse.Namespace) -> None:
    """Print the default conversion configuration."""
    from .models import ConversionConfig

    print(ConversionConfig.default_json())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Film negative to positive conversion tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  negative-convert convert scan.NEF                    Convert one RAW scan
  negative-convert convert *.NEF -j 4 -o positives/    Convert a folder in parallel
  negative-convert convert scan.tiff -r 6/6 --crop-in 1
  negative-convert config > config.json                Write the default configuration
""",
    )
    subparsers = parser.add_subparsers(dest="command")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert negative scans to positives",
    )
    add_convert_arguments(convert_parser)
    convert_parser.set_defaults(func=run_convert)

    config_parser = subparsers.add_parser(
        "config",
        help="Print the default conversion configuration as JSON",
    )
    config_parser.set_defaults(func=run_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    args.func(args)


if __name__ == "__main__":
    main()
