"""Batch conversion of many scans."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ConversionError
from .models import ConversionConfig

logger = logging.getLogger(__name__)


@dataclass
class ConversionOptions:
    """Settings shared by every file of a batch."""

    output_dir: Path | None = None
    ratio: str = "3/2"
    inset: float = 0.0
    prefix: str = ""
    suffix: str = "positive"
    delim: str | None = None
    default_delim: str = "_"
    extension: str = ".tiff"
    debug_dir: Path | None = None
    config: ConversionConfig = field(default_factory=ConversionConfig)


@dataclass
class ConversionResult:
    """Outcome of converting one file."""

    input_path: Path
    output_path: Path | None = None
    error: str | None = None
    user_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_aspect_ratio(value: str, landscape: bool) -> float:
    """Parse aspect ratio string and orient based on image orientation.

    Ratios like 3/2 and 2/3 are treated as equivalent - the orientation
    is determined by the image dimensions, not the input order.
    """
    for sep in ["/", ":"]:
        if sep in value:
            a, b = map(float, value.split(sep, 1))
            break
    else:
        a, b = float(value), 1.0

    if a <= 0 or b <= 0:
        raise ValueError(f"Invalid aspect ratio: {value}")

    # Normalize: return width/height based on image orientation
    long, short = max(a, b), min(a, b)
    return long / short if landscape else short / long


def detect_delim(filename: str) -> str | None:
    """Detect delimiter from filename by finding most common separator."""
    stem = Path(filename).stem
    for delim in ["_", "-", "."]:
        if delim in stem:
            return delim
    return None


def build_output_path(input_path: Path, options: ConversionOptions) -> Path:
    """Build the output path from prefix, input stem and suffix."""
    delim = options.delim or detect_delim(input_path.name) or options.default_delim
    parts = []
    if options.prefix:
        parts.append(options.prefix)
    parts.append(input_path.stem)
    if options.suffix:
        parts.append(options.suffix)

    output_dir = options.output_dir or input_path.parent
    return output_dir / (delim.join(parts) + options.extension)


def convert_file(input_path: str | Path, options: ConversionOptions) -> Path:
    """Load, convert and save one scan.

    Returns:
        Path of the written positive

    Raises:
        ConversionError: If any step fails
    """
    from .pipeline import convert
    from .raw import load_image, save_image

    input_path = Path(input_path)
    raster = load_image(input_path)

    img_h, img_w = raster.shape[:2]
    aspect_ratio = parse_aspect_ratio(options.ratio, img_w >= img_h)

    visualizer = None
    if options.debug_dir:
        from .visualizer import DebugVisualizer

        visualizer = DebugVisualizer(Path(options.debug_dir) / input_path.stem)

    positive = convert(raster, aspect_ratio, options.inset, visualizer, options.config)

    output_path = build_output_path(input_path, options)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return save_image(output_path, positive)


def _convert_one(input_path: Path, options: ConversionOptions) -> ConversionResult:
    """Convert one file, capturing its failure as a result."""
    logger.info("Converting %s", input_path)
    try:
        output_path = convert_file(input_path, options)
    except ConversionError as e:
        logger.error("Failed to convert %s: %s", input_path, e.message)
        return ConversionResult(input_path, error=e.message, user_message=e.user_message)
    except Exception as e:
        logger.error(
            "Unexpected error converting %s: %s: %s",
            input_path,
            type(e).__name__,
            e,
            exc_info=True,
        )
        msg = f"Unexpected error: {e}"
        return ConversionResult(input_path, error=msg, user_message=msg)

    return ConversionResult(input_path, output_path=output_path)


def convert_batch(
    paths: list[str | Path],
    options: ConversionOptions,
    jobs: int = 1,
) -> list[ConversionResult]:
    """Convert many scans, one process per file up to ``jobs`` at a time.

    A file that fails is reported in its result; the other files are still
    converted. Results are returned in input order.

    Args:
        paths: Input scans
        options: Settings shared by every file
        jobs: Number of worker processes (1 converts in this process)

    Returns:
        One ConversionResult per input path
    """
    paths = [Path(p) for p in paths]

    if jobs <= 1 or len(paths) <= 1:
        results = [_convert_one(path, options) for path in paths]
    else:
        by_path: dict[Path, ConversionResult] = {}
        with ProcessPoolExecutor(max_workers=jobs) as executor:
            futures = {executor.submit(_convert_one, path, options): path for path in paths}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    by_path[path] = future.result()
                except Exception as e:
                    # Worker died before it could report (e.g. out of memory)
                    logger.error("Worker failed on %s: %s", path, e)
                    msg = f"Worker failed: {e}"
                    by_path[path] = ConversionResult(path, error=msg, user_message=msg)
        results = [by_path[path] for path in paths]

    failed = sum(1 for r in results if not r.ok)
    logger.info("Converted %d of %d files", len(results) - failed, len(results))
    return results
