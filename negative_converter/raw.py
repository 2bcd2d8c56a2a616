"""Reading scans and writing converted images."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
import rawpy

from .exceptions import DecodeError, ImageReadError, ImageWriteError
from .preprocess import check_raster

logger = logging.getLogger(__name__)

RAW_EXTENSIONS = {
    ".3fr", ".arw", ".cr2", ".cr3", ".crw", ".dcr", ".dng", ".erf", ".iiq", ".k25",
    ".kdc", ".mef", ".mos", ".mrw", ".nef", ".nrw", ".orf", ".pef", ".raf", ".raw",
    ".rw2", ".rwl", ".sr2", ".srf", ".srw", ".x3f",
}  # fmt: skip

EIGHT_BIT_EXTENSIONS = {".jpg", ".jpeg", ".jpe", ".bmp", ".webp"}


def load_raw(path: str | Path) -> np.ndarray:
    """Decode a camera RAW file into a linear 16-bit RGB raster.

    LibRaw is asked for linear output with the camera white balance and no
    automatic brightening, so the film base keeps its real color.

    Raises:
        ImageReadError: If the file does not exist
        DecodeError: If LibRaw cannot decode the file
    """
    path = Path(path)
    if not path.is_file():
        raise ImageReadError(str(path))

    try:
        with rawpy.imread(str(path)) as raw:
            rgb = raw.postprocess(
                output_bps=16,
                gamma=(1, 1),
                use_camera_wb=True,
                no_auto_bright=True,
                adjust_maximum_thr=0.0,
            )
    except rawpy.LibRawError as e:
        raise DecodeError(str(path), str(e)) from e

    check_raster(rgb, str(path))
    return rgb


def load_image(path: str | Path) -> np.ndarray:
    """Load a negative scan as a 16-bit RGB raster.

    Camera RAW files are decoded with LibRaw; other files (16-bit TIFF or
    PNG scans) are read as they are.

    Raises:
        ImageReadError: If the file does not exist or cannot be read
        DecodeError: If the image is not 16-bit RGB
    """
    path = Path(path)
    if path.suffix.lower() in RAW_EXTENSIONS:
        return load_raw(path)

    if not path.is_file():
        raise ImageReadError(str(path))

    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ImageReadError(str(path))
    if img.ndim != 3 or img.shape[2] != 3:
        raise DecodeError(str(path), f"expected 3 color channels, got shape {img.shape}")

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    check_raster(rgb, str(path))
    return rgb


def save_image(path: str | Path, raster: np.ndarray) -> Path:
    """Write a 16-bit RGB raster.

    Formats without 16-bit support (e.g. JPEG) get an 8-bit copy instead,
    as does any format whose 16-bit write fails.

    Raises:
        ImageWriteError: If the image cannot be written at all
    """
    path = Path(path)
    bgr = cv2.cvtColor(raster, cv2.COLOR_RGB2BGR)

    if path.suffix.lower() not in EIGHT_BIT_EXTENSIONS and _imwrite(path, bgr):
        logger.info("Saved %s", path)
        return path

    if not _imwrite(path, (bgr >> 8).astype(np.uint8)):
        raise ImageWriteError(str(path))
    logger.info("Saved (8-bit) %s", path)
    return path


def _imwrite(path: Path, img: np.ndarray) -> bool:
    try:
        return bool(cv2.imwrite(str(path), img))
    except cv2.error as e:
        logger.debug("Could not write %s: %s", path, e)
        return False
