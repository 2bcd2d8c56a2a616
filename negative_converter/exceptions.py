"""Custom exceptions for negative conversion."""


class ConversionError(Exception):
    """Base exception for negative conversion errors."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message


class GeometryError(ConversionError):
    """No usable frame border, border samples or crop rectangle."""

    def __init__(self, detail: str = ""):
        msg = f"Frame geometry error: {detail}" if detail else "Frame geometry error"
        super().__init__(
            msg,
            "Could not locate the film frame. The scan may not show a clear film border.",
        )


class ToneMapError(ConversionError):
    """A channel has no dynamic range left to stretch."""

    def __init__(self, channel: int, low: int, high: int):
        super().__init__(
            f"Channel {channel} has zero dynamic range (low={low}, high={high})",
            "Could not stretch image tones. The frame appears to be a single flat color.",
        )
        self.channel = channel
        self.low = low
        self.high = high


class DecodeError(ConversionError):
    """Failed to decode the input into a 16-bit RGB raster."""

    def __init__(self, path: str, detail: str = ""):
        msg = f"Could not decode {path}: {detail}" if detail else f"Could not decode {path}"
        super().__init__(
            msg,
            "Could not decode image. Only 16-bit RGB images and camera RAW files are supported.",
        )


class ImageReadError(ConversionError, OSError):
    """Failed to read input image."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not read image: {path}",
            "Could not read image file. The file may be missing or unreadable.",
        )


class ImageWriteError(ConversionError, OSError):
    """Failed to write output image."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not write image: {path}",
            "Could not write output image. Check the output directory and file format.",
        )
