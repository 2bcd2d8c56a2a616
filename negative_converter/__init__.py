"""Film negative to positive conversion."""

__version__ = "0.1.0"

_LAZY_IMPORTS = {
    "convert": ".pipeline",
    "locate_border": ".detection",
    "compute_crop": ".geometry",
    "calibrate_and_crop": ".calibration",
    "stretch_tone": ".tone",
    "Border": ".models",
    "ConversionConfig": ".models",
    "Rectangle": ".models",
}


def __getattr__(name):
    """Lazy import to avoid loading cv2 for CLI subcommands that don't need it."""
    if name in _LAZY_IMPORTS:
        from importlib import import_module

        return getattr(import_module(_LAZY_IMPORTS[name], __name__), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "convert",
    "locate_border",
    "compute_crop",
    "calibrate_and_crop",
    "stretch_tone",
    "Border",
    "ConversionConfig",
    "Rectangle",
]
