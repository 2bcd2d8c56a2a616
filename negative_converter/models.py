"""Data models for negative conversion."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

MAX_VALUE = 65535
"""Largest representable 16-bit channel value."""


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle as (min_x, min_y, max_x, max_y).

    Coordinates are pixel units of one coordinate space (analysis or full
    resolution); max is exclusive when used for slicing.
    """

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def __post_init__(self):
        if self.min_x < 0 or self.min_y < 0:
            raise ValueError(f"Rectangle coordinates must be >= 0, got {self.as_tuple()}")
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"Rectangle min must be <= max, got {self.as_tuple()}")

    @classmethod
    def from_corners(cls, corners: np.ndarray, width: int, height: int) -> Rectangle:
        """Create the bounding rectangle of float corner points, clamped to the image."""
        xs = np.clip(corners[:, 0], 0, width)
        ys = np.clip(corners[:, 1], 0, height)
        return cls(
            int(np.floor(xs.min())),
            int(np.floor(ys.min())),
            int(np.ceil(xs.max())),
            int(np.ceil(ys.max())),
        )

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def aspect_ratio(self) -> float:
        """Return width/height, or 0 for a rectangle without height."""
        if self.height == 0:
            return 0.0
        return self.width / self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def scaled(self, scale_x: float, scale_y: float) -> Rectangle:
        """Return rectangle with coordinates multiplied by the scale factors."""
        return Rectangle(
            int(round(self.min_x * scale_x)),
            int(round(self.min_y * scale_y)),
            int(round(self.max_x * scale_x)),
            int(round(self.max_y * scale_y)),
        )

    def clamped(self, width: int, height: int) -> Rectangle:
        """Return rectangle clamped to an image of the given size."""
        min_x = min(self.min_x, width)
        min_y = min(self.min_y, height)
        return Rectangle(
            min_x,
            min_y,
            max(min_x, min(self.max_x, width)),
            max(min_y, min(self.max_y, height)),
        )

    def contains(self, other: Rectangle) -> bool:
        """Check if other lies fully inside this rectangle."""
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return rectangle as (min_x, min_y, max_x, max_y) tuple."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)


@dataclass
class Border:
    """Located film frame with samples of its backing material."""

    bounds: Rectangle
    """Frame bounds in full-resolution coordinates."""

    samples: np.ndarray
    """Full-resolution (x, y) coordinates of border pixels, shape (N, 2)."""

    def __post_init__(self):
        if len(self.samples) == 0:
            raise ValueError("Border requires at least one sample")


@dataclass
class AnalysisImage:
    """Downscaled grayscale copy used for geometry detection."""

    gray: np.ndarray
    scale_x: float
    """analysis width / full width"""
    scale_y: float
    """analysis height / full height"""
    full_width: int
    full_height: int

    @property
    def width(self) -> int:
        return self.gray.shape[1]

    @property
    def height(self) -> int:
        return self.gray.shape[0]

    def to_full(self, rect: Rectangle) -> Rectangle:
        """Map an analysis-space rectangle to full resolution."""
        return rect.scaled(1 / self.scale_x, 1 / self.scale_y).clamped(
            self.full_width, self.full_height
        )

    def to_analysis(self, rect: Rectangle) -> Rectangle:
        """Map a full-resolution rectangle to analysis space."""
        return rect.scaled(self.scale_x, self.scale_y).clamped(self.width, self.height)

    def points_to_full(self, points: np.ndarray) -> np.ndarray:
        """Map analysis (x, y) pixels to the centre of their full-resolution footprint."""
        xs = np.rint((points[:, 0] + 0.5) / self.scale_x - 0.5)
        ys = np.rint((points[:, 1] + 0.5) / self.scale_y - 0.5)
        xs = np.clip(xs, 0, self.full_width - 1)
        ys = np.clip(ys, 0, self.full_height - 1)
        return np.stack([xs, ys], axis=1).astype(np.int64)


@dataclass
class ToneCutoffs:
    """Per-channel black and white points chosen by one stretch pass."""

    low: list[int]
    high: list[int]


# =============================================================================
# Configuration Classes
# =============================================================================


@dataclass
class PreprocessParams:
    """Parameters for the analysis copy."""

    max_dimension: int = 500

    def validate(self) -> None:
        """Validate parameter ranges."""
        if not (64 <= self.max_dimension <= 4000):
            raise ValueError(
                f"preprocess.max_dimension must be 64-4000, got {self.max_dimension}"
            )


@dataclass
class CannyParams:
    """Parameters for Canny edge detection."""

    low: int = 3
    high: int = 100

    def validate(self) -> None:
        """Validate parameter ranges."""
        if not (0 <= self.low <= 255):
            raise ValueError(f"canny.low must be 0-255, got {self.low}")
        if not (0 <= self.high <= 255):
            raise ValueError(f"canny.high must be 0-255, got {self.high}")
        if self.low >= self.high:
            raise ValueError(f"canny.low ({self.low}) must be < canny.high ({self.high})")


@dataclass
class LocatorParams:
    """Parameters for locating the frame in the analysis copy."""

    dark_threshold: int = 20
    light_threshold: int = 240
    median_radius: int = 1
    contrast: float = 50.0
    min_contour_points: int = 45
    canny: CannyParams = field(default_factory=CannyParams)

    def validate(self) -> None:
        """Validate parameter ranges."""
        if not (0 <= self.dark_threshold <= 255):
            raise ValueError(f"locator.dark_threshold must be 0-255, got {self.dark_threshold}")
        if not (0 <= self.light_threshold <= 255):
            raise ValueError(
                f"locator.light_threshold must be 0-255, got {self.light_threshold}"
            )
        if self.dark_threshold >= self.light_threshold:
            raise ValueError(
                f"locator.dark_threshold ({self.dark_threshold}) must be < "
                f"light_threshold ({self.light_threshold})"
            )
        if not (0 <= self.median_radius <= 10):
            raise ValueError(f"locator.median_radius must be 0-10, got {self.median_radius}")
        if not (-100.0 < self.contrast <= 200.0):
            raise ValueError(f"locator.contrast must be -100-200, got {self.contrast}")
        if self.min_contour_points < 1:
            raise ValueError(
                f"locator.min_contour_points must be >= 1, got {self.min_contour_points}"
            )
        self.canny.validate()


@dataclass
class SamplerParams:
    """Parameters for sampling the film border."""

    method: str = "modal"
    gap_fraction: float = 0.03

    def validate(self) -> None:
        """Validate the configuration."""
        valid_methods = {"modal", "candidates"}
        if self.method not in valid_methods:
            raise ValueError(f"sampler.method must be one of {valid_methods}")
        if not (0.01 <= self.gap_fraction <= 0.05):
            raise ValueError(f"sampler.gap_fraction must be 0.01-0.05, got {self.gap_fraction}")


@dataclass
class ToneParams:
    """Parameters for the two-pass tone stretch."""

    max_pixels_pct: float = 0.002
    max_pixels_pct_diff: float = 0.001
    max_clip_pct: float = 0.005
    bins: int = 256
    smoothing: int = 3

    def validate(self) -> None:
        """Validate parameter ranges."""
        if not (0.0 < self.max_pixels_pct < 0.5):
            raise ValueError(f"tone.max_pixels_pct must be 0-0.5, got {self.max_pixels_pct}")
        if not (0.0 < self.max_pixels_pct_diff < 0.5):
            raise ValueError(
                f"tone.max_pixels_pct_diff must be 0-0.5, got {self.max_pixels_pct_diff}"
            )
        if not (0.0 < self.max_clip_pct < 0.5):
            raise ValueError(f"tone.max_clip_pct must be 0-0.5, got {self.max_clip_pct}")
        if not (2 <= self.bins <= MAX_VALUE + 1) or (MAX_VALUE + 1) % self.bins != 0:
            raise ValueError(f"tone.bins must be a power of two 2-65536, got {self.bins}")
        if not (1 <= self.smoothing <= 15):
            raise ValueError(f"tone.smoothing must be 1-15, got {self.smoothing}")


@dataclass
class ConversionConfig:
    """Complete configuration for negative conversion."""

    preprocess: PreprocessParams = field(default_factory=PreprocessParams)
    locator: LocatorParams = field(default_factory=LocatorParams)
    sampler: SamplerParams = field(default_factory=SamplerParams)
    tone: ToneParams = field(default_factory=ToneParams)

    def validate(self) -> None:
        """Validate all configuration."""
        self.preprocess.validate()
        self.locator.validate()
        self.sampler.validate()
        self.tone.validate()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversionConfig:
        """Create ConversionConfig from dictionary.

        Unknown sections or keys raise ValueError.
        """
        config = cls()

        for section, values in data.items():
            if section not in ("preprocess", "locator", "sampler", "tone"):
                raise ValueError(f"Unknown config section: {section}")
            params = getattr(config, section)
            for key, value in values.items():
                if key == "canny" and section == "locator":
                    for canny_key, canny_value in value.items():
                        _set_param(config.locator.canny, "locator.canny", canny_key, canny_value)
                else:
                    _set_param(params, section, key, value)

        config.validate()
        return config

    @classmethod
    def from_json(cls, json_str: str) -> ConversionConfig:
        """Parse ConversionConfig from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> ConversionConfig:
        """Load ConversionConfig from JSON file."""
        with open(path) as f:
            return cls.from_json(f.read())

    @classmethod
    def default_json(cls) -> str:
        """Return default configuration as formatted JSON string."""
        config = cls()
        return config.to_json()


def _set_param(params: Any, section: str, key: str, value: Any) -> None:
    if not hasattr(params, key):
        raise ValueError(f"Unknown config key: {section}.{key}")
    setattr(params, key, value)
