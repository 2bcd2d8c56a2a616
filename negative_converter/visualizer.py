"""Debug visualization utilities for negative conversion."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from .detection import FrameMasks
    from .models import Border, Rectangle, ToneCutoffs


def to_preview(raster: np.ndarray) -> np.ndarray:
    """Convert a 16-bit RGB raster to an 8-bit BGR image for drawing."""
    return cv2.cvtColor((raster >> 8).astype(np.uint8), cv2.COLOR_RGB2BGR)


class DebugVisualizer:
    """Saves debug images at each step of negative conversion.

    Images are tagged with the stage name and numbered in the order they
    were produced.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        if self.output_dir.exists():
            # Backup existing debug dir before cleaning
            backup_dir = self.output_dir.with_suffix(".bak")
            if backup_dir.exists():
                import shutil

                shutil.rmtree(backup_dir)
            self.output_dir.rename(backup_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.step = 0

    def _save(self, name: str, img: np.ndarray):
        self.step += 1
        filename = f"{self.step:02d}_{name}.png"
        cv2.imwrite(str(self.output_dir / filename), img)

    def save_grayscale(self, gray: np.ndarray):
        """Save the downscaled analysis copy."""
        self._save("grayscale", gray)

    def save_masks(self, masks: FrameMasks):
        """Save the intermediate masks of frame location."""
        self._save("normalized", masks.normalized)
        self._save("denoised", masks.denoised)
        self._save("borderless", masks.borderless)
        self._save("edges", masks.edges)

    def save_border_overlay(self, raster: np.ndarray, border: Border, crop: Rectangle):
        """Save the negative with frame bounds, crop and border samples drawn.

        Args:
            raster: Full-resolution 16-bit RGB negative
            border: Located border
            crop: Final crop rectangle
        """
        vis = to_preview(raster)
        thickness = max(2, min(vis.shape[:2]) // 300)

        # Border samples in red
        samples = border.samples
        vis[samples[:, 1], samples[:, 0]] = (0, 0, 255)

        bounds = border.bounds
        cv2.rectangle(
            vis, (bounds.min_x, bounds.min_y), (bounds.max_x, bounds.max_y), (0, 255, 0), thickness
        )
        cv2.rectangle(
            vis, (crop.min_x, crop.min_y), (crop.max_x, crop.max_y), (0, 255, 255), thickness
        )

        self._save("border_overlay", vis)

    def save_inverted(self, raster: np.ndarray):
        """Save the inverted positive before tone stretching."""
        self._save("inverted", to_preview(raster))

    def save_tone_histograms(
        self,
        before: np.ndarray,
        after: np.ndarray,
        passes: list[ToneCutoffs],
    ):
        """Save per-channel histograms before and after stretching with cutoffs.

        Args:
            before: Inverted positive before stretching
            after: Final stretched image
            passes: Cutoffs of each stretch pass
        """
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import pandas as pd

        colors = ("red", "green", "blue")
        fig, axes = plt.subplots(2, 1, figsize=(10, 6))

        panels = ((axes[0], before, "Before stretch"), (axes[1], after, "After stretch"))
        for ax, img, title in panels:
            df = pd.DataFrame(
                {
                    color: np.bincount((img[:, :, channel] >> 8).ravel(), minlength=256)
                    for channel, color in enumerate(colors)
                }
            )
            for color in colors:
                ax.plot(df.index, df[color], color=color, alpha=0.7)
            ax.set_xlim(0, 255)
            ax.set_xlabel("Value (high byte)")
            ax.set_ylabel("Count")
            ax.set_title(title)

        # Cutoffs of the first pass refer to the unstretched input
        if passes:
            first = passes[0]
            for channel, color in enumerate(colors):
                axes[0].axvline(x=first.low[channel] >> 8, color=color, linestyle="--")
                axes[0].axvline(x=first.high[channel] >> 8, color=color, linestyle=":")

        fig.tight_layout()
        self.step += 1
        fig.savefig(self.output_dir / f"{self.step:02d}_tone_histogram.png", dpi=100)
        plt.close(fig)
