from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class RasterImage:
    """
    Simple data object: flat RGBA pixels (+ optional source path for bookkeeping).
    The buffer is row-major, 4 interleaved uint8 channels per pixel.
    """
    width: int
    height: int
    pixels: np.ndarray # Shape (width*height*4,), dtype uint8, RGBA order.
    path: Path | None = None # Source of the image.
    original_pixels: np.ndarray | None = None # Untouched pixels for restore / comparison

    def __post_init__(self):
        self.pixels = np.asarray(self.pixels, dtype=np.uint8).reshape(-1)
        if self.pixels.size % 4 != 0:
            raise ValueError(f"Pixel buffer length {self.pixels.size} is not a multiple of 4")
        if self.pixels.size != self.width * self.height * 4:
            raise ValueError(
                f"Pixel buffer length {self.pixels.size} does not match "
                f"{self.width}x{self.height} RGBA"
            )

    @classmethod
    def from_array(cls, rgba: np.ndarray, path: Path | None = None) -> "RasterImage":
        """Build from an (H, W, 4) uint8 array."""
        h, w = rgba.shape[:2]
        return cls(width=w, height=h, pixels=np.ascontiguousarray(rgba).reshape(-1), path=path)

    def as_array(self) -> np.ndarray:
        """(H, W, 4) view over the flat buffer."""
        return self.pixels.reshape(self.height, self.width, 4)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def copy(self) -> "RasterImage":
        return RasterImage(width=self.width, height=self.height,
                           pixels=self.pixels.copy(), path=self.path)
