"""
Builders for small synthetic sticker images.
"""
from io import BytesIO
import base64

import numpy as np
from PIL import Image as PILImage

from models.raster_image import RasterImage


def make_solid(rgb, width=4, height=3, alpha=255) -> RasterImage:
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = alpha
    return RasterImage.from_array(rgba)


def make_palette(step=51) -> RasterImage:
    """Every RGB combination on a coarse grid, one pixel each."""
    levels = np.arange(0, 256, step, dtype=np.uint8)
    r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
    rgb = np.stack([r.ravel(), g.ravel(), b.ravel()], axis=1)
    rgba = np.concatenate([rgb, np.full((len(rgb), 1), 255, dtype=np.uint8)], axis=1)
    return RasterImage(width=len(rgb), height=1, pixels=rgba.reshape(-1))


def png_bytes(rgba: np.ndarray, mode: str = "RGBA") -> bytes:
    pil = PILImage.fromarray(np.ascontiguousarray(rgba))
    if mode != "RGBA":
        pil = pil.convert(mode)
    buffer = BytesIO()
    pil.save(buffer, format="PNG")
    return buffer.getvalue()


def data_url(rgba: np.ndarray) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(rgba)).decode("utf-8")
