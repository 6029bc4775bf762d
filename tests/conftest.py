"""
Shared fixtures: small synthetic sticker images as (H, W, 4) RGBA arrays.
"""
import numpy as np
import pytest


@pytest.fixture
def green_sticker() -> np.ndarray:
    """8x8 lime-green square with a red 4x4 subject in the middle."""
    rgba = np.zeros((8, 8, 4), dtype=np.uint8)
    rgba[..., 1] = 255
    rgba[..., 3] = 255
    rgba[2:6, 2:6, :3] = (220, 30, 30)
    return rgba


@pytest.fixture
def blue_sticker() -> np.ndarray:
    """8x8 pure blue square with a yellow 4x4 subject in the middle."""
    rgba = np.zeros((8, 8, 4), dtype=np.uint8)
    rgba[..., 2] = 255
    rgba[..., 3] = 255
    rgba[2:6, 2:6, :3] = (250, 200, 40)
    return rgba
