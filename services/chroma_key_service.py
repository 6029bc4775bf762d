# services/chroma_key_service.py
import logging
from typing import Tuple

import numpy as np

from models.raster_image import RasterImage
from models.target_color import TargetColor
from models.chroma_key_thresholds import ChromaKeyThresholds
from services.color_service import ColorService

logger = logging.getLogger(__name__)


class ChromaKeyService:
    """
    Stateless HSL chroma keyer for solid green / blue sticker backgrounds.

    • One vectorised pass over the flat RGBA buffer.
    • Background pixels get alpha 0; every other byte is left as is.
    • Never raises for a well-formed RasterImage.
    """

    def __init__(self, color_service: ColorService = None):
        self.color_service = color_service or ColorService()

    @staticmethod
    def _is_dominant(r: np.ndarray, g: np.ndarray, b: np.ndarray, target: TargetColor) -> np.ndarray:
        """RGB-space guard: the target channel must beat both others."""
        if target is TargetColor.GREEN:
            return (g > r) & (g > b)
        return (b > r) & (b > g)

    # --------------------------------------------------------------
    def background_mask(self, image: RasterImage, sensitivity: int, target: TargetColor) -> np.ndarray:
        """
        Returns
        -------
        mask : np.ndarray  (width*height,)  bool, True = backing color
        """
        target = TargetColor.parse(target)
        thr = ChromaKeyThresholds.from_sensitivity(sensitivity, target)

        px = image.pixels.reshape(-1, 4)
        r, g, b = px[:, 0], px[:, 1], px[:, 2]
        hue, sat, light = self.color_service.rgb_to_hsl(r, g, b)

        # Plain closed interval, no wrap at 0/360
        in_hue = (hue >= thr.hue_min) & (hue <= thr.hue_max)
        mask = in_hue & (sat >= thr.sat_min) & (light >= thr.light_min)

        if not thr.relax_dominance:
            mask &= self._is_dominant(r, g, b, target)
        return mask

    def remove_with_mask(self, image: RasterImage, sensitivity: int,
                         target: TargetColor) -> Tuple[RasterImage, np.ndarray]:
        """
        Key out the backing color.

        Returns
        -------
        (keyed, mask) : a *new* RasterImage of the same size, and the
                        background mask used to build it
        """
        mask = self.background_mask(image, sensitivity, target)

        out = image.pixels.copy()
        out.reshape(-1, 4)[mask, 3] = 0

        logger.debug(
            f"Chroma key ({TargetColor.parse(target).value}, sensitivity={sensitivity}): "
            f"{int(mask.sum())}/{image.pixel_count} pixels removed"
        )
        return RasterImage(width=image.width, height=image.height, pixels=out, path=image.path), mask

    def remove(self, image: RasterImage, sensitivity: int, target: TargetColor) -> RasterImage:
        """
        Key out the backing color and return a *new* RasterImage of the same size.
        """
        return self.remove_with_mask(image, sensitivity, target)[0]


_default_service = ChromaKeyService()


def remove(image: RasterImage, sensitivity: int, target: TargetColor) -> RasterImage:
    """Module-level shortcut for ChromaKeyService().remove."""
    return _default_service.remove(image, sensitivity, target)
