from __future__ import annotations

from typing import Iterable, List
import logging

from models.sticker import Sticker
from models.generation_config import GenerationConfig
from models.target_color import TargetColor
from models.exceptions import DecodeError
from services.image_service import ImageService
from services.chroma_key_service import ChromaKeyService

logger = logging.getLogger(__name__)


class StickerService:
    """
    Background on/off switch for generated stickers.
    *   Works on data URLs; decoding and encoding go through ImageService.
    *   Caller-side defaults (sensitivity 50, green) live here, not in the keyer.
    """

    def __init__(self,
                 config: GenerationConfig = None,
                 image_service: ImageService = None,
                 chroma_key_service: ChromaKeyService = None):
        """
        Args:
            config: sensitivity and fallback mask color (defaults to env vars, then 50 / green)
        """
        self.config = config or GenerationConfig.from_env()
        self.sensitivity = self.config.green_screen_sensitivity
        self.default_color = self.config.mask_color
        self.img_svc = image_service or ImageService()
        self.chroma_svc = chroma_key_service or ChromaKeyService()

    # ─── Public API ────────────────────────────────────────────────
    def remove_background_from_url(self, image_url: str, sensitivity: int = None,
                                   color: TargetColor | str = None) -> str:
        """Decode -> key -> re-encode as a PNG data URL."""
        image = self.img_svc.from_data_url(image_url)
        keyed = self.chroma_svc.remove(
            image,
            self.sensitivity if sensitivity is None else sensitivity,
            TargetColor.parse(color) if color else self.default_color,
        )
        return self.img_svc.to_data_url(keyed)

    def toggle_background(self, sticker: Sticker, sensitivity: int = None) -> Sticker:
        """
        Remove the backing color, or restore the raw image if it is already removed.

        Raises:
            DecodeError: the raw image cannot be decoded. The sticker keeps its
                previous image and flag.
        """
        if not sticker.raw_image_url:
            return sticker

        sticker.is_processing = True
        try:
            if sticker.is_background_removed:
                sticker.image_url = sticker.raw_image_url
                sticker.is_background_removed = False
            else:
                sticker.image_url = self.remove_background_from_url(
                    sticker.raw_image_url,
                    sensitivity,
                    sticker.mask_color or self.default_color,
                )
                sticker.is_background_removed = True
        except DecodeError:
            logger.error(f"Failed to toggle background for sticker {sticker.id}")
            raise
        finally:
            sticker.is_processing = False
        return sticker

    def remove_backgrounds(self, stickers: Iterable[Sticker], sensitivity: int = None) -> List[Sticker]:
        """
        Remove the background of every finished sticker that still has one.
        Stickers that fail to decode are logged and left untouched.
        """
        stickers = list(stickers)
        for sticker in stickers:
            if sticker.status != "success" or sticker.is_background_removed or not sticker.raw_image_url:
                continue
            try:
                self.toggle_background(sticker, sensitivity)
            except DecodeError as err:
                logger.warning(f"Skipping sticker {sticker.id}: {err}")
        return stickers
