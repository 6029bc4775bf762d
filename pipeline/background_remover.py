# pipeline/background_remover.py
from typing import List

from models.raster_image import RasterImage
from models.generation_config import GenerationConfig
from models.target_color import TargetColor
from services.chroma_key_service import ChromaKeyService
from services.image_service import ImageService


# ------------------------------------------------------------------
def remove_background(
    gallery: List[RasterImage],
    *,
    chroma_key_service: ChromaKeyService = None,
    image_service: ImageService          = None,
    sensitivity: int | None              = None,
    color: TargetColor | str | None      = None,
) -> List[RasterImage]:
    """
    For every RasterImage in *gallery*:
        • key out the solid backing color
        • update pixels in-memory (preserving original)
    Returns the same RasterImage objects with updated pixels.

    Missing sensitivity / color fall back to the env-var config (50 / green).
    """
    if sensitivity is None or color is None:
        config = GenerationConfig.from_env()
        sensitivity = config.green_screen_sensitivity if sensitivity is None else sensitivity
        color = config.mask_color if color is None else color

    chroma_key_service = chroma_key_service or ChromaKeyService()
    image_service = image_service or ImageService()
    target = TargetColor.parse(color)

    for img in gallery:
        # 1. key → new pixels
        keyed = chroma_key_service.remove(img, sensitivity, target)

        # 2. update pixels in-memory while preserving original
        image_service.apply_pipeline_modification(img, keyed.pixels)

    return gallery
