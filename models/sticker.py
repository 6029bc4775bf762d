from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from models.target_color import TargetColor


@dataclass
class Sticker:
    """
    One generated sticker. Images are carried as data URLs, the way the
    generator hands them over.
    """
    id: str
    prompt_id: str
    image_url: str                       # currently displayed image
    original_prompt: str = ""
    raw_image_url: Optional[str] = None  # untouched image, still on its backing color
    status: str = "success"              # loading | success | error
    mask_color: TargetColor = TargetColor.GREEN
    is_background_removed: bool = False
    is_processing: bool = False
    base_prompt: Optional[str] = None
    meme_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "prompt_id": self.prompt_id,
            "image_url": self.image_url,
            "original_prompt": self.original_prompt,
            "status": self.status,
            "mask_color": self.mask_color.value,
            "is_background_removed": self.is_background_removed,
            "is_processing": self.is_processing,
            "base_prompt": self.base_prompt,
            "meme_text": self.meme_text,
        }
