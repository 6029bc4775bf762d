from __future__ import annotations
from dataclasses import dataclass
import os

from dotenv import load_dotenv

from models.target_color import TargetColor

load_dotenv()


@dataclass
class GenerationConfig:
    """
    User-facing keying knobs. Defaults are a caller convention;
    the chroma keyer itself never falls back to them.
    """
    green_screen_sensitivity: int = 50     # 0-100
    mask_color: TargetColor = TargetColor.GREEN

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        return cls(
            green_screen_sensitivity=int(os.getenv("CHROMA_SENSITIVITY", "50")),
            mask_color=TargetColor.parse(os.getenv("CHROMA_TARGET_COLOR", "green")),
        )
