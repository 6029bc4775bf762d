from __future__ import annotations
from dataclasses import dataclass

from models.target_color import TargetColor


@dataclass(frozen=True)
class ChromaKeyThresholds:
    """
    Value-object holding the HSL matching window for one (sensitivity, color)
    pair. Every bound is linear in the normalised sensitivity s in [0, 1].
    """
    hue_min: float          # degrees, may drop below 0
    hue_max: float          # degrees, may exceed 360
    sat_min: float          # [0.1 , 0.5]
    light_min: float        # [0.05, 0.2]
    relax_dominance: bool   # s > 0.7 disables the RGB dominance guard

    # ── Helpers ──────────────────────────────────────────────────────
    @staticmethod
    def normalise(sensitivity: float) -> float:
        """Clamp to [0, 100] and map onto [0, 1]."""
        return max(0, min(100, sensitivity)) / 100

    @classmethod
    def from_sensitivity(cls, sensitivity: float, target: TargetColor) -> "ChromaKeyThresholds":
        s = cls.normalise(sensitivity)
        hue_width = 20 + s * 60
        return cls(
            hue_min=target.hue - hue_width,
            hue_max=target.hue + hue_width,
            sat_min=0.5 - s * 0.4,
            light_min=0.2 - s * 0.15,
            relax_dominance=s > 0.7,
        )
