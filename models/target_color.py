from __future__ import annotations
from enum import Enum


class TargetColor(str, Enum):
    """Backing color family the sticker was generated on."""
    GREEN = "green"
    BLUE = "blue"

    @property
    def hue(self) -> float:
        return 120.0 if self is TargetColor.GREEN else 240.0

    @classmethod
    def parse(cls, value: "str | TargetColor") -> "TargetColor":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown target color: {value!r} (expected 'green' or 'blue')") from None
