"""
Exception hierarchy for the sticker keyer.

The chroma-key filter itself never raises; failures only happen at the
codec boundary, where bytes become pixels.
"""

from typing import Optional, Dict, Any


class StickerKeyerError(Exception):
    """Base exception for all sticker keyer errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


class DecodeError(StickerKeyerError):
    """Image data is corrupt, empty or in an unsupported format"""
    pass
