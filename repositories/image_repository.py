from pathlib import Path
from typing import Union, Iterable, Iterator
from io import BytesIO
import binascii
import base64
import logging
import os

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from models.raster_image import RasterImage
from models.exceptions import DecodeError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_EXTS = ".png,.jpg,.jpeg,.webp,.bmp"


class ImageRepository:
    """
    Handles the codec boundary (bytes <-> RGBA pixels) and file I/O for
    RasterImage entities. No keying logic here.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_EXTS)
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}

    @staticmethod
    def create_image(rgba: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        if path is None:
            return RasterImage.from_array(rgba)
        return RasterImage.from_array(rgba, path=Path(path))

    # ─── decode ──────────────────────────────────────────────────────
    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        """OpenCV hands back gray / BGR / BGRA, possibly 16-bit. Normalise to RGBA uint8."""
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            arr = cv2.normalize(arr, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        channels = arr.shape[2]
        if channels == 1:
            return cv2.cvtColor(arr[:, :, 0], cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise DecodeError(f"Unsupported channel count: {channels}")

    def decode(self, data: bytes, path: Union[str, Path] = None) -> RasterImage:
        if not data:
            raise DecodeError("Image data is empty", context={"path": str(path)} if path else None)

        buf = np.frombuffer(data, dtype=np.uint8)
        try:
            arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        except cv2.error as err:
            raise DecodeError("Image data could not be decoded", cause=err) from err

        if arr is None:
            raise DecodeError(
                "Image data could not be decoded",
                context={"bytes": len(data), **({"path": str(path)} if path else {})},
            )
        return self.create_image(self._to_rgba(arr), path)

    def decode_data_url(self, url: str) -> RasterImage:
        """Accepts `data:image/...;base64,<payload>` or a bare base64 payload."""
        payload = url
        if url.startswith("data:"):
            _, sep, payload = url.partition(",")
            if not sep:
                raise DecodeError("Malformed data URL", context={"header": url[:40]})
        try:
            data = base64.b64decode(payload.strip(), validate=True)
        except (binascii.Error, ValueError) as err:
            raise DecodeError("Invalid base64 image payload", cause=err) from err
        return self.decode(data)

    # ─── encode ──────────────────────────────────────────────────────
    @staticmethod
    def encode(image: RasterImage, fmt: str = "PNG") -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(image.as_array()).save(buffer, format=fmt)
        return buffer.getvalue()

    def encode_data_url(self, image: RasterImage) -> str:
        b64 = base64.b64encode(self.encode(image)).decode("utf-8")
        return f"data:image/png;base64,{b64}"

    # ─── files ───────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as err:
            raise DecodeError(f"Image not found or unreadable: {path}", cause=err) from err
        return self.decode(data, path)

    @staticmethod
    def save(image: RasterImage, path: Union[str, Path] = None) -> Path:
        target = Path(path) if path is not None else image.path
        if target is None:
            raise ValueError("Image has no path to save to")
        target.parent.mkdir(parents=True, exist_ok=True)
        # PNG keeps the alpha channel; JPEG cannot
        PILImage.fromarray(image.as_array()).save(target, format="PNG")
        return target

    @staticmethod
    def update_pixels_preserve_original(image: RasterImage, new_pixels: np.ndarray) -> None:
        """Update pixels while preserving original for restore / comparison"""
        if image.original_pixels is None:
            image.original_pixels = image.pixels.copy()
        image.pixels = np.asarray(new_pixels, dtype=np.uint8).reshape(-1)

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield RasterImage objects one at a time.  Nothing accumulates in memory.
        Undecodable files are logged and skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                continue
            try:
                yield self.load(p)
            except DecodeError as err:
                logger.warning(f"Skipping {p.name}: {err}")

