from pathlib import Path
from typing import Iterable, Union, Iterator
import numpy as np

from models.raster_image import RasterImage
from repositories.image_repository import ImageRepository


class ImageService:
    """Codec and I/O helpers.  No keying logic."""
    def __init__(self, image_repository: ImageRepository = None):
        self.image_repository = image_repository or ImageRepository()

    # ─── codec boundary ───────────────────────────────────────────────
    def decode(self, data: bytes) -> RasterImage:
        """
        Decode PNG / JPEG / WebP / ... bytes into an RGBA RasterImage.

        Raises:
            DecodeError: empty, corrupt or unsupported data.
        """
        return self.image_repository.decode(data)

    def encode(self, image: RasterImage) -> bytes:
        """Encode to PNG bytes (alpha preserved)."""
        return self.image_repository.encode(image)

    def from_data_url(self, url: str) -> RasterImage:
        return self.image_repository.decode_data_url(url)

    def to_data_url(self, image: RasterImage) -> str:
        return self.image_repository.encode_data_url(image)

    # ─── files ────────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> RasterImage:
        """Load a single image from disk into a RasterImage object."""
        return self.image_repository.load(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def save(self, image: RasterImage, path: Union[str, Path] = None) -> Path:
        """
        Business-level method to save the image, by default to its own path.
        """
        return self.image_repository.save(image, path)

    # ─── pixel state ──────────────────────────────────────────────────
    def apply_pipeline_modification(self, image: RasterImage, new_pixels: np.ndarray) -> None:
        """
        Apply a pipeline modification while preserving original for restore.
        """
        self.image_repository.update_pixels_preserve_original(image, new_pixels)

