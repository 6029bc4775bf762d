"""
Codec boundary: bytes / data URLs / files <-> RGBA RasterImage.
"""
import base64

import numpy as np
import pytest

from models.raster_image import RasterImage
from models.exceptions import DecodeError
from repositories.image_repository import ImageRepository
from services.image_service import ImageService
from tests.helpers import png_bytes, data_url


@pytest.fixture
def repo():
    return ImageRepository()


def test_decode_rgba_png_keeps_alpha(repo, green_sticker):
    rgba = green_sticker.copy()
    rgba[0, 0, 3] = 0
    img = repo.decode(png_bytes(rgba))
    assert (img.width, img.height) == (8, 8)
    np.testing.assert_array_equal(img.as_array(), rgba)


def test_decode_rgb_png_adds_opaque_alpha(repo, green_sticker):
    img = repo.decode(png_bytes(green_sticker, mode="RGB"))
    arr = img.as_array()
    np.testing.assert_array_equal(arr[..., :3], green_sticker[..., :3])
    assert (arr[..., 3] == 255).all()


def test_decode_grayscale_png(repo, green_sticker):
    img = repo.decode(png_bytes(green_sticker, mode="L"))
    arr = img.as_array()
    assert (arr[..., 0] == arr[..., 1]).all()
    assert (arr[..., 1] == arr[..., 2]).all()
    assert (arr[..., 3] == 255).all()


def test_decode_empty_bytes_raises(repo):
    with pytest.raises(DecodeError, match="empty"):
        repo.decode(b"")


def test_decode_garbage_raises(repo):
    with pytest.raises(DecodeError, match="could not be decoded"):
        repo.decode(b"definitely not a png" * 10)


def test_encode_then_decode_preserves_pixels(repo, blue_sticker):
    rgba = blue_sticker.copy()
    rgba[:2, :, 3] = 0
    data = repo.encode(RasterImage.from_array(rgba))
    assert data.startswith(b"\x89PNG")
    np.testing.assert_array_equal(repo.decode(data).as_array(), rgba)


def test_data_url_with_and_without_prefix(repo, green_sticker):
    url = data_url(green_sticker)
    bare = url.split(",", 1)[1]
    np.testing.assert_array_equal(repo.decode_data_url(url).pixels, repo.decode_data_url(bare).pixels)


def test_encode_data_url_prefix(repo, green_sticker):
    url = repo.encode_data_url(RasterImage.from_array(green_sticker))
    assert url.startswith("data:image/png;base64,")
    base64.b64decode(url.split(",", 1)[1], validate=True)


def test_data_url_without_comma_raises_decode_error(repo):
    with pytest.raises(DecodeError, match="Malformed data URL"):
        repo.decode_data_url("data:image/png;base64")


def test_service_data_url_without_comma_raises_decode_error():
    with pytest.raises(DecodeError):
        ImageService().from_data_url("data:image/png;base64")


def test_invalid_base64_raises_decode_error(repo):
    with pytest.raises(DecodeError, match="base64"):
        repo.decode_data_url("data:image/png;base64,@@not-base64@@")


def test_load_missing_file_raises_decode_error(repo, tmp_path):
    with pytest.raises(DecodeError, match="not found or unreadable"):
        repo.load(tmp_path / "missing.png")


def test_save_and_load_round_trip_through_disk(repo, tmp_path, green_sticker):
    img = RasterImage.from_array(green_sticker)
    path = repo.save(img, tmp_path / "nested" / "out.png")
    loaded = repo.load(path)
    assert loaded.path == path
    np.testing.assert_array_equal(loaded.pixels, img.pixels)


def test_save_without_path_raises(repo, green_sticker):
    with pytest.raises(ValueError):
        repo.save(RasterImage.from_array(green_sticker))


def test_iter_dir_skips_bad_files_and_extensions(repo, tmp_path, green_sticker):
    (tmp_path / "a.png").write_bytes(png_bytes(green_sticker))
    (tmp_path / "b.png").write_bytes(b"corrupt")
    (tmp_path / "notes.txt").write_text("hello")
    images = list(repo.iter_dir(tmp_path))
    assert [img.path.name for img in images] == ["a.png"]


def test_iter_dir_rejects_missing_folder(repo, tmp_path):
    with pytest.raises(NotADirectoryError):
        list(repo.iter_dir(tmp_path / "nope"))


def test_valid_extensions_from_env(monkeypatch):
    monkeypatch.setenv("VALID_IMAGE_EXTENSIONS", ".PNG, .gif")
    assert ImageRepository().VALID_EXTS == {".png", ".gif"}


def test_pipeline_modification_keeps_first_original(green_sticker):
    svc = ImageService()
    img = RasterImage.from_array(green_sticker)
    before = img.pixels.copy()
    svc.apply_pipeline_modification(img, np.zeros_like(img.pixels))
    svc.apply_pipeline_modification(img, np.ones_like(img.pixels))
    assert (img.pixels == 1).all()
    np.testing.assert_array_equal(img.original_pixels, before)
