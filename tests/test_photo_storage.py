import io

import pytest
from PIL import Image

from app.core.exceptions import PhotoUploadError
from app.services.photo_storage import LocalPhotoStorage


def _image_bytes(fmt):
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 180, 40)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def storage(tmp_path):
    return LocalPhotoStorage(upload_dir=str(tmp_path / "up"), base_url="/uploads/", max_bytes=64 * 1024)


@pytest.mark.parametrize("fmt,ext", [("PNG", ".png"), ("JPEG", ".jpg"), ("GIF", ".gif")])
def test_save_writes_file_and_returns_url(storage, fmt, ext):
    data = _image_bytes(fmt)
    url = storage.save(data)
    assert url.startswith("/uploads/")
    assert url.endswith(ext)
    stored = storage.upload_dir / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == data


def test_save_gives_unique_names(storage):
    data = _image_bytes("PNG")
    assert storage.save(data) != storage.save(data)


def test_rejects_non_image(storage):
    with pytest.raises(PhotoUploadError):
        storage.save(b"plain text, not a picture")


def test_rejects_empty(storage):
    with pytest.raises(PhotoUploadError):
        storage.save(b"")


def test_rejects_oversized(tmp_path):
    storage = LocalPhotoStorage(upload_dir=str(tmp_path), base_url="/uploads", max_bytes=10)
    with pytest.raises(PhotoUploadError) as exc_info:
        storage.save(_image_bytes("PNG"))
    assert "exceeds" in exc_info.value.message
