"""Photo storage: validate uploaded image bytes and write them to the upload directory."""

import io
import logging
import uuid
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from app.core.config import settings
from app.core.exceptions import PhotoUploadError

logger = logging.getLogger(__name__)

# PIL format name -> file extension
EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "WEBP": ".webp",
}


class LocalPhotoStorage:
    def __init__(self, upload_dir: str, base_url: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    def _detect_extension(self, data: bytes) -> str:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                image_format = image.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise PhotoUploadError("Uploaded file is not a valid image") from e
        if image_format not in EXTENSIONS:
            raise PhotoUploadError(f"Unsupported image format: {image_format}")
        return EXTENSIONS[image_format]

    def save(self, data: bytes) -> str:
        """Store image bytes and return the URL they are served from."""
        if not data:
            raise PhotoUploadError("Uploaded photo is empty")
        if len(data) > self.max_bytes:
            raise PhotoUploadError(f"Photo exceeds {self.max_bytes} bytes")

        filename = f"{uuid.uuid4().hex}{self._detect_extension(data)}"
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            (self.upload_dir / filename).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write photo {filename}: {e}")
            raise PhotoUploadError("Photo could not be stored") from e

        url = f"{self.base_url}/{filename}"
        logger.info(f"Stored photo {filename} ({len(data)} bytes)")
        return url


def get_photo_storage() -> LocalPhotoStorage:
    return LocalPhotoStorage(
        upload_dir=settings.upload_dir,
        base_url=settings.photo_base_url,
        max_bytes=settings.max_photo_bytes,
    )
