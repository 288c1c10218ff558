"""
Image Service

Compresses uploaded cover images to WebP and stores them in the uploads
directory, which main.py serves under /images.

Files are named "<random hex>-<original name>.webp" so two uploads of the same
file never collide. Replaced or orphaned images are not cleaned up.
"""

import logging
import re
import uuid
from pathlib import Path

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from bookshelf.config import get_settings
from bookshelf.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)
settings = get_settings()

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]+")


def _safe_stem(filename: str | None) -> str:
    """Lowercase file name without extension, reduced to URL-safe characters."""
    stem = Path(filename or "").stem.lower()
    stem = _UNSAFE_CHARS.sub("-", stem).strip("-")
    return stem[:50] or "image"


def save_compressed_image(
    upload: UploadFile,
    upload_dir: str | Path | None = None,
    quality: int | None = None,
) -> str:
    """
    Convert an uploaded image to WebP and write it to the uploads directory.

    Args:
        upload: The uploaded file
        upload_dir: Target directory (defaults to settings.upload_dir)
        quality: WebP quality 1-100 (defaults to settings.image_quality)

    Returns:
        The stored filename, relative to the uploads directory

    Raises:
        ImageProcessingError: The upload is not a readable image or can't be written
    """
    target_dir = Path(upload_dir or settings.upload_dir)
    quality = quality or settings.image_quality
    filename = f"{uuid.uuid4().hex}-{_safe_stem(upload.filename)}.webp"

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        with Image.open(upload.file) as image:
            # WebP only stores RGB or RGBA
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGBA" if image.mode in ("LA", "P", "PA") else "RGB")
            image.save(target_dir / filename, format="WEBP", quality=quality)
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Could not compress image {upload.filename!r}: {e}")
        raise ImageProcessingError() from e

    logger.info(f"Stored image {filename}")
    return filename
