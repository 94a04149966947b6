# helpdesk/ticket/uploads.py
import random
import time
from pathlib import Path

import structlog
from fastapi import UploadFile

from helpdesk.core.config import get_settings
from helpdesk.core.errors import ValidationError

logger = structlog.get_logger(__name__)

URL_PREFIX = "/uploads/"
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


def upload_dir() -> Path:
    path = Path(get_settings().UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _stored_name(original: str) -> str:
    safe = Path(original).name.replace(" ", "_")
    return f"{int(time.time() * 1000)}-{random.randint(0, 999_999_999)}-{safe}"


def save_image(file: UploadFile) -> str:
    """Validate an uploaded image and store it; returns the /uploads/ path."""
    settings = get_settings()
    filename = file.filename or ""
    if Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only image files are allowed!")
    if (file.content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Only image files are allowed!")

    content = file.file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"Image too large: {filename} exceeds {settings.MAX_UPLOAD_BYTES} bytes"
        )

    name = _stored_name(filename)
    (upload_dir() / name).write_bytes(content)
    logger.info("upload_saved", file=name, size=len(content))
    return URL_PREFIX + name


def save_images(files: list[UploadFile]) -> list[str]:
    settings = get_settings()
    if len(files) > settings.MAX_IMAGES_PER_UPLOAD:
        raise ValidationError(
            f"At most {settings.MAX_IMAGES_PER_UPLOAD} images per upload"
        )
    saved: list[str] = []
    try:
        for file in files:
            saved.append(save_image(file))
    except ValidationError:
        for path in saved:
            remove_upload(path)
        raise
    return saved


def remove_upload(path: str | None) -> bool:
    """Best-effort removal of a stored attachment. Never raises."""
    if not path or not path.startswith(URL_PREFIX):
        return False
    target = upload_dir() / Path(path).name
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("upload_remove_failed", file=str(target), error=str(exc))
        return False
    return True
