"""Uploaded files (client photos, progress photos, exercise videos) on local disk under UPLOAD_DIR, served at /uploads."""
import logging
import secrets
import time
from pathlib import Path

from fastapi import HTTPException, UploadFile

from pt_tracker.core.config import settings

log = logging.getLogger("pt_tracker.storage")

UPLOADS_URL_PREFIX = "/uploads"

CLIENT_PHOTO_MAX_BYTES = 5 * 1024 * 1024
PROGRESS_PHOTO_MAX_BYTES = 10 * 1024 * 1024
VIDEO_MAX_BYTES = 100 * 1024 * 1024
ALLOWED_VIDEO_TYPES = {"video/mp4", "video/quicktime", "video/x-msvideo", "video/webm"}


def upload_root() -> Path:
    return Path(settings.upload_dir)


def _extension(filename: str | None) -> str:
    if filename and "." in filename:
        return "." + filename.lower().rsplit(".", 1)[-1]
    return ""


async def read_upload(
    file: UploadFile,
    max_bytes: int,
    allowed_types: set[str] | None = None,
    type_prefix: str | None = None,
) -> bytes:
    """Read an UploadFile with size and content-type checks (400 / 413 on violations)."""
    content_type = (file.content_type or "").lower()
    if allowed_types is not None and content_type not in allowed_types:
        raise HTTPException(status_code=400, detail="Only mp4, mov, avi, and webm video files are allowed")
    if type_prefix is not None and not content_type.startswith(type_prefix):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes // (1024 * 1024)} MB)")
    return content


def save_upload(subdir: str, content: bytes, filename: str | None) -> str:
    """Write bytes under UPLOAD_DIR/subdir; returns the public URL path ("/uploads/<subdir>/<name>")."""
    stored_name = f"{int(time.time() * 1000)}-{secrets.token_hex(3)}{_extension(filename)}"
    directory = upload_root() / subdir
    directory.mkdir(parents=True, exist_ok=True)
    try:
        (directory / stored_name).write_bytes(content)
    except OSError as e:
        log.exception("Upload save failed: %s/%s", subdir, stored_name)
        raise HTTPException(status_code=500, detail="Could not store uploaded file") from e
    return f"{UPLOADS_URL_PREFIX}/{subdir}/{stored_name}"


def delete_upload(url_path: str | None) -> None:
    """Best effort removal of a file previously returned by save_upload."""
    if not url_path or not url_path.startswith(UPLOADS_URL_PREFIX + "/"):
        return
    path = upload_root() / url_path[len(UPLOADS_URL_PREFIX) + 1 :]
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.warning("Upload delete failed for %s: %s", url_path, e)
