# urban_harvest/services/upload_service.py
import os
import time
import secrets

from fastapi import UploadFile

from urban_harvest.utils.settings import UPLOAD_DIR, MAX_UPLOAD_BYTES
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".avif", ".jfif"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/pjpeg", "image/png", "image/webp", "image/avif"}
UPLOAD_TYPES = {"events", "workshops", "products", "subscription-boxes", "profiles", "others"}
URL_PREFIX = "/uploads"


def _resolve(public_id: str) -> str:
    root = os.path.realpath(UPLOAD_DIR)
    path = os.path.realpath(os.path.join(root, public_id.lstrip("/")))
    if os.path.commonpath([root, path]) != root:
        raise ValueError("Invalid file path")
    return path


def store_image(file: UploadFile | None, upload_type: str | None = None) -> dict:
    """Validate and store an uploaded image under UPLOAD_DIR/<type>/."""
    if file is None or not file.filename:
        raise ValueError("No file uploaded")

    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS or (file.content_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise ValueError("Only image files (jpg, jpeg, png, webp, avif, jfif) are allowed")

    data = file.file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValueError(f"File too large (max {MAX_UPLOAD_BYTES // (1024 * 1024)}MB)")
    if not data:
        raise ValueError("No file uploaded")

    folder = upload_type if upload_type in UPLOAD_TYPES else "others"
    filename = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
    target_dir = os.path.join(UPLOAD_DIR, folder)
    os.makedirs(target_dir, exist_ok=True)
    with open(os.path.join(target_dir, filename), "wb") as fh:
        fh.write(data)

    public_id = f"{folder}/{filename}"
    logger.info(f"Stored upload {public_id} ({len(data)} bytes)")
    return {
        "success": True,
        "imageUrl": f"{URL_PREFIX}/{public_id}",
        "filename": filename,
        "public_id": public_id,
    }


def delete_image(public_id: str | None) -> dict:
    if not public_id:
        raise ValueError("No public_id provided")
    if "default" in public_id:
        raise ValueError("Cannot delete default images")

    path = _resolve(public_id)
    if not os.path.isfile(path):
        raise LookupError("File not found")
    os.remove(path)
    logger.info(f"Deleted upload {public_id}")
    return {"success": True, "result": "ok"}


def remove_uploaded_image(image_url: str | None):
    """Best-effort removal of an image stored by this service; other URLs are left alone."""
    if not image_url or "default" in image_url or not image_url.startswith(URL_PREFIX + "/"):
        return
    try:
        path = _resolve(image_url[len(URL_PREFIX) + 1:])
    except ValueError:
        logger.warning(f"Refusing to remove image outside the upload root: {image_url}")
        return
    if os.path.isfile(path):
        os.remove(path)
        logger.info(f"Removed image {image_url}")
