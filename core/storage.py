# core/storage.py

import re
import time
from typing import Optional

from supabase import Client

from core.config import Settings, get_settings
from core.errors import AppError, extract_supabase_error
from core.logging_config import logger


MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_VIDEO_BYTES = 10 * 1024 * 1024


class StorageError(AppError):
    code = "STORAGE_ERROR"
    status_code = 502


# -----------------------------------------------------
# Paths
# -----------------------------------------------------
def safe_filename(filename: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", filename)


def generate_file_path(user_id: str, venue_id: str, filename: str) -> str:
    """venues/{user}/{venue}/{epoch_ms}.{ext}"""
    extension = safe_filename(filename).rsplit(".", 1)[-1] if "." in filename else "bin"
    timestamp = int(time.time() * 1000)
    return f"venues/{user_id}/{venue_id}/{timestamp}.{extension}"


# -----------------------------------------------------
# Supabase Storage
# -----------------------------------------------------
def upload_file(
    client: Client,
    path: str,
    content: bytes,
    content_type: str,
    settings: Optional[Settings] = None,
) -> str:
    """
    Push bytes to the venue media bucket and return the public URL.
    """
    settings = settings or get_settings()
    bucket = client.storage.from_(settings.VENUE_MEDIA_BUCKET)

    try:
        bucket.upload(
            path,
            content,
            {"content-type": content_type, "upsert": "true"},
        )
    except Exception as e:
        detail = extract_supabase_error(e)
        logger.error(f"Storage upload failed for {path}: {detail}")
        raise StorageError("Failed to upload media", details={"detail": detail})

    return bucket.get_public_url(path)
