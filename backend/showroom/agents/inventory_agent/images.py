# backend/showroom/agents/inventory_agent/images.py
import json
import logging
import os
import shutil
import uuid
from typing import List, Optional

from fastapi import UploadFile

from ...core.config import settings
from ...core.exceptions import InvalidImageSetError, UploadRejectedError

logger = logging.getLogger(__name__)


def parse_keep_images(raw: Optional[str]) -> Optional[List[str]]:
    """
    Decode the `keepImages` form field (a JSON array of strings).
    Returns None when the field was not sent at all.
    """
    if raw is None or raw == "":
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidImageSetError("keepImages must be a JSON array of strings") from e

    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidImageSetError("keepImages must be a JSON array of strings")
    return value


def reconcile_images(keep_list: Optional[List[str]], uploaded_refs: List[str]) -> List[str]:
    """
    Build the vehicle's new image list: kept references in the order given,
    then new uploads in upload order.

    A missing keep list keeps nothing. Entries are not deduplicated and are
    not checked against the vehicle's previous images.
    """
    kept = list(keep_list) if keep_list is not None else []
    return kept + list(uploaded_refs)


def orphaned_images(previous: Optional[List[str]], current: List[str]) -> List[str]:
    """Images present before an update that are no longer referenced."""
    still_used = set(current)
    return [ref for ref in (previous or []) if ref not in still_used]


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[1].lower() if "." in filename else ""


def validate_uploads(files: List[UploadFile]) -> List[UploadFile]:
    files = [f for f in files if f is not None and f.filename]
    if len(files) > settings.MAX_UPLOAD_IMAGES:
        raise UploadRejectedError(f"At most {settings.MAX_UPLOAD_IMAGES} images can be uploaded")

    for f in files:
        if _extension(f.filename) not in settings.ALLOWED_IMAGE_EXTENSIONS:
            raise UploadRejectedError(f"Unsupported image type: {f.filename}")
        if f.size is not None and f.size > settings.MAX_UPLOAD_BYTES:
            raise UploadRejectedError(f"Image too large: {f.filename}")
    return files


def store_uploads(files: List[UploadFile]) -> List[str]:
    """
    Write uploaded images to UPLOAD_DIR under generated names.
    Returns their public reference paths in upload order.
    """
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)

    refs = []
    for f in files:
        filename = f"{uuid.uuid4().hex}.{_extension(f.filename)}"
        path = os.path.join(settings.UPLOAD_DIR, filename)
        with open(path, "wb") as out:
            shutil.copyfileobj(f.file, out)
        refs.append(f"{settings.UPLOAD_URL_PREFIX}/{filename}")
        logger.info(f"Stored upload {f.filename} as {filename}")
    return refs
