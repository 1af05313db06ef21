import logging
import os

from ..core.celery_app import celery_app
from ..core.config import settings

logger = logging.getLogger(__name__)


def _upload_path(ref: str):
    """Map a public upload reference back to a file under UPLOAD_DIR."""
    prefix = settings.UPLOAD_URL_PREFIX.rstrip("/") + "/"
    if not ref.startswith(prefix):
        return None
    filename = os.path.basename(ref[len(prefix):])
    if not filename:
        return None
    return os.path.join(settings.UPLOAD_DIR, filename)


def remove_uploads(refs) -> list:
    """Delete the files behind local upload references. Returns the refs removed."""
    removed = []
    for ref in refs:
        path = _upload_path(ref)
        if path is None:
            logger.info(f"[PURGE_UPLOADS] Skipping external reference: {ref}")
            continue
        try:
            os.remove(path)
            removed.append(ref)
        except FileNotFoundError:
            logger.warning(f"[PURGE_UPLOADS] ⚠️ Already gone: {path}")
    return removed


@celery_app.task(name="purge_uploads_task")
def purge_uploads_task(refs: list):
    """Remove stored image files that no vehicle references anymore"""
    logger.info(f"[PURGE_UPLOADS] ▶️ {len(refs)} candidate(s)")

    removed = remove_uploads(refs)
    logger.info(f"[PURGE_UPLOADS] ✅ Removed {len(removed)} file(s)")
    return {"removed": removed}


def schedule_upload_purge(refs):
    """Queue orphaned uploads for removal when purging is enabled."""
    if not settings.PURGE_ORPHANED_UPLOADS or not refs:
        return None
    task = purge_uploads_task.delay(list(refs))
    logger.info(f"[PURGE_UPLOADS] Queued {len(refs)} file(s) as task {task.id}")
    return task.id
