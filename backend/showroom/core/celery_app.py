import os
from celery import Celery

from .config import settings

# Broker and result backend default to the configured Redis instance
broker_url = os.environ.get("CELERY_BROKER_URL", settings.REDIS_URL)
result_backend_url = os.environ.get("CELERY_RESULT_BACKEND", settings.REDIS_URL)

celery_app = Celery(
    "showroom",
    broker=broker_url,
    backend=result_backend_url,
    include=["showroom.workflow.tasks"]
)

celery_app.conf.update(
    task_track_started=True,
)
