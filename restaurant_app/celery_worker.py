# restaurant_app/celery_worker.py
from celery import Celery
import os

BROKER = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://redis:6379/1"))
RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

celery_app = Celery(
    "restaurant",
    broker=BROKER,
    backend=RESULT_BACKEND,
)

# Explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "restaurant_app.services.notification_service",
)

celery_app.conf.task_always_eager = os.getenv("CELERY_ALWAYS_EAGER", "").lower() in ("1", "true", "yes")
celery_app.conf.timezone = "UTC"
