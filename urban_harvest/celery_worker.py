# urban_harvest/celery_worker.py
from celery import Celery

from urban_harvest.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

celery_app = Celery(
    "urban_harvest",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks live outside this module, register them explicitly
celery_app.conf.imports = (
    "urban_harvest.tasks.deliveries",
    "urban_harvest.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "roll-subscription-deliveries-hourly": {
        "task": "urban_harvest.tasks.deliveries.roll_deliveries_task",
        "schedule": 3600.0,
    },
}

celery_app.conf.timezone = "UTC"

# inline execution for tests and single-process runs
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.task_eager_propagates = False
