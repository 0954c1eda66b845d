"""
Celery Application Configuration

Configures Celery with Redis broker and result backend for background
compliance scans.
"""

import os

from celery import Celery

# Broker and backend URLs
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)

app = Celery(
    "wagecheck",
    broker=REDIS_URL,
    backend=RESULT_BACKEND,
    include=["workers.tasks.compliance_tasks"],
)

app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    # Result expiry
    result_expires=86400,  # 24 hours

    # Routing
    task_routes={
        "workers.tasks.compliance_tasks.*": {"queue": "compliance"},
    },

    # Default queue
    task_default_queue="default",

    # Concurrency
    worker_concurrency=4,
)
