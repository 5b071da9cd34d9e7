from celery import Celery
from kombu import Queue

from app.platform.config import settings

ANALYSIS_QUEUE = "crawl.analysis"


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Queue Structure:
    - crawl.analysis: one task per page analysis (fetch, parse, probe, persist)
    - default: everything else

    Each started job becomes exactly one task, so worker concurrency is the
    cap on simultaneous analyses.
    """
    celery_app = Celery(
        "page_insight",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
    )

    celery_app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer=settings.CELERY_RESULT_SERIALIZER,
        accept_content=[settings.CELERY_ACCEPT_CONTENT],
        timezone="UTC",
        enable_utc=True,
        task_track_started=settings.CELERY_TASK_TRACK_STARTED,
        task_time_limit=settings.CELERY_TASK_TIME_LIMIT,

        # Outcomes live in the database, not in the result backend
        task_ignore_result=True,
        result_expires=3600,

        task_routes={
            "app.features.crawl.workers.tasks.analyze_url": {"queue": ANALYSIS_QUEUE},
        },
        task_queues=(
            Queue("default"),
            Queue(ANALYSIS_QUEUE),
        ),
        task_default_queue="default",

        worker_prefetch_multiplier=1,  # Fair distribution

        # A failed analysis is final; never redeliver it
        task_acks_late=False,
    )

    celery_app.autodiscover_tasks(["app.features.crawl.workers"])

    return celery_app


# Global Celery app instance
celery_app = create_celery_app()
