from celery import Celery

from sprintboard.core.config import settings

celery_app = Celery(
    "worker",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.task_routes = {"sprintboard.worker.tasks.*": {"queue": "main_queue"}}

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.TESTING,
)

celery_app.autodiscover_tasks(["sprintboard.worker"])
