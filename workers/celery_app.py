# =============================================================================
# workers/celery_app.py - Marketplace Worker Application
# =============================================================================
# The API only publishes; this worker sends mail and refreshes category
# counts.
#
# Usage:
#   celery -A workers.celery_app worker --loglevel=info -Q default,email
#   python scripts/start_worker.py
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun, task_retry
from dotenv import load_dotenv

load_dotenv()

from app.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _redacted(url: str) -> str:
    """Drop credentials from a broker URL before logging it."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    app = Celery(
        "marketplace_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Marketplace worker app using broker {_redacted(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


@celery_app.task(bind=True, name="workers.healthcheck")
def healthcheck(self):
    """
    Round-trip check for deploys.

    Usage:
        healthcheck.delay().get(timeout=5)  # "OK"
    """
    return "OK"


# =============================================================================
# Task Lifecycle Logging
# =============================================================================

@task_prerun.connect
def log_task_start(sender=None, task_id=None, task=None, args=None, kwargs=None, **extra):
    logger.info(f"{task.name} [{task_id}] started")


@task_postrun.connect
def log_task_end(sender=None, task_id=None, task=None, args=None, kwargs=None, retval=None, state=None, **extra):
    logger.info(f"{task.name} [{task_id}] finished: {state}")


@task_retry.connect
def log_task_retry(sender=None, request=None, reason=None, **extra):
    logger.warning(f"{sender.name} [{request.id}] retrying: {reason}")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, traceback=None, **extra):
    logger.error(f"{sender.name} [{task_id}] failed: {exception}")


if __name__ == "__main__":
    celery_app.start()
