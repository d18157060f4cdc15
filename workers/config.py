# =============================================================================
# workers/config.py - Celery Settings for the Marketplace Worker
# =============================================================================
# Two queues:
#   email   - transactional mail (welcome, password reset, order confirmation)
#   default - catalogue maintenance (category product counts)
# =============================================================================

from app.config import settings

EMAIL_TASKS = (
    "workers.tasks.send_welcome_email",
    "workers.tasks.send_password_reset_email",
    "workers.tasks.send_order_confirmation_email",
)


class CeleryConfig:
    """Loaded with app.config_from_object("workers.config:CeleryConfig")."""

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # Nothing reads email results back; keep them briefly for debugging
    result_expires = 15 * 60

    # A task is only acked once the mail is handed to SMTP
    task_acks_late = True
    task_reject_on_worker_lost = True
    worker_prefetch_multiplier = 1

    task_time_limit = 120
    task_soft_time_limit = 90

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Queues
    # -------------------------------------------------------------------------

    task_default_queue = "default"
    task_queues = {
        name: {"exchange": name, "routing_key": name}
        for name in ("default", "email")
    }
    task_routes = {name: {"queue": "email"} for name in EMAIL_TASKS}

    # SMTP hiccups are retried with a minute between attempts
    task_annotations = {
        "*": {"max_retries": 3, "default_retry_delay": 60},
    }

    # Publishing happens inside API requests; give up quickly if Redis is down
    task_publish_retry_policy = {
        "max_retries": 2,
        "interval_start": 0,
        "interval_step": 0.2,
        "interval_max": 0.5,
    }

    worker_send_task_events = True
    task_send_sent_event = True

    timezone = "UTC"
    enable_utc = True
