# =============================================================================
# workers/ - Background Jobs
# =============================================================================
# Celery app, queue settings and the tasks the API publishes:
# - welcome / password-reset / order-confirmation emails (queue "email")
# - category product count refresh (queue "default")
#
# The API never calls .delay() directly; it goes through
# workers.tasks.enqueue() so a missing broker only costs a log line.
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = ["celery_app", "tasks"]
