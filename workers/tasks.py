# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background tasks enqueued by the API.
#
# Tasks:
# - send_welcome_email: Customer or artist welcome message
# - send_password_reset_email: Reset link for either account type
# - send_order_confirmation_email: Receipt after checkout
# - refresh_category_counts: Recount active products per category
#
# SMTP failures are retried; the API never waits on these tasks.
# =============================================================================

import logging
import smtplib
from typing import Any

from celery import shared_task

from core.services.category_service import CategoryService
from core.services.email_service import EmailService
from core.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Errors worth retrying (network / SMTP server trouble)
TRANSIENT_ERRORS = (smtplib.SMTPException, OSError)


# =============================================================================
# Email Tasks
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_welcome_email")
def send_welcome_email(self, email: str, name: str | None = None, account: str = "customer") -> dict[str, Any]:
    """
    Send a welcome email.

    Args:
        email: Recipient
        name: Customer name, or artist business name
        account: "customer" or "artist"
    """
    try:
        if account == "artist":
            transport = EmailService.send_artist_welcome(email, name or "there")
        else:
            transport = EmailService.send_customer_welcome(email, name)
    except TRANSIENT_ERRORS as e:
        logger.warning(f"Welcome email to {email} failed, retrying: {e}")
        raise self.retry(exc=e)

    return {"success": True, "transport": transport}


@shared_task(bind=True, name="workers.tasks.send_password_reset_email")
def send_password_reset_email(self, email: str, token: str, account: str = "customer") -> dict[str, Any]:
    try:
        transport = EmailService.send_password_reset(email, token, account)
    except TRANSIENT_ERRORS as e:
        logger.warning(f"Password reset email to {email} failed, retrying: {e}")
        raise self.retry(exc=e)

    return {"success": True, "transport": transport}


@shared_task(bind=True, name="workers.tasks.send_order_confirmation_email")
def send_order_confirmation_email(self, order_number: str) -> dict[str, Any]:
    """
    Send the order receipt.

    The order is reloaded so the email reflects what was stored, not
    what the request contained.
    """
    order = OrderService.get_by_number(order_number)

    try:
        transport = EmailService.send_order_confirmation(order, order.get("items") or [])
    except TRANSIENT_ERRORS as e:
        logger.warning(f"Confirmation email for {order_number} failed, retrying: {e}")
        raise self.retry(exc=e)

    return {"success": True, "transport": transport, "order_number": order_number}


# =============================================================================
# Maintenance Tasks
# =============================================================================

@shared_task(bind=True, name="workers.tasks.refresh_category_counts")
def refresh_category_counts(self, category_id: str | None = None) -> dict[str, Any]:
    """
    Recount active products.

    Args:
        category_id: Only this category; all categories when omitted
    """
    if category_id:
        count = CategoryService.refresh_product_count(category_id)
        return {"success": True, "counts": {category_id: count}}

    counts = CategoryService.refresh_all_counts()
    return {"success": True, "counts": counts}


# =============================================================================
# Enqueue helper
# =============================================================================

def enqueue(task, *args, **kwargs) -> str | None:
    """
    Queue a task without letting broker trouble fail the caller.

    Returns:
        The task id, or None if the task could not be queued
    """
    try:
        result = task.delay(*args, **kwargs)
        return result.id
    except Exception as e:
        logger.error(f"Could not enqueue {task.name}: {e}")
        return None
