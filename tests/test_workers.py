# =============================================================================
# tests/test_workers.py - Celery Task Tests
# =============================================================================
# Tasks are called directly (no broker); services are mocked.
#
# Run with: pytest tests/test_workers.py -v
# =============================================================================

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from workers.celery_app import celery_app, healthcheck
from workers.tasks import (
    enqueue,
    refresh_category_counts,
    send_order_confirmation_email,
    send_password_reset_email,
    send_welcome_email,
)


class TestCeleryApp:

    def test_email_tasks_routed_to_email_queue(self):
        routes = celery_app.conf.task_routes

        assert routes["workers.tasks.send_welcome_email"]["queue"] == "email"

    def test_healthcheck(self):
        assert healthcheck() == "OK"


class TestEmailTasks:
    """Tests for the email tasks."""

    def test_customer_welcome(self):
        with patch("workers.tasks.EmailService") as mock:
            mock.send_customer_welcome.return_value = "log"
            result = send_welcome_email("sam@example.com", "Sam Lee")

        mock.send_customer_welcome.assert_called_once_with("sam@example.com", "Sam Lee")
        assert result == {"success": True, "transport": "log"}

    def test_artist_welcome(self):
        with patch("workers.tasks.EmailService") as mock:
            send_welcome_email("dana@example.com", "Cascade Pottery Studio", "artist")

        mock.send_artist_welcome.assert_called_once_with("dana@example.com", "Cascade Pottery Studio")

    def test_smtp_failure_is_retried(self):
        # Called directly, Celery re-raises the original error instead of scheduling a retry
        with patch("workers.tasks.EmailService") as mock:
            mock.send_password_reset.side_effect = smtplib.SMTPServerDisconnected("gone")
            with pytest.raises(smtplib.SMTPException):
                send_password_reset_email("sam@example.com", "tok", "customer")

    def test_order_confirmation_reloads_order(self, order_row):
        with patch("workers.tasks.OrderService") as orders, patch("workers.tasks.EmailService") as email:
            orders.get_by_number.return_value = order_row
            email.send_order_confirmation.return_value = "smtp"

            result = send_order_confirmation_email(order_row["order_number"])

        email.send_order_confirmation.assert_called_once_with(order_row, order_row["items"])
        assert result["order_number"] == order_row["order_number"]


class TestMaintenanceTasks:

    def test_single_category(self):
        with patch("workers.tasks.CategoryService") as mock:
            mock.refresh_product_count.return_value = 4
            result = refresh_category_counts("cat-1")

        assert result == {"success": True, "counts": {"cat-1": 4}}

    def test_all_categories(self):
        with patch("workers.tasks.CategoryService") as mock:
            mock.refresh_all_counts.return_value = {"pottery": 4, "glass": 0}
            result = refresh_category_counts()

        assert result["counts"] == {"pottery": 4, "glass": 0}


class TestEnqueue:

    def test_returns_task_id(self):
        task = MagicMock()
        task.delay.return_value.id = "task-1"

        assert enqueue(task, "a", b=2) == "task-1"
        task.delay.assert_called_once_with("a", b=2)

    def test_broker_failure_is_logged_not_raised(self):
        task = MagicMock()
        task.name = "workers.tasks.send_welcome_email"
        task.delay.side_effect = ConnectionError("redis down")

        assert enqueue(task, "sam@example.com") is None
