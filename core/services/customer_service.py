# =============================================================================
# core/services/customer_service.py - Customer Accounts
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.customer import CustomerRegister, CustomerUpdate, public_customer
from app.auth.passwords import hash_password, password_fingerprint, validate_password, verify_password
from app.exceptions import (
    CustomerNotFoundError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, email, name, phone, address, created_at"


class CustomerService:
    """Customer registration, login and profile management."""

    @staticmethod
    def find_by_email(email: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_one("customers", "email", email.strip().lower())

    @staticmethod
    def register(data: CustomerRegister) -> dict[str, Any]:
        """
        Create a customer account.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
            WeakPasswordError: If the password is too short
        """
        email = data.email.strip().lower()
        validate_password(data.password)
        if CustomerService.find_by_email(email):
            raise EmailAlreadyRegisteredError(email)

        customer = SupabaseClient.insert(
            "customers",
            {
                "email": email,
                "password_hash": hash_password(data.password),
                "name": data.name,
                "phone": data.phone,
            },
        )[0]
        logger.info(f"Registered customer: {customer['id']}")
        return public_customer(customer)

    @staticmethod
    def authenticate(email: str, password: str) -> dict[str, Any]:
        customer = CustomerService.find_by_email(email)
        if not customer or not verify_password(password, customer.get("password_hash")):
            raise InvalidCredentialsError()
        return public_customer(customer)

    @staticmethod
    def get_profile(customer_id: str | UUID) -> dict[str, Any]:
        customer = SupabaseClient.fetch_by_id("customers", customer_id, columns=PROFILE_COLUMNS)
        if not customer:
            raise CustomerNotFoundError(str(customer_id))
        return customer

    @staticmethod
    def update_profile(customer_id: str | UUID, data: CustomerUpdate) -> dict[str, Any]:
        changes = data.changes()
        if not changes:
            return CustomerService.get_profile(customer_id)

        updated = SupabaseClient.update_by_id("customers", customer_id, changes)
        if not updated:
            raise CustomerNotFoundError(str(customer_id))
        return public_customer(updated)

    @staticmethod
    def set_password(customer_id: str | UUID, password: str) -> None:
        validate_password(password)
        updated = SupabaseClient.update_by_id(
            "customers", customer_id, {"password_hash": hash_password(password)}
        )
        if not updated:
            raise CustomerNotFoundError(str(customer_id))
        logger.info(f"Password updated for customer: {customer_id}")

    @staticmethod
    def reset_password(customer_id: str | UUID, fingerprint: str, password: str) -> None:
        """Like set_password, but only while the reset link's fingerprint still matches."""
        validate_password(password)
        customer = SupabaseClient.fetch_by_id("customers", customer_id, columns="id, password_hash")
        if not customer:
            raise CustomerNotFoundError(str(customer_id))
        if password_fingerprint(customer.get("password_hash")) != fingerprint:
            raise InvalidTokenError("Reset link has already been used. Please request a new one.")
        CustomerService.set_password(customer_id, password)
