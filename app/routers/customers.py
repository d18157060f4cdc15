# =============================================================================
# app/routers/customers.py - Customer Account Endpoints
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth import AuthCustomer, get_current_customer
from app.auth.models import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest
from app.auth.tokens import TokenError, customer_token, decode_reset_token, password_reset_token
from app.exceptions import InvalidTokenError
from core.models.customer import CustomerRegister, CustomerUpdate
from core.services.customer_service import CustomerService
from core.services.order_service import OrderService
from workers.tasks import enqueue, send_password_reset_email, send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: CustomerRegister):
    """Create a customer account and send the welcome email."""
    customer = CustomerService.register(data)
    enqueue(send_welcome_email, customer["email"], customer.get("name"), "customer")

    return {
        "message": "Registration successful",
        "customer": customer,
        "token": customer_token(customer),
    }


@router.post("/login")
async def login(data: LoginRequest):
    customer = CustomerService.authenticate(data.email, data.password)
    return {
        "message": "Login successful",
        "customer": customer,
        "token": customer_token(customer),
    }


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest):
    customer = CustomerService.find_by_email(data.email)
    if customer:
        token = password_reset_token(customer["id"], "customer", customer.get("password_hash"))
        enqueue(send_password_reset_email, customer["email"], token, "customer")

    # Same response either way
    return {"message": "If that email exists, a password reset link has been sent."}


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest):
    try:
        customer_id, fingerprint = decode_reset_token(data.token, "customer")
    except TokenError as e:
        message = "Reset token expired. Please request a new one." if e.expired else "Invalid reset token"
        raise InvalidTokenError(message)

    CustomerService.reset_password(customer_id, fingerprint, data.password)
    return {"message": "Password reset successful. You can now login."}


@router.get("/me")
async def get_me(customer: AuthCustomer = Depends(get_current_customer)):
    return CustomerService.get_profile(customer.id)


@router.put("/me")
async def update_me(
    data: CustomerUpdate,
    customer: AuthCustomer = Depends(get_current_customer),
):
    """Update name, phone and address."""
    return CustomerService.update_profile(customer.id, data)


@router.get("/me/orders")
async def get_my_orders(customer: AuthCustomer = Depends(get_current_customer)):
    """Orders placed with the customer's email, each with its items."""
    profile = CustomerService.get_profile(customer.id)
    return OrderService.orders_for_email(profile["email"])
