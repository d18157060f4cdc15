# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthArtist(BaseModel):
    """
    Authenticated artist loaded from the token subject.

    Carries the columns route handlers check (status, verified) so they
    don't have to refetch the row.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None
    name: str | None = None
    status: str = "pending"
    verified: bool = False


class AuthCustomer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
