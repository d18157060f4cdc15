# =============================================================================
# app/auth/routes.py - Artist Authentication Routes
# =============================================================================
# Registration, login and password management for artists.
#
# Tokens are stateless; logout is handled client-side by discarding them.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_artist
from app.auth.models import (
    AuthArtist,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    ResetPasswordRequest,
)
from app.auth.tokens import (
    TokenError,
    TokenType,
    artist_tokens,
    create_token,
    decode_reset_token,
    decode_token,
    password_reset_token,
)
from app.exceptions import InvalidTokenError
from core.models.artist import ArtistRegister
from core.services.artist_service import ArtistService
from workers.tasks import enqueue, send_password_reset_email, send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If that email exists, a password reset link has been sent."


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: ArtistRegister):
    """
    Create an artist account.

    The account starts pending approval but can log in to the CMS
    immediately.
    """
    artist = ArtistService.register(data)
    enqueue(send_welcome_email, artist["email"], artist.get("business_name") or artist["name"], "artist")

    return {
        "message": "Registration successful! Your account is pending approval.",
        "artist": artist,
        **artist_tokens(artist),
    }


@router.post("/login")
async def login(data: LoginRequest):
    """
    Log in with email and password.

    Raises:
        401: Wrong email or password
        403: Account suspended
    """
    artist = ArtistService.authenticate(data.email, data.password)
    return {
        "message": "Login successful",
        "artist": artist,
        **artist_tokens(artist),
    }


@router.post("/refresh")
async def refresh(data: RefreshRequest):
    """Exchange a refresh token for a new artist access token."""
    try:
        payload = decode_token(data.refresh_token, TokenType.REFRESH)
    except TokenError:
        raise InvalidTokenError("Invalid or expired refresh token", status_code=401)

    artist = ArtistService.get_artist(payload["sub"])
    return {
        "token": create_token(artist["id"], TokenType.ARTIST, email=artist.get("email")),
        "artist": artist,
    }


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest):
    """
    Email a reset link.

    The response is identical whether or not the email is registered.
    """
    artist = ArtistService.find_by_email(data.email)
    if artist:
        token = password_reset_token(artist["id"], "artist", artist.get("password_hash"))
        enqueue(send_password_reset_email, artist["email"], token, "artist")
    else:
        logger.info("Password reset requested for unknown artist email")

    return {"message": RESET_REQUESTED_MESSAGE}


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest):
    try:
        artist_id, fingerprint = decode_reset_token(data.token, "artist")
    except TokenError as e:
        message = "Reset token expired. Please request a new one." if e.expired else "Invalid or expired reset token"
        raise InvalidTokenError(message)

    ArtistService.reset_password(artist_id, fingerprint, data.password)
    return {"message": "Password reset successful. You can now login."}


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    artist: AuthArtist = Depends(get_current_artist),
):
    ArtistService.change_password(artist.id, data.current_password, data.new_password)
    return {"message": "Password changed successfully"}


@router.post("/logout")
async def logout(artist: AuthArtist = Depends(get_current_artist)):
    return {"message": "Logged out successfully"}


@router.get("/verify")
async def verify_token(artist: AuthArtist = Depends(get_current_artist)):
    """Check that a stored token is still valid."""
    return {
        "valid": True,
        "artist": ArtistService.get_artist(artist.id),
    }
