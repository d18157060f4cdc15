# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Artist tokens are verified, then the artist row is loaded so suspended or
# deleted accounts lose access immediately.
#
# Usage:
#   from app.auth import get_current_artist, AuthArtist
#
#   @router.get("/protected")
#   async def protected(artist: AuthArtist = Depends(get_current_artist)):
#       return {"artist_id": artist.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.auth.models import AuthArtist, AuthCustomer
from app.auth.tokens import TokenError, TokenType, decode_token
from core.models.artist import ArtistStatus
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)

ARTIST_COLUMNS = "id, email, name, status, verified"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


async def get_current_artist(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthArtist:
    """
    Extract and validate the artist from an artist token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies signature, expiry and that it is an artist token
    3. Loads the artist row and rejects suspended accounts

    Raises:
        HTTPException: 401 if missing/invalid/expired, 403 if suspended
    """
    if credentials is None:
        raise _unauthorized("Access token required")

    try:
        payload = decode_token(credentials.credentials, TokenType.ARTIST)
    except TokenError as e:
        logger.warning(f"Artist token rejected: {e.message}")
        raise _unauthorized(e.message)

    artist = SupabaseClient.fetch_by_id("artists", payload["sub"], columns=ARTIST_COLUMNS)
    if not artist:
        raise _unauthorized("Invalid token")

    if artist.get("status") == ArtistStatus.SUSPENDED.value:
        raise _forbidden("Account suspended. Please contact support.")

    logger.debug(f"Authenticated artist: {artist['id']}")
    return AuthArtist(**artist)


async def get_current_artist_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthArtist]:
    """
    Optionally get the current artist.

    Returns None if no token is provided or the token is unusable,
    instead of raising an error.
    """
    if credentials is None:
        return None

    try:
        return await get_current_artist(credentials)
    except HTTPException:
        return None


async def require_active_artist(
    artist: AuthArtist = Depends(get_current_artist)
) -> AuthArtist:
    """Only artists whose account is active."""
    if artist.status != ArtistStatus.ACTIVE.value:
        raise _forbidden("Account not active. Please wait for approval or contact support.")
    return artist


async def require_verified_artist(
    artist: AuthArtist = Depends(get_current_artist)
) -> AuthArtist:
    if not artist.verified:
        raise _forbidden("Account not verified. Please complete verification process.")
    return artist


async def get_current_customer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthCustomer:
    """
    Extract and validate the customer from a customer token.

    Raises:
        HTTPException: 401 if missing, invalid or expired
    """
    if credentials is None:
        raise _unauthorized("Access token required")

    try:
        payload = decode_token(credentials.credentials, TokenType.CUSTOMER)
    except TokenError as e:
        logger.warning(f"Customer token rejected: {e.message}")
        raise _unauthorized(e.message)

    return AuthCustomer(id=payload["sub"], email=payload.get("email"))
