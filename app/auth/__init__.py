# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides self-issued JWT authentication for artists and customers.
#
# Usage:
#   from app.auth import get_current_artist, AuthArtist
#
#   @router.get("/protected")
#   async def protected(artist: AuthArtist = Depends(get_current_artist)):
#       return {"artist_id": artist.id}
# =============================================================================

from app.auth.dependencies import (
    get_current_artist,
    get_current_artist_optional,
    get_current_customer,
    require_active_artist,
    require_verified_artist,
)
from app.auth.models import AuthArtist, AuthCustomer

__all__ = [
    "get_current_artist",
    "get_current_artist_optional",
    "get_current_customer",
    "require_active_artist",
    "require_verified_artist",
    "AuthArtist",
    "AuthCustomer",
]
