# =============================================================================
# app/auth/tokens.py - JWT Issuing and Verification
# =============================================================================
# The marketplace issues its own HS256 tokens signed with JWT_SECRET.
#
# Token types (the `type` claim):
# - artist: Access token for the artist CMS (7 days)
# - refresh: Exchanged for a new artist token (30 days)
# - customer: Customer session token (30 days)
# - password-reset: One-hour reset link token; carries `account`
#                   ("artist" or "customer") so a token minted for one
#                   account type cannot reset the other, and `pwd`, a
#                   fingerprint of the password hash it was issued
#                   against, so the link stops working once used
# =============================================================================

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from jose import jwt, JWTError, ExpiredSignatureError

from app.auth.passwords import password_fingerprint
from app.config import settings


class TokenType(str, Enum):
    ARTIST = "artist"
    REFRESH = "refresh"
    CUSTOMER = "customer"
    PASSWORD_RESET = "password-reset"


class TokenError(Exception):
    """Raised when a token cannot be used. `expired` distinguishes the cause."""

    def __init__(self, message: str, expired: bool = False):
        super().__init__(message)
        self.message = message
        self.expired = expired


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type == TokenType.ARTIST:
        return timedelta(days=settings.ARTIST_TOKEN_EXPIRE_DAYS)
    if token_type == TokenType.REFRESH:
        return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    if token_type == TokenType.CUSTOMER:
        return timedelta(days=settings.CUSTOMER_TOKEN_EXPIRE_DAYS)
    return timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)


def create_token(
    subject: str,
    token_type: TokenType,
    email: str | None = None,
    extra: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> str:
    """
    Sign a token for `subject` (an artist or customer id).

    Args:
        subject: Account id stored in the `sub` claim
        token_type: Which kind of token to issue
        email: Optional email claim
        extra: Additional claims
        now: Issue time (tests)
    """
    now = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "type": token_type.value,
        "iat": int(now.timestamp()),
        "exp": int((now + _lifetime(token_type)).timestamp()),
    }
    if email:
        payload["email"] = email
    if extra:
        payload.update(extra)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, expected_type: TokenType) -> dict[str, Any]:
    """
    Verify signature, expiry and token type.

    Returns:
        The decoded claims

    Raises:
        TokenError: If the token is invalid, expired or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenError("Token has expired", expired=True)
    except JWTError as e:
        raise TokenError(f"Invalid token: {e}")

    if payload.get("type") != expected_type.value:
        raise TokenError("Invalid token type")
    if not payload.get("sub"):
        raise TokenError("Invalid token: missing subject")
    return payload


# =============================================================================
# Convenience constructors
# =============================================================================

def artist_tokens(artist: dict[str, Any]) -> dict[str, str]:
    """Access + refresh pair returned by artist register/login."""
    return {
        "token": create_token(artist["id"], TokenType.ARTIST, email=artist.get("email")),
        "refresh_token": create_token(artist["id"], TokenType.REFRESH),
    }


def customer_token(customer: dict[str, Any]) -> str:
    return create_token(customer["id"], TokenType.CUSTOMER, email=customer.get("email"))


def password_reset_token(account_id: str, account: str, password_hash: str | None) -> str:
    return create_token(
        account_id,
        TokenType.PASSWORD_RESET,
        extra={"account": account, "pwd": password_fingerprint(password_hash)},
    )


def decode_reset_token(token: str, account: str) -> tuple[str, str]:
    """
    Validate a reset token for the given account type.

    Returns:
        (account_id, password fingerprint the token was issued against)

    Raises:
        TokenError: If invalid, expired, or minted for the other account type
    """
    payload = decode_token(token, TokenType.PASSWORD_RESET)
    if payload.get("account") != account or not payload.get("pwd"):
        raise TokenError("Invalid token type")
    return payload["sub"], payload["pwd"]
