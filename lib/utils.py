# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import math
import random
import re
import string
import time
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        artist_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        artist_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Text Utilities
# =============================================================================

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Build a URL slug from a display name.

    Lowercases, collapses every run of non-alphanumeric characters into a
    single hyphen and trims hyphens from both ends.

    Example:
        slugify("Pottery & Ceramics") -> "pottery-ceramics"
    """
    return _NON_ALNUM.sub("-", value.lower()).strip("-")


def quote_filter_value(value: str) -> str:
    """
    Double-quote a value for a PostgREST filter string.

    Inside quotes , . : ( ) are literal, so user input cannot add or
    close filter clauses.

    Example:
        quote_filter_value('red, blue') -> '"red, blue"'
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def generate_order_number(now_ms: int | None = None) -> str:
    """
    Generate a human-readable order number.

    Format: WA-<last 8 digits of the epoch millis>-<4 uppercase alphanumerics>

    Example:
        generate_order_number() -> "WA-48213377-K9QZ"
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"WA-{str(now_ms)[-8:]}-{suffix}"


def unique_filename(prefix: str, extension: str = "jpg") -> str:
    """Build a storage filename like product-1718900000000-123456789.jpg."""
    timestamp = int(time.time() * 1000)
    random_suffix = random.randint(0, 10**9)
    return f"{prefix}-{timestamp}-{random_suffix}.{extension}"


# =============================================================================
# Pagination
# =============================================================================

def page_range(page: int, limit: int) -> tuple[int, int]:
    """
    Convert 1-indexed page/limit into an inclusive PostgREST range.

    Example:
        page_range(2, 12) -> (12, 23)
    """
    offset = (page - 1) * limit
    return offset, offset + limit - 1


def pagination_meta(page: int, limit: int, total: int) -> dict[str, int]:
    """Build the pagination block returned by list endpoints."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors raised outside the
    HTTP layer.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
