# =============================================================================
# app/exceptions.py - Marketplace Errors
# =============================================================================
# Services raise these; main.py turns them into
#   {"detail": ..., "code": ..., "suggestion"?: ..., "details"?: ...}
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class MarketplaceException(Exception):
    """Base class: an HTTP status, a stable error code and an optional hint."""

    def __init__(
        self,
        message: str,
        code: str = "MARKETPLACE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found Exceptions
# =============================================================================

class ResourceNotFoundError(MarketplaceException):
    """Raised when a record doesn't exist."""

    def __init__(self, resource: str, identifier: str, code: str | None = None):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code=code or f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} identifier is correct",
            details={"id": identifier},
        )


class ProductNotFoundError(ResourceNotFoundError):
    def __init__(self, product_id: str):
        super().__init__("Product", str(product_id))


class ArtistNotFoundError(ResourceNotFoundError):
    def __init__(self, artist_id: str):
        super().__init__("Artist", str(artist_id))


class CategoryNotFoundError(ResourceNotFoundError):
    def __init__(self, slug: str):
        super().__init__("Category", slug)


class OrderNotFoundError(ResourceNotFoundError):
    def __init__(self, order_ref: str):
        super().__init__("Order", str(order_ref))


class CustomerNotFoundError(ResourceNotFoundError):
    def __init__(self, customer_id: str):
        super().__init__("Customer", str(customer_id))


# =============================================================================
# Account Exceptions
# =============================================================================

class EmailAlreadyRegisteredError(MarketplaceException):
    """Raised when registering with an email that is already taken."""

    def __init__(self, email: str):
        super().__init__(
            message="Email already registered",
            code="EMAIL_ALREADY_REGISTERED",
            status_code=400,
            suggestion="Log in instead, or use the forgot-password flow",
            details={"email": email},
        )


class InvalidCredentialsError(MarketplaceException):
    """Raised on a failed login. Never reveals which part was wrong."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AccountStatusError(MarketplaceException):
    """Raised when an artist account is not allowed to perform an action."""

    def __init__(self, status: str, message: str | None = None):
        super().__init__(
            message=message or f"Account is {status}. Please contact support.",
            code=f"ACCOUNT_{status.upper()}",
            status_code=403,
            suggestion="Contact marketplace support to review your account",
            details={"status": status},
        )


class InvalidTokenError(MarketplaceException):
    """Raised for unusable refresh or password-reset tokens."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(
            message=message,
            code="INVALID_TOKEN",
            status_code=status_code,
            suggestion="Request a new token and try again",
        )


class WeakPasswordError(MarketplaceException):
    def __init__(self, min_length: int):
        super().__init__(
            message=f"Password must be at least {min_length} characters",
            code="WEAK_PASSWORD",
            status_code=400,
            details={"min_length": min_length},
        )


# =============================================================================
# Ownership / Validation Exceptions
# =============================================================================

class OwnershipError(MarketplaceException):
    """Raised when an artist touches a resource that belongs to someone else."""

    def __init__(self, resource: str = "resource"):
        super().__init__(
            message=f"Access denied. You do not own this {resource}.",
            code="NOT_OWNER",
            status_code=403,
        )


class InvalidRequestError(MarketplaceException):
    """Raised for semantically invalid input that passed schema validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
            status_code=400,
            details=details,
        )


# =============================================================================
# Order Exceptions
# =============================================================================

class InsufficientStockError(MarketplaceException):
    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            message=f"Insufficient quantity for {product_name}",
            code="INSUFFICIENT_STOCK",
            status_code=400,
            suggestion=f"Reduce the quantity to {available} or fewer",
            details={"available": available, "requested": requested},
        )


class ProductUnavailableError(MarketplaceException):
    def __init__(self, product_name: str, status: str):
        super().__init__(
            message=f"Product is not available for purchase: {product_name}",
            code="PRODUCT_UNAVAILABLE",
            status_code=400,
            details={"status": status},
        )


class OrderAlreadyPaidError(MarketplaceException):
    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order has already been paid: {order_id}",
            code="ORDER_ALREADY_PAID",
            status_code=400,
            details={"order_id": order_id},
        )


class PaymentError(MarketplaceException):
    def __init__(self, error: str):
        super().__init__(
            message=f"Payment provider error: {error}",
            code="PAYMENT_ERROR",
            status_code=502,
            suggestion="Try again later or choose another payment method",
            details={"error": error},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(MarketplaceException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Only image files are allowed: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(MarketplaceException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File size too large: {size_mb:.1f}MB (max: {max_mb}MB per image)",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class TooManyFilesError(MarketplaceException):
    def __init__(self, count: int, max_files: int):
        super().__init__(
            message=f"Too many files. Maximum {max_files} images allowed.",
            code="TOO_MANY_FILES",
            status_code=400,
            details={"count": count, "max_files": max_files},
        )


class NoFileProvidedError(MarketplaceException):
    def __init__(self, plural: bool = False):
        super().__init__(
            message="No image files provided" if plural else "No image file provided",
            code="NO_FILE",
            status_code=400,
        )


class ImageProcessingError(MarketplaceException):
    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Could not process image: {error}",
            code="IMAGE_PROCESSING_ERROR",
            status_code=400,
            suggestion="Check that the file is a valid, uncorrupted image",
            details={"filename": filename, "error": error},
        )


class StorageUploadError(MarketplaceException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Error uploading image to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


class StorageDeleteError(MarketplaceException):
    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to delete image: {error}",
            code="STORAGE_DELETE_ERROR",
            status_code=500,
            details={"path": path, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def marketplace_exception_handler(
    request: Request,
    exc: MarketplaceException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
