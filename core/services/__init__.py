# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .artist_service import ArtistService
from .category_service import CategoryService
from .customer_service import CustomerService
from .earnings_service import EarningsService
from .email_service import EmailService
from .order_service import OrderService
from .payment_service import PaymentService
from .product_service import ProductService
from .storage_service import StorageService

__all__ = [
    "ArtistService",
    "CategoryService",
    "CustomerService",
    "EarningsService",
    "EmailService",
    "OrderService",
    "PaymentService",
    "ProductService",
    "StorageService",
]
