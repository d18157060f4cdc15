# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - product.py: Listing create/update and catalogue query schemas
# - artist.py: Artist application, profile and dashboard schemas
# - customer.py: Customer account and address schemas
# - category.py: Category response schema
# - order.py: Checkout, payment and fulfilment schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .product import (
    ProcessingTime,
    ProductCreate,
    ProductImage,
    ProductListParams,
    ProductSort,
    ProductStatus,
    ProductUpdate,
)

from .artist import (
    ArtistApplication,
    ArtistRegister,
    ArtistSort,
    ArtistStats,
    ArtistStatus,
    ArtistUpdate,
    EarningsReport,
    MonthlyEarnings,
    OrderEarnings,
    SocialMedia,
    TopProduct,
    public_artist,
)

from .customer import (
    Address,
    CustomerRegister,
    CustomerUpdate,
    public_customer,
)

from .category import CategoryResponse

from .order import (
    ConfirmPayment,
    CustomerInfo,
    OrderCreate,
    OrderItemRequest,
    OrderStatus,
    OrderSummary,
    PaymentMethod,
    PaymentStatus,
    StatusUpdate,
    TrackingUpdate,
)

__all__ = [
    # Product
    "ProcessingTime",
    "ProductCreate",
    "ProductImage",
    "ProductListParams",
    "ProductSort",
    "ProductStatus",
    "ProductUpdate",
    # Artist
    "ArtistApplication",
    "ArtistRegister",
    "ArtistSort",
    "ArtistStats",
    "ArtistStatus",
    "ArtistUpdate",
    "EarningsReport",
    "MonthlyEarnings",
    "OrderEarnings",
    "SocialMedia",
    "TopProduct",
    "public_artist",
    # Customer
    "Address",
    "CustomerRegister",
    "CustomerUpdate",
    "public_customer",
    # Category
    "CategoryResponse",
    # Order
    "ConfirmPayment",
    "CustomerInfo",
    "OrderCreate",
    "OrderItemRequest",
    "OrderStatus",
    "OrderSummary",
    "PaymentMethod",
    "PaymentStatus",
    "StatusUpdate",
    "TrackingUpdate",
]
