# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the API contract for product operations:
# - ProductStatus / ProcessingTime: Enums for listing state and lead time
# - ProductCreate: Input for a new listing (artist CMS "add product" form)
# - ProductUpdate: Partial update; only whitelisted fields are accepted
# - ProductListParams: Query parameters for the public catalogue
#
# Prices entered by artists are the ARTIST price. The customer price and
# homelessness contribution are derived server-side (see core/pricing.py).
# =============================================================================

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ProductStatus(str, Enum):
    """
    Listing states.

    - draft: Not visible in the storefront
    - active: Listed and purchasable
    - sold: Stock reached zero after a paid order
    - archived: Soft-deleted by the artist
    """
    DRAFT = "draft"
    ACTIVE = "active"
    SOLD = "sold"
    ARCHIVED = "archived"


class ProcessingTime(str, Enum):
    ONE_TO_TWO_DAYS = "1-2"
    THREE_TO_FIVE_DAYS = "3-5"
    ONE_TO_TWO_WEEKS = "1-2-weeks"
    CUSTOM = "custom"


class ProductSort(str, Enum):
    """Sortable catalogue columns."""
    CREATED_AT = "created_at"
    PRICE = "price"
    CUSTOMER_PRICE = "customer_price"
    NAME = "name"
    VIEWS = "views"
    SALES = "sales"


# The storefront sends camelCase sort keys
SORT_ALIASES = {
    "createdAt": ProductSort.CREATED_AT,
    "customerPrice": ProductSort.CUSTOMER_PRICE,
}


class ProductImage(BaseModel):
    url: str
    thumbnail_url: str | None = None
    alt: str | None = None
    is_primary: bool = False


class ProductCreate(BaseModel):
    """
    Schema for creating a product.

    Example:
        {
            "name": "Hand-thrown Mug",
            "price": 32.00,
            "category_id": "7b0e...",
            "stock_quantity": 4
        }
    """

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    category_id: UUID | None = None
    price: float = Field(..., ge=0, description="Artist price in dollars")
    stock_quantity: int = Field(default=1, ge=0)
    sku: str | None = None
    materials: str | None = None
    dimensions: str | None = None
    weight: str | None = None
    care_instructions: str | None = None
    shipping_cost: float = Field(default=8.00, ge=0)
    free_shipping: bool = False
    processing_time: ProcessingTime = ProcessingTime.THREE_TO_FIVE_DAYS
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    thumbnail_url: str | None = None
    images: list[ProductImage] = Field(default_factory=list)
    status: ProductStatus = ProductStatus.ACTIVE
    is_featured: bool = False

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, value: list[str]) -> list[str]:
        return [tag.strip() for tag in value if tag and tag.strip()]


class ProductUpdate(BaseModel):
    """
    Partial product update.

    Only these fields can be changed by the owning artist. Anything else in
    the request body is ignored.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category_id: UUID | None = None
    price: float | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    materials: str | None = None
    dimensions: str | None = None
    weight: str | None = None
    care_instructions: str | None = None
    shipping_cost: float | None = Field(default=None, ge=0)
    free_shipping: bool | None = None
    processing_time: ProcessingTime | None = None
    tags: list[str] | None = None
    status: ProductStatus | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None
    images: list[ProductImage] | None = None

    def changes(self) -> dict[str, Any]:
        """Fields that were actually sent, serialized for the database."""
        return self.model_dump(mode="json", exclude_unset=True)


class ProductListParams(BaseModel):
    """Query parameters for GET /products."""
    category: str | None = Field(default=None, description="Category slug")
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    artist: UUID | None = Field(default=None, description="Artist id")
    search: str | None = None
    sort: ProductSort = ProductSort.CREATED_AT
    order: str = Field(default="desc", pattern="^(asc|desc)$")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=100)

    @field_validator("sort", mode="before")
    @classmethod
    def accept_camel_case(cls, value: Any) -> Any:
        return SORT_ALIASES.get(value, value)
