# =============================================================================
# core/models/artist.py - Artist Schemas
# =============================================================================
# - ArtistStatus: Account lifecycle
# - ArtistApplication: Public "become an artist" form
# - ArtistRegister: Self-service registration (creates a login)
# - ArtistUpdate: Whitelisted profile fields the artist may edit
# - ArtistStats / EarningsReport: Dashboard payloads
#
# Artist rows contain password_hash; use public_artist() before returning a
# row to any client.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, EmailStr, Field


class ArtistStatus(str, Enum):
    """
    - pending: Applied or registered, awaiting review
    - active: Can sell
    - suspended: Blocked by an admin, cannot log in
    - inactive: Closed by the artist
    """
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


PRIVATE_FIELDS = {"password_hash"}


def public_artist(row: dict[str, Any] | None) -> dict[str, Any] | None:
    """Strip private columns from an artist row."""
    if row is None:
        return None
    return {key: value for key, value in row.items() if key not in PRIVATE_FIELDS}


class SocialMedia(BaseModel):
    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    etsy: str | None = None


class ArtistApplication(BaseModel):
    """
    Application submitted from the public "sell with us" page.

    The account is created in `pending` status and an admin follows up.
    A password is optional; without one the artist sets it later through
    the reset-password flow.
    """
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    bio: str | None = Field(default=None, max_length=2000)
    story: str | None = Field(default=None, max_length=5000)
    categories: list[str] = Field(default_factory=list)
    website_url: str | None = None
    social_media: SocialMedia | None = None
    is_homeless: bool = False


class ArtistRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=1)
    business_name: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    bio: str | None = None
    is_homeless: bool = False


class ArtistUpdate(BaseModel):
    """Profile fields an artist may change on their own account."""
    name: str | None = Field(default=None, min_length=1, max_length=120)
    business_name: str | None = None
    bio: str | None = Field(default=None, max_length=2000)
    story: str | None = Field(default=None, max_length=5000)
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    website_url: str | None = None
    profile_image_url: str | None = None
    cover_image_url: str | None = None
    categories: list[str] | None = None
    social_media: SocialMedia | None = None
    email_notifications: bool | None = None
    order_notifications: bool | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ArtistSort(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"
    BUSINESS_NAME = "business_name"


# =============================================================================
# Dashboard payloads
# =============================================================================

class TopProduct(BaseModel):
    id: str
    name: str
    sales: int = 0
    customer_price: float | None = None
    image_url: str | None = None


class ArtistStats(BaseModel):
    """Numbers shown on the artist CMS dashboard."""
    total_products: int = 0
    active_products: int = 0
    sold_products: int = 0
    total_sales: int = 0
    total_revenue: float = 0.0
    homelessness_contribution: float = 0.0
    contribution_base: str = "customer_price"
    recent_products: list[TopProduct] = Field(default_factory=list)


class MonthlyEarnings(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    orders: int
    items_sold: int
    revenue: float
    contribution: float


class OrderEarnings(BaseModel):
    order_number: str
    created_at: datetime | None = None
    items_sold: int
    revenue: float
    contribution: float


class EarningsReport(BaseModel):
    total_revenue: float = 0.0
    total_items_sold: int = 0
    total_orders: int = 0
    homelessness_contribution: float = 0.0
    contribution_base: str
    monthly: list[MonthlyEarnings] = Field(default_factory=list)
    orders: list[OrderEarnings] = Field(default_factory=list)
