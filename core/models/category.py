# =============================================================================
# core/models/category.py - Category Schemas
# =============================================================================

from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    """
    A storefront category.

    Example:
        {
            "id": "1d7a...",
            "name": "Pottery & Ceramics",
            "slug": "pottery-ceramics",
            "product_count": 12
        }
    """
    id: str
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    image_url: str | None = None
    display_order: int = 0
    is_active: bool = True
    product_count: int = Field(default=0, ge=0)
