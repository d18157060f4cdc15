# =============================================================================
# app/routers/categories.py - Category Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from core.services.category_service import CategoryService

router = APIRouter()


@router.get("")
async def list_categories():
    """Active categories in display order."""
    return CategoryService.list_categories()


@router.get("/stats/counts")
async def category_counts():
    """Map of category slug to active product count."""
    return CategoryService.product_counts()


@router.get("/{slug}")
async def get_category(slug: Annotated[str, Path(min_length=1)]):
    return CategoryService.get_category(slug)


@router.get("/{slug}/products")
async def get_category_products(
    slug: Annotated[str, Path(min_length=1)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
):
    return CategoryService.get_category_products(slug, page=page, limit=limit)
