# =============================================================================
# app/routers/products.py - Product Endpoints
# =============================================================================
# Public catalogue plus artist listing management.
#
# Endpoints:
#   GET    /products                  - Catalogue with filters and pagination
#   GET    /products/featured         - Featured products
#   GET    /products/new-arrivals     - Listed in the last 30 days
#   GET    /products/search?q=        - Quick search
#   GET    /products/artist/{id}      - An artist's active products
#   GET    /products/{id}             - Product detail (counts a view)
#   POST   /products/{id}/favorite    - Increment favorites
#   POST   /products                  - Create (artist)
#   PUT    /products/{id}             - Update (owning artist)
#   DELETE /products/{id}             - Archive (owning artist)
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import AuthArtist, get_current_artist
from core.models.product import ProductCreate, ProductListParams, ProductUpdate
from core.pricing import price_breakdown
from core.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Public
# =============================================================================

@router.get("")
async def list_products(params: Annotated[ProductListParams, Query()]):
    """
    List active products.

    Filters: category (slug), min_price / max_price (customer price),
    artist (id), search. Sort by created_at, price, customer_price, name,
    views or sales.
    """
    return ProductService.list_products(params)


@router.get("/featured")
async def featured_products():
    return ProductService.featured_products()


@router.get("/new-arrivals")
async def new_arrivals():
    return ProductService.new_arrivals()


@router.get("/search")
async def search_products(q: Annotated[str, Query()] = ""):
    """Search product names, descriptions and tags. Blank queries return []."""
    return ProductService.search(q)


@router.get("/price-breakdown")
async def get_price_breakdown(price: Annotated[float, Query(ge=0)]):
    """
    Fee split for an artist price, as shown on the add-product form.

    The response names the contribution base in use.
    """
    return price_breakdown(price)


@router.get("/artist/{artist_id}")
async def products_by_artist(artist_id: Annotated[UUID, Path(description="Artist UUID")]):
    return ProductService.products_by_artist(artist_id)


@router.get("/{product_id}")
async def get_product(product_id: Annotated[UUID, Path(description="Product UUID")]):
    """Product detail. Each request increments the view counter."""
    return ProductService.get_product(product_id, count_view=True)


@router.post("/{product_id}/favorite")
async def favorite_product(product_id: Annotated[UUID, Path(description="Product UUID")]):
    favorites = ProductService.add_favorite(product_id)
    return {"favorites": favorites}


# =============================================================================
# Artist
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    artist: AuthArtist = Depends(get_current_artist),
):
    """
    Create a listing for the logged-in artist.

    customer_price and homelessness_contribution are derived from `price`.
    """
    return ProductService.create_product(artist.id, data)


@router.put("/{product_id}")
async def update_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    data: ProductUpdate,
    artist: AuthArtist = Depends(get_current_artist),
):
    return ProductService.update_product(product_id, artist.id, data)


@router.delete("/{product_id}")
async def delete_product(
    product_id: Annotated[UUID, Path(description="Product UUID")],
    artist: AuthArtist = Depends(get_current_artist),
):
    """Soft delete: the product is archived, not removed."""
    ProductService.archive_product(product_id, artist.id)
    return {"message": "Product deleted successfully"}
