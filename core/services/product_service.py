# =============================================================================
# core/services/product_service.py - Product Business Logic
# =============================================================================
# Handles the public catalogue and artist listing management.
#
# Derived columns (customer_price, homelessness_contribution) are always
# computed here from the artist price and never accepted from clients.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import page_range, pagination_meta, quote_filter_value, slugify
from core.models.product import ProductCreate, ProductListParams, ProductStatus, ProductUpdate
from core.pricing import derived_price_fields
from core.services.category_service import CategoryService
from app.exceptions import OwnershipError, ProductNotFoundError

logger = logging.getLogger(__name__)

# Embedded relations returned with catalogue rows
PRODUCT_SELECT = (
    "*, artist:artists(id, name, business_name, slug, city, state, profile_image_url), "
    "category:categories(id, name, slug)"
)

FEATURED_LIMIT = 8
NEW_ARRIVALS_LIMIT = 12
NEW_ARRIVALS_DAYS = 30
SEARCH_LIMIT = 20


def _active_products(client, columns: str = PRODUCT_SELECT, count: str | None = None):
    return (
        client.table("products")
        .select(columns, count=count)
        .eq("status", ProductStatus.ACTIVE.value)
    )


def _search_filter(term: str, tags: bool = False) -> str:
    """or() filter matching the term in name and description, optionally tags."""
    pattern = quote_filter_value(f"%{term}%")
    clauses = [f"name.ilike.{pattern}", f"description.ilike.{pattern}"]
    if tags:
        clauses.append(f"tags.cs.{{{quote_filter_value(term)}}}")
    return ",".join(clauses)


class ProductService:
    """
    Service for product operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Public catalogue
    # -------------------------------------------------------------------------

    @staticmethod
    def list_products(params: ProductListParams) -> dict[str, Any]:
        """
        List active products with filters, sorting and pagination.

        Returns:
            {"products": [...], "pagination": {page, limit, total, pages}}
        """
        client = SupabaseClient.get_client()
        query = _active_products(client, count="exact")

        if params.category:
            category = SupabaseClient.fetch_one("categories", "slug", params.category, columns="id")
            if not category:
                # Unknown category: empty page rather than 404
                return {"products": [], "pagination": pagination_meta(params.page, params.limit, 0)}
            query = query.eq("category_id", category["id"])

        if params.min_price is not None:
            query = query.gte("customer_price", params.min_price)
        if params.max_price is not None:
            query = query.lte("customer_price", params.max_price)
        if params.artist:
            query = query.eq("artist_id", str(params.artist))
        if params.search and params.search.strip():
            query = query.or_(_search_filter(params.search.strip()))

        start, end = page_range(params.page, params.limit)
        response = (
            query.order(params.sort.value, desc=params.order == "desc")
            .range(start, end)
            .execute()
        )

        return {
            "products": response.data or [],
            "pagination": pagination_meta(params.page, params.limit, response.count or 0),
        }

    @staticmethod
    def featured_products() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            _active_products(client)
            .eq("is_featured", True)
            .order("created_at", desc=True)
            .limit(FEATURED_LIMIT)
            .execute()
        )
        return response.data or []

    @staticmethod
    def new_arrivals(now: datetime | None = None) -> list[dict[str, Any]]:
        """Active products created in the last 30 days, newest first."""
        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=NEW_ARRIVALS_DAYS)).isoformat()

        client = SupabaseClient.get_client()
        response = (
            _active_products(client)
            .gte("created_at", since)
            .order("created_at", desc=True)
            .limit(NEW_ARRIVALS_LIMIT)
            .execute()
        )
        return response.data or []

    @staticmethod
    def search(q: str | None) -> list[dict[str, Any]]:
        """Search names, descriptions and tags. Blank queries return nothing."""
        term = (q or "").strip()
        if not term:
            return []

        client = SupabaseClient.get_client()
        response = (
            _active_products(client)
            .or_(_search_filter(term, tags=True))
            .limit(SEARCH_LIMIT)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_product(product_id: str | UUID, count_view: bool = False) -> dict[str, Any]:
        """
        Get a product with its artist and category.

        Args:
            product_id: The product UUID
            count_view: Increment the view counter (storefront detail page)

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = SupabaseClient.fetch_by_id("products", product_id, columns=PRODUCT_SELECT)
        if not product:
            raise ProductNotFoundError(str(product_id))

        if count_view:
            views = (product.get("views") or 0) + 1
            SupabaseClient.update_by_id("products", product_id, {"views": views})
            product["views"] = views

        return product

    @staticmethod
    def add_favorite(product_id: str | UUID) -> int:
        """Increment the favorite counter and return the new value."""
        product = SupabaseClient.fetch_by_id("products", product_id, columns="id, favorites")
        if not product:
            raise ProductNotFoundError(str(product_id))

        favorites = (product.get("favorites") or 0) + 1
        SupabaseClient.update_by_id("products", product_id, {"favorites": favorites})
        return favorites

    @staticmethod
    def products_by_artist(artist_id: str | UUID, status: str | None = ProductStatus.ACTIVE.value) -> list[dict[str, Any]]:
        """
        Products for one artist, newest first.

        Args:
            artist_id: The artist UUID
            status: Only this status; None returns every status
        """
        client = SupabaseClient.get_client()
        query = (
            client.table("products")
            .select("*, category:categories(id, name, slug)")
            .eq("artist_id", str(artist_id))
        )
        if status:
            query = query.eq("status", status)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    # -------------------------------------------------------------------------
    # Artist listing management
    # -------------------------------------------------------------------------

    @staticmethod
    def create_product(artist_id: str | UUID, data: ProductCreate) -> dict[str, Any]:
        """
        Create a listing owned by `artist_id`.

        Returns:
            The stored product row
        """
        row = data.model_dump(mode="json")
        row.update(derived_price_fields(data.price))
        row["artist_id"] = str(artist_id)
        row["slug"] = slugify(data.name)

        product = SupabaseClient.insert("products", row)[0]
        logger.info(f"Created product: {product['id']} for artist: {artist_id}")

        CategoryService.refresh_product_count(row.get("category_id"))
        return product

    @staticmethod
    def get_owned_product(product_id: str | UUID, artist_id: str | UUID) -> dict[str, Any]:
        """
        Fetch a product and verify the artist owns it.

        Raises:
            ProductNotFoundError: If the product doesn't exist
            OwnershipError: If it belongs to another artist
        """
        product = SupabaseClient.fetch_by_id("products", product_id)
        if not product:
            raise ProductNotFoundError(str(product_id))
        if str(product.get("artist_id")) != str(artist_id):
            raise OwnershipError("product")
        return product

    @staticmethod
    def update_product(
        product_id: str | UUID,
        artist_id: str | UUID,
        data: ProductUpdate,
    ) -> dict[str, Any]:
        """Apply whitelisted changes; a new price recomputes derived prices."""
        product = ProductService.get_owned_product(product_id, artist_id)

        changes = data.changes()
        if not changes:
            return product

        if "price" in changes and changes["price"] is not None:
            changes.update(derived_price_fields(changes["price"]))
        if changes.get("name"):
            changes["slug"] = slugify(changes["name"])
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        updated = SupabaseClient.update_by_id("products", product_id, changes) or product
        logger.info(f"Updated product: {product_id}")

        if "status" in changes or "category_id" in changes:
            CategoryService.refresh_product_count(product.get("category_id"))
            if changes.get("category_id") and changes["category_id"] != product.get("category_id"):
                CategoryService.refresh_product_count(changes["category_id"])

        return updated

    @staticmethod
    def archive_product(product_id: str | UUID, artist_id: str | UUID) -> dict[str, Any]:
        """Soft delete: the row stays, status becomes archived."""
        product = ProductService.get_owned_product(product_id, artist_id)

        updated = SupabaseClient.update_by_id(
            "products",
            product_id,
            {
                "status": ProductStatus.ARCHIVED.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        ) or product
        logger.info(f"Archived product: {product_id}")

        CategoryService.refresh_product_count(product.get("category_id"))
        return updated
