# =============================================================================
# core/services/category_service.py - Category Business Logic
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import page_range, pagination_meta
from core.models.product import ProductStatus
from app.exceptions import CategoryNotFoundError

logger = logging.getLogger(__name__)


class CategoryService:
    """Read access to categories plus product-count maintenance."""

    @staticmethod
    def list_categories() -> list[dict[str, Any]]:
        """Active categories in display order."""
        client = SupabaseClient.get_client()
        response = (
            client.table("categories")
            .select("*")
            .eq("is_active", True)
            .order("display_order")
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_category(slug: str) -> dict[str, Any]:
        """
        Get an active category by slug.

        Raises:
            CategoryNotFoundError: If missing or inactive
        """
        category = SupabaseClient.fetch_one("categories", "slug", slug)
        if not category or not category.get("is_active", True):
            raise CategoryNotFoundError(slug)
        return category

    @staticmethod
    def get_category_products(slug: str, page: int = 1, limit: int = 12) -> dict[str, Any]:
        category = CategoryService.get_category(slug)
        client = SupabaseClient.get_client()
        start, end = page_range(page, limit)

        response = (
            client.table("products")
            .select("*, artist:artists(id, name, business_name, slug)", count="exact")
            .eq("category_id", category["id"])
            .eq("status", ProductStatus.ACTIVE.value)
            .order("created_at", desc=True)
            .range(start, end)
            .execute()
        )

        return {
            "category": category,
            "products": response.data or [],
            "pagination": pagination_meta(page, limit, response.count or 0),
        }

    @staticmethod
    def count_active_products(category_id: str) -> int:
        client = SupabaseClient.get_client()
        response = (
            client.table("products")
            .select("id", count="exact")
            .eq("category_id", category_id)
            .eq("status", ProductStatus.ACTIVE.value)
            .execute()
        )
        return response.count or 0

    @staticmethod
    def refresh_product_count(category_id: str | None) -> int | None:
        """
        Recount active products in a category and store the result.

        Returns:
            The new count, or None when no category was given
        """
        if not category_id:
            return None
        count = CategoryService.count_active_products(str(category_id))
        SupabaseClient.update_by_id("categories", category_id, {"product_count": count})
        logger.debug(f"Category {category_id} now has {count} active products")
        return count

    @staticmethod
    def product_counts() -> dict[str, int]:
        """Map of category slug -> active product count."""
        return {
            category["slug"]: CategoryService.count_active_products(category["id"])
            for category in CategoryService.list_categories()
        }

    @staticmethod
    def refresh_all_counts() -> dict[str, int]:
        counts = {}
        for category in CategoryService.list_categories():
            counts[category["slug"]] = CategoryService.refresh_product_count(category["id"])
        logger.info(f"Refreshed product counts for {len(counts)} categories")
        return counts
