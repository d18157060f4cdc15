#!/usr/bin/env python3
# =============================================================================
# scripts/seed_database.py - Sample Data Seeder
# =============================================================================
# Adds categories, sample artists and sample products.
# Every inserted row carries is_dummy_data = true so cleanup_dummy_data.py
# can remove it again.
#
# Usage:
#   python scripts/seed_database.py
# =============================================================================

from _common import banner

import logging
import sys

from core.pricing import derived_price_fields
from core.services.category_service import CategoryService
from lib.supabase_client import SupabaseClient
from lib.utils import slugify

logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# =============================================================================
# Sample Data
# =============================================================================

CATEGORIES = [
    ("Jewelry & Accessories", "jewelry", "Handcrafted rings, necklaces, earrings and bracelets", "gem"),
    ("Pottery & Ceramics", "pottery", "Handmade pottery, mugs, bowls and decorative pieces", "coffee"),
    ("Paintings & Wall Art", "paintings", "Original paintings, prints and wall decorations", "palette"),
    ("Woodworking", "woodworking", "Wooden furniture, cutting boards and home decor", "tree-pine"),
    ("Textiles & Fiber Arts", "textiles", "Handwoven textiles, knitted items and quilts", "scissors"),
    ("Glass Art", "glass", "Stained, blown and fused glass", "sparkles"),
    ("Home Decor", "home-decor", "Candles, vases and accents for the home", "home"),
    ("Sculpture", "sculpture", "Three-dimensional art in various materials", "box"),
    ("Photography", "photography", "Original photography prints", "camera"),
    ("Leather Goods", "leather", "Wallets, bags, belts and accessories", "briefcase"),
]

ARTISTS = [
    {
        "email": "demo.potter@example.com",
        "name": "Dana Reyes",
        "business_name": "Cascade Pottery Studio",
        "city": "Seattle",
        "state": "WA",
        "bio": "Functional and decorative ceramics, wheel-thrown and hand-glazed.",
        "categories": ["pottery"],
    },
    {
        "email": "demo.woodworker@example.com",
        "name": "Sam Okafor",
        "business_name": "Olympic Woodcraft",
        "city": "Olympia",
        "state": "WA",
        "bio": "Heirloom wooden goods from sustainably sourced timber.",
        "categories": ["woodworking", "home-decor"],
    },
    {
        "email": "demo.jeweler@example.com",
        "name": "Priya Nair",
        "business_name": "Puget Sound Silver",
        "city": "Tacoma",
        "state": "WA",
        "bio": "Sterling silver and gemstone jewelry.",
        "categories": ["jewelry"],
    },
    {
        "email": "demo.painter@example.com",
        "name": "Lee Morgan",
        "business_name": "Rainier Art Studio",
        "city": "Bellingham",
        "state": "WA",
        "bio": "Oil and acrylic landscapes of the Pacific Northwest.",
        "categories": ["paintings"],
    },
    {
        "email": "demo.textile@example.com",
        "name": "Jo Whitfield",
        "business_name": "Evergreen Fiber Arts",
        "city": "Spokane",
        "state": "WA",
        "bio": "Hand-dyed yarns and woven textiles using plant-based dyes.",
        "categories": ["textiles"],
    },
]

# (name, price, stock, category slug, artist index, materials, featured)
PRODUCTS = [
    ("Handcrafted Stoneware Mug", 38.00, 12, "pottery", 0, "Stoneware clay, food-safe glaze", True),
    ("Ceramic Serving Bowl - Ocean Blue", 65.00, 5, "pottery", 0, "Stoneware clay", False),
    ("Walnut Cutting Board", 85.00, 8, "woodworking", 1, "Black walnut, mineral oil", True),
    ("Cedar Candle Holder Set", 42.00, 10, "home-decor", 1, "Western red cedar", False),
    ("Silver Wave Pendant", 120.00, 4, "jewelry", 2, "Sterling silver", True),
    ("Sea Glass Stud Earrings", 48.00, 15, "jewelry", 2, "Sea glass, sterling posts", False),
    ("Mount Rainier at Dawn", 275.00, 1, "paintings", 3, "Oil on canvas", True),
    ("Hand-Dyed Merino Scarf", 68.00, 6, "textiles", 4, "Merino wool, plant dyes", False),
]

IMAGE_URL = "https://images.unsplash.com/photo-1514228742587-6b1558fcca3d?w=800&h=800&fit=crop"


# =============================================================================
# Seed Functions
# =============================================================================

def seed_categories() -> dict[str, str]:
    """Insert categories that don't exist yet; returns slug -> id for all categories."""
    client = SupabaseClient.get_client()
    existing = client.table("categories").select("id, slug").execute().data or []
    by_slug = {row["slug"]: row["id"] for row in existing}

    rows = [
        {
            "name": name,
            "slug": slug,
            "description": description,
            "icon": icon,
            "display_order": position,
            "is_active": True,
            "is_dummy_data": True,
        }
        for position, (name, slug, description, icon) in enumerate(CATEGORIES, start=1)
        if slug not in by_slug
    ]
    if rows:
        for row in SupabaseClient.insert("categories", rows):
            by_slug[row["slug"]] = row["id"]

    print(f"Categories: {len(rows)} added, {len(existing)} already present")
    return by_slug


def seed_artists() -> list[dict]:
    """Upsert sample artists by email so the script can be re-run."""
    client = SupabaseClient.get_client()
    rows = [
        {
            **artist,
            "slug": slugify(artist["business_name"]),
            "status": "active",
            "verified": True,
            "is_dummy_data": True,
        }
        for artist in ARTISTS
    ]
    result = client.table("artists").upsert(rows, on_conflict="email").execute()
    print(f"Artists: {len(result.data)} upserted")
    return result.data


def seed_products(categories: dict[str, str], artists: list[dict]) -> int:
    by_email = {artist["email"]: artist["id"] for artist in artists}
    rows = []
    for name, price, stock, category_slug, artist_index, materials, featured in PRODUCTS:
        category_id = categories.get(category_slug)
        if not category_id:
            logger.warning(f"No category found for slug '{category_slug}'")
        rows.append({
            "name": name,
            "slug": slugify(name),
            "description": f"{name}, made by hand.",
            "price": price,
            **derived_price_fields(price),
            "stock_quantity": stock,
            "category_id": category_id,
            "artist_id": by_email[ARTISTS[artist_index]["email"]],
            "materials": materials,
            "image_url": IMAGE_URL,
            "thumbnail_url": IMAGE_URL.replace("w=800&h=800", "w=400&h=400"),
            "status": "active",
            "is_featured": featured,
            "is_dummy_data": True,
        })

    inserted = SupabaseClient.insert("products", rows)
    print(f"Products: {len(inserted)} added")
    return len(inserted)


def main():
    banner("Seeding database")
    try:
        categories = seed_categories()
        artists = seed_artists()
        seed_products(categories, artists)
        counts = CategoryService.refresh_all_counts()
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)

    print(f"Refreshed product counts for {len(counts)} categories")
    print()
    print("Done. All sample rows have is_dummy_data = true.")
    print("Remove them with: python scripts/cleanup_dummy_data.py")


if __name__ == "__main__":
    main()
