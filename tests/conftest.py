# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a chainable fake for the Supabase query builder
# - Provides common row fixtures
# =============================================================================

import os
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-signing-tokens")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("FRONTEND_DIR", "does-not-exist-frontend")
os.environ.setdefault("ARTIST_CMS_DIR", "does-not-exist-artist-cms")

import pytest


# =============================================================================
# Helpers
# =============================================================================

def query_chain(data=None, count=None) -> MagicMock:
    """
    Fake PostgREST query builder.

    Every builder method returns the same mock, so any chain of
    .select().eq().order()... ends in .execute() returning `data`.
    """
    query = MagicMock()
    for method in (
        "select", "eq", "neq", "gte", "lte", "ilike", "or_", "contains",
        "in_", "order", "range", "limit", "single", "update", "insert", "delete",
    ):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return query


def client_with_tables(**tables) -> MagicMock:
    """Fake Supabase client whose .table(name) returns the given query chains."""
    client = MagicMock()
    client.table.side_effect = lambda name: tables.get(name, query_chain())
    return client


# =============================================================================
# Fixtures
# =============================================================================

ARTIST_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ARTIST_ID = "22222222-2222-2222-2222-222222222222"
PRODUCT_ID = "33333333-3333-3333-3333-333333333333"
ORDER_ID = "44444444-4444-4444-4444-444444444444"
CATEGORY_ID = "55555555-5555-5555-5555-555555555555"


@pytest.fixture
def artist_row():
    """Stored artist row, including the password hash."""
    return {
        "id": ARTIST_ID,
        "name": "Dana Reyes",
        "business_name": "Cascade Pottery Studio",
        "slug": "cascade-pottery-studio",
        "email": "dana@example.com",
        "password_hash": "$2b$10$notarealhashnotarealhashnotarealhashnotarealhashnot",
        "city": "Seattle",
        "state": "WA",
        "status": "active",
        "verified": True,
    }


@pytest.fixture
def product_row():
    return {
        "id": PRODUCT_ID,
        "artist_id": ARTIST_ID,
        "category_id": CATEGORY_ID,
        "name": "Stoneware Mug",
        "slug": "stoneware-mug",
        "price": 40.00,
        "customer_price": 44.00,
        "homelessness_contribution": 2.20,
        "stock_quantity": 3,
        "shipping_cost": 8.00,
        "free_shipping": False,
        "status": "active",
        "image_url": "https://test-project.supabase.co/storage/v1/object/public/product-images/mug.jpg",
        "artist": {"id": ARTIST_ID, "name": "Dana Reyes", "business_name": "Cascade Pottery Studio"},
        "views": 10,
        "favorites": 2,
        "sales": 0,
    }


@pytest.fixture
def order_row():
    return {
        "id": ORDER_ID,
        "order_number": "WA-12345678-AB12",
        "customer_email": "sam@example.com",
        "customer_name": "Sam Lee",
        "subtotal": 88.00,
        "shipping_cost": 8.00,
        "tax": 8.80,
        "homelessness_contribution": 4.40,
        "total": 104.80,
        "payment_method": "stripe",
        "payment_status": "pending",
        "status": "pending",
        "status_history": [{"status": "pending", "note": "Order placed", "updated_by": None, "timestamp": "2026-01-05T10:00:00+00:00"}],
        "tracking": None,
        "created_at": "2026-01-05T10:00:00+00:00",
        "items": [
            {
                "product_id": PRODUCT_ID,
                "artist_id": ARTIST_ID,
                "product_name": "Stoneware Mug",
                "artist_name": "Cascade Pottery Studio",
                "quantity": 2,
                "price": 44.00,
                "subtotal": 88.00,
            }
        ],
    }


@pytest.fixture
def checkout_payload():
    return {
        "customer": {"email": "Sam@Example.com", "name": "Sam Lee"},
        "items": [{"product_id": PRODUCT_ID, "quantity": 2}],
        "shipping_address": {
            "line1": "1 Pike St",
            "city": "Seattle",
            "state": "WA",
            "zip_code": "98101",
        },
        "payment_method": "stripe",
    }
