#!/usr/bin/env python3
# =============================================================================
# scripts/check_database.py - List Products and Artists
# =============================================================================
# Read-only overview of what is in the database.
#
# Usage:
#   python scripts/check_database.py
# =============================================================================

from _common import banner

from lib.supabase_client import SupabaseClient


def fetch_all(table: str, columns: str) -> list[dict]:
    client = SupabaseClient.get_client()
    result = client.table(table).select(columns).order("created_at", desc=True).execute()
    return result.data or []


def print_products(products: list[dict]) -> None:
    banner("ALL PRODUCTS")
    if not products:
        print("No products found.\n")
        return

    for index, product in enumerate(products, start=1):
        print(f'{index}. "{product["name"]}"')
        print(f"   ID: {product['id']}")
        print(f"   Artist ID: {product['artist_id']}")
        print(f"   Price: ${product['price']} (customer ${product.get('customer_price')})")
        print(f"   Status: {product['status']}")
        print(f"   Created: {product['created_at']}")
        print("   ---")
    print(f"\nTotal products: {len(products)}\n")


def print_artists(artists: list[dict]) -> None:
    banner("ALL ARTISTS")
    if not artists:
        print("No artists found.\n")
        return

    for index, artist in enumerate(artists, start=1):
        print(f'{index}. "{artist.get("business_name") or artist.get("name") or "Unnamed"}"')
        print(f"   ID: {artist['id']}")
        print(f"   Email: {artist['email']}")
        print(f"   Status: {artist.get('status') or 'N/A'}")
        print(f"   Created: {artist['created_at']}")
        print("   ---")
    print(f"\nTotal artists: {len(artists)}\n")


def main():
    print_products(fetch_all("products", "id, name, artist_id, price, customer_price, status, created_at"))
    print_artists(fetch_all("artists", "id, name, business_name, email, status, created_at"))


if __name__ == "__main__":
    main()
