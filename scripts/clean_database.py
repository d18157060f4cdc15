#!/usr/bin/env python3
# =============================================================================
# scripts/clean_database.py - Interactive Database Cleanup
# =============================================================================
# Shows current products and artists, then offers:
#   1 - delete ALL products
#   2 - delete ALL artists
#   3 - delete both
#   4 - delete specific ids
#   5 - cancel
#
# Usage:
#   python scripts/clean_database.py
# =============================================================================

from _common import NIL_UUID, banner, confirm, parse_ids

import sys

from check_database import fetch_all, print_artists, print_products
from lib.supabase_client import SupabaseClient


def delete_all(table: str) -> None:
    SupabaseClient.get_client().table(table).delete().neq("id", NIL_UUID).execute()


def delete_ids(table: str, ids: list[str]) -> None:
    SupabaseClient.get_client().table(table).delete().in_("id", ids).execute()


def main():
    banner("Database Cleanup Tool")

    products = fetch_all("products", "id, name, artist_id, price, customer_price, status, created_at")
    artists = fetch_all("artists", "id, name, business_name, email, status, created_at")
    print_products(products)
    print_artists(artists)

    print("WARNING: This will permanently delete data!\n")
    print("What would you like to delete?")
    print("  1 - Delete ALL products")
    print("  2 - Delete ALL artists")
    print("  3 - Delete BOTH products and artists")
    print("  4 - Delete specific items (manual selection)")
    print("  5 - Cancel (exit without changes)\n")

    choice = input("Enter your choice (1-5): ").strip()

    try:
        if choice == "1":
            if confirm(f"Delete {len(products)} products?"):
                delete_all("products")
                print(f"Deleted {len(products)} products.")
            else:
                print("Cancelled.")

        elif choice == "2":
            if confirm(f"Delete {len(artists)} artists?"):
                delete_all("artists")
                print(f"Deleted {len(artists)} artists.")
            else:
                print("Cancelled.")

        elif choice == "3":
            if confirm(f"Delete {len(products)} products AND {len(artists)} artists?"):
                delete_all("products")
                delete_all("artists")
                print(f"Deleted {len(products)} products and {len(artists)} artists.")
            else:
                print("Cancelled.")

        elif choice == "4":
            product_ids = parse_ids(input("Product IDs (comma-separated, Enter to skip): "))
            if product_ids:
                delete_ids("products", product_ids)
                print(f"Deleted {len(product_ids)} products.")

            artist_ids = parse_ids(input("Artist IDs (comma-separated, Enter to skip): "))
            if artist_ids:
                delete_ids("artists", artist_ids)
                print(f"Deleted {len(artist_ids)} artists.")

        elif choice == "5":
            print("Cancelled. No changes made.")

        else:
            print("Invalid choice. No changes made.")

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
