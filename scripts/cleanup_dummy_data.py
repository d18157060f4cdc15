#!/usr/bin/env python3
# =============================================================================
# scripts/cleanup_dummy_data.py - Remove Sample Data
# =============================================================================
# Deletes every row marked is_dummy_data = true, children first:
# products, then artists, then categories.
#
# Usage:
#   python scripts/cleanup_dummy_data.py
# =============================================================================

from _common import banner, confirm

import sys

from lib.supabase_client import SupabaseClient

# Foreign keys require this order
TABLES = ("products", "artists", "categories")


def delete_dummy_rows(table: str) -> int:
    client = SupabaseClient.get_client()
    result = client.table(table).delete().eq("is_dummy_data", True).execute()
    return len(result.data or [])


def main():
    banner("Dummy Data Cleanup")

    if not confirm("This will DELETE all dummy/sample data. Are you sure?"):
        print("Cleanup cancelled.")
        return

    try:
        for table in TABLES:
            print(f"Deleted {delete_dummy_rows(table)} dummy {table}")
    except Exception as e:
        print(f"Cleanup failed: {e}")
        sys.exit(1)

    print()
    print("Cleanup completed.")


if __name__ == "__main__":
    main()
