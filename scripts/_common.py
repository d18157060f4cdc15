# =============================================================================
# scripts/_common.py - Shared helpers for maintenance scripts
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

# PostgREST refuses an unfiltered delete; every real id differs from this one
NIL_UUID = "00000000-0000-0000-0000-000000000000"


def banner(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print()


def confirm(prompt: str) -> bool:
    """Ask a yes/no question; only a literal 'yes' confirms."""
    return input(f"{prompt} (yes/no): ").strip().lower() == "yes"


def parse_ids(raw: str) -> list[str]:
    """Split a comma-separated id list, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]
