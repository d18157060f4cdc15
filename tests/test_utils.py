# =============================================================================
# tests/test_utils.py - Shared Utility Tests
# =============================================================================

import re
from uuid import UUID

from lib.utils import (
    generate_order_number,
    normalize_uuid,
    page_range,
    pagination_meta,
    quote_filter_value,
    slugify,
    unique_filename,
)


class TestSlugify:

    def test_collapses_punctuation(self):
        assert slugify("Pottery & Ceramics") == "pottery-ceramics"

    def test_trims_edge_hyphens(self):
        assert slugify("  --Hand-thrown Mug!  ") == "hand-thrown-mug"

    def test_empty(self):
        assert slugify("") == ""


class TestQuoteFilterValue:

    def test_wraps_reserved_characters(self):
        assert quote_filter_value("red, blue (large)") == '"red, blue (large)"'

    def test_escapes_quotes_and_backslashes(self):
        assert quote_filter_value('6" \\ 8"') == '"6\\" \\\\ 8\\""'


class TestOrderNumber:
    """Order numbers look like WA-<8 digits>-<4 chars>."""

    def test_format(self):
        number = generate_order_number()
        assert re.fullmatch(r"WA-\d{8}-[A-Z0-9]{4}", number)

    def test_uses_last_eight_digits_of_timestamp(self):
        number = generate_order_number(now_ms=1718900012345678)
        assert number.startswith("WA-12345678-")


class TestPagination:

    def test_first_page(self):
        assert page_range(1, 12) == (0, 11)

    def test_later_page(self):
        assert page_range(3, 10) == (20, 29)

    def test_meta_rounds_pages_up(self):
        assert pagination_meta(1, 12, 25) == {"page": 1, "limit": 12, "total": 25, "pages": 3}

    def test_meta_no_results(self):
        assert pagination_meta(1, 12, 0)["pages"] == 0


class TestMisc:

    def test_normalize_uuid(self):
        value = UUID("11111111-1111-1111-1111-111111111111")
        assert normalize_uuid(value) == "11111111-1111-1111-1111-111111111111"
        assert normalize_uuid("abc") == "abc"

    def test_unique_filename(self):
        name = unique_filename("product")
        assert re.fullmatch(r"product-\d+-\d+\.jpg", name)
