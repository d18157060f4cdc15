# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Catalogue, account, order, storage, payment and email logic
# - pricing.py: Fee split and order totals
# - cart.py: Shopping cart shared with the storefront
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
