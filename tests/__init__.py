# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Artisan Marketplace API:
# - test_pricing.py / test_cart.py: Money calculations
# - test_models.py: Pydantic model validation
# - test_auth.py: Tokens, passwords and auth dependencies
# - test_*_service.py: Service logic against a mocked Supabase client
# - test_api.py: Endpoint behaviour through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
