# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Catalogue and listing management
# - artists.py: Artist directory, applications and dashboard
# - categories.py: Categories and product counts
# - orders.py: Checkout, payment confirmation and fulfilment
# - customers.py: Customer accounts
# - upload.py: Image upload and resize
# - cart.py: Cart pricing
# - newsletter.py: Mailing list signup
#
# Artist authentication lives in app/auth/routes.py.
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import artists
from . import cart
from . import categories
from . import customers
from . import health
from . import newsletter
from . import orders
from . import products
from . import upload

__all__ = [
    "artists",
    "cart",
    "categories",
    "customers",
    "health",
    "newsletter",
    "orders",
    "products",
    "upload",
]
