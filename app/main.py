# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Artisan Marketplace API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 5000
# =============================================================================

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import MarketplaceException, marketplace_exception_handler
from app.routers import artists, cart, categories, customers, health, newsletter, orders, products, upload
from app.auth import routes as auth_routes
from core.services.storage_service import StorageService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration, make sure the image buckets exist
    - Shutdown: log
    """
    logger.info(f"Starting Artisan Marketplace API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.payments_enabled:
        logger.warning("STRIPE_SECRET_KEY not set; card payments are disabled")
    if not settings.smtp_enabled:
        logger.warning("SMTP_HOST not set; emails will be logged instead of sent")

    try:
        created = StorageService.ensure_buckets()
        if created:
            logger.info(f"Created storage buckets: {created}")
    except Exception as e:
        # Storage can come up later; uploads will report their own errors
        logger.error(f"Could not verify storage buckets: {e}")

    yield

    logger.info("Shutting down Artisan Marketplace API")


# Create FastAPI application
app = FastAPI(
    title="Artisan Marketplace API",
    description="""
## Handmade goods from local artists

Every sale sends a share of the price to organisations fighting
homelessness.

### Surfaces

- **Storefront** (`/frontend`) - browse, cart, checkout
- **Artist CMS** (`/artist-cms`) - listings, orders, earnings
- **REST API** (`/api`) - everything both of them use

### Authentication

Artists and customers log in with email + password and receive a
Bearer token. Artist tokens last 7 days and can be refreshed with the
refresh token returned at login.
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Artist registration, login and password management"},
        {"name": "Products", "description": "Catalogue and artist listings"},
        {"name": "Artists", "description": "Artist directory, applications and dashboard"},
        {"name": "Categories", "description": "Product categories"},
        {"name": "Orders", "description": "Checkout, payment and fulfilment"},
        {"name": "Customers", "description": "Customer accounts"},
        {"name": "Upload", "description": "Image uploads"},
        {"name": "Cart", "description": "Cart pricing"},
        {"name": "Newsletter", "description": "Mailing list signup"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MarketplaceException)
async def handle_marketplace_exception(request: Request, exc: MarketplaceException):
    """Handle custom marketplace exceptions."""
    return await marketplace_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/auth", tags=["Auth"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(artists.router, prefix="/api/artists", tags=["Artists"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(upload.router, prefix="/api/upload", tags=["Upload"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(newsletter.router, prefix="/api/newsletter", tags=["Newsletter"])
app.include_router(health.router, prefix="/api", tags=["Health"])


# =============================================================================
# Static Sites
# =============================================================================

def mount_static_sites(application: FastAPI) -> list[str]:
    """Serve the storefront and artist CMS when their directories exist."""
    mounted = []
    for path, directory in (
        ("/frontend", settings.FRONTEND_DIR),
        ("/artist-cms", settings.ARTIST_CMS_DIR),
    ):
        if os.path.isdir(directory):
            application.mount(path, StaticFiles(directory=directory, html=True), name=path.strip("/"))
            mounted.append(path)
        else:
            logger.info(f"Static directory not found, skipping {path}: {directory}")
    return mounted


mount_static_sites(app)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Artisan Marketplace API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/health",
        "storefront": "/frontend",
        "artist_cms": "/artist-cms",
    }
