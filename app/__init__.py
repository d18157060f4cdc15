# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers, static sites
# - config.py: Environment variable loading and settings
# - exceptions.py: Error types and the JSON error handler
# - auth/: Token issuing, password hashing, auth dependencies, artist auth routes
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
