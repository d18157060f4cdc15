# =============================================================================
# app/routers/artists.py - Artist Endpoints
# =============================================================================
# Public artist directory, applications, and the artist's own dashboard.
#
# /me routes are declared before /{artist_id} so they are matched first.
# =============================================================================

import logging
from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import StreamingResponse

from app.auth import AuthArtist, get_current_artist
from core.models.artist import ArtistApplication, ArtistSort, ArtistStats, ArtistUpdate, EarningsReport
from core.models.product import ProductStatus
from core.services.artist_service import ArtistService
from core.services.earnings_service import EarningsService
from core.services.product_service import ProductService
from workers.tasks import enqueue, send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Artist dashboard (authenticated)
# =============================================================================

@router.get("/me/profile")
async def get_my_profile(artist: AuthArtist = Depends(get_current_artist)):
    return ArtistService.get_artist(artist.id)


@router.put("/me")
async def update_my_profile(
    data: ArtistUpdate,
    artist: AuthArtist = Depends(get_current_artist),
):
    """Update whitelisted profile fields."""
    return ArtistService.update_profile(artist.id, data)


@router.get("/me/products")
async def get_my_products(
    product_status: Annotated[ProductStatus | None, Query(alias="status")] = None,
    artist: AuthArtist = Depends(get_current_artist),
):
    """All of the artist's products, optionally filtered by status."""
    return ProductService.products_by_artist(
        artist.id,
        status=product_status.value if product_status else None,
    )


@router.get("/me/stats", response_model=ArtistStats)
async def get_my_stats(artist: AuthArtist = Depends(get_current_artist)):
    return ArtistService.get_stats(artist.id)


@router.get("/me/earnings", response_model=EarningsReport)
async def get_my_earnings(
    output_format: Annotated[Literal["json", "csv"], Query(alias="format")] = "json",
    artist: AuthArtist = Depends(get_current_artist),
):
    """
    Earnings report.

    ?format=csv downloads the per-order table as a CSV file.
    """
    if output_format == "csv":
        csv_text = EarningsService.get_report_csv(artist.id)
        return StreamingResponse(
            iter([csv_text]),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="earnings.csv"'},
        )
    return EarningsService.get_report(artist.id)


# =============================================================================
# Public
# =============================================================================

@router.get("")
async def list_artists(
    city: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
    sort: Annotated[ArtistSort, Query()] = ArtistSort.CREATED_AT,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
):
    return ArtistService.list_artists(city=city, category=category, sort=sort, page=page, limit=limit)


@router.get("/featured")
async def featured_artists():
    return ArtistService.featured_artists()


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply(application: ArtistApplication):
    """
    Apply to sell on the marketplace.

    The account is created pending review.
    """
    artist = ArtistService.apply(application)
    enqueue(send_welcome_email, artist["email"], artist.get("business_name") or artist["name"], "artist")

    return {
        "message": "Application submitted successfully! We will review your application and contact you soon.",
        "artist_id": artist["id"],
    }


@router.get("/slug/{slug}")
async def get_artist_by_slug(slug: Annotated[str, Path(min_length=1)]):
    return ArtistService.get_artist_by_slug(slug)


@router.get("/{artist_id}")
async def get_artist(artist_id: Annotated[UUID, Path(description="Artist UUID")]):
    return ArtistService.get_artist(artist_id)


@router.get("/{artist_id}/products")
async def get_artist_products(artist_id: Annotated[UUID, Path(description="Artist UUID")]):
    ArtistService.get_artist(artist_id)
    return ProductService.products_by_artist(artist_id)
