# =============================================================================
# app/routers/upload.py - Image Upload Pipeline
# =============================================================================
# Handles image uploads with validation, resizing, and storage.
#
# Every file must pass both checks:
# - extension in ALLOWED_IMAGE_EXTENSIONS
# - content type image/<jpeg|jpg|png|gif|webp>
# Files over MAX_UPLOAD_SIZE_MB are rejected before decoding.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from app.auth import AuthArtist, get_current_artist
from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoFileProvidedError,
    TooManyFilesError,
)
from core.models.artist import ArtistUpdate
from core.services.artist_service import ArtistService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


class DeleteImageRequest(BaseModel):
    image_url: str


# =============================================================================
# Helper Functions
# =============================================================================

def _extension(filename: str) -> str:
    return "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


async def read_validated_image(file: UploadFile | None) -> tuple[bytes, str]:
    """
    Validate an uploaded image and return (content, filename).

    Raises:
        NoFileProvidedError: If no file was sent
        InvalidFileTypeError: If extension or content type isn't an allowed image
        FileTooLargeError: If the file exceeds the size limit
    """
    if file is None or not file.filename:
        raise NoFileProvidedError()

    filename = file.filename
    allowed = settings.allowed_image_extensions_list
    allowed_types = {f"image/{ext.lstrip('.')}" for ext in allowed}

    if _extension(filename) not in allowed or (file.content_type or "").lower() not in allowed_types:
        raise InvalidFileTypeError(filename, allowed)

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    return content, filename


async def _replace_artist_image(artist: AuthArtist, file: UploadFile | None, kind: str) -> dict:
    """Upload a new profile/cover image, point the artist at it and delete the old one."""
    content, filename = await read_validated_image(file)
    image = StorageService.upload_artist_image(artist.id, content, filename, kind=kind)

    column = "profile_image_url" if kind == "profile" else "cover_image_url"
    current = ArtistService.get_artist(artist.id)
    updated = ArtistService.update_profile(artist.id, ArtistUpdate(**{column: image["url"]}))
    StorageService.delete_image_quietly(current.get(column), artist.id)

    logger.info(f"Replaced {kind} image for artist {artist.id}")
    return {"image": image, "artist": updated}


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/product-image")
async def upload_product_image(
    image: Annotated[UploadFile | None, File(description="Product image")] = None,
    artist: AuthArtist = Depends(get_current_artist),
):
    """Upload one product image; returns the main and thumbnail URLs."""
    content, filename = await read_validated_image(image)
    result = StorageService.upload_product_image(artist.id, content, filename)
    return {"message": "Image uploaded successfully", "image": result}


@router.post("/product-images")
async def upload_product_images(
    images: Annotated[list[UploadFile] | None, File(description="Up to 5 product images")] = None,
    artist: AuthArtist = Depends(get_current_artist),
):
    if not images:
        raise NoFileProvidedError(plural=True)
    if len(images) > settings.MAX_IMAGES_PER_UPLOAD:
        raise TooManyFilesError(len(images), settings.MAX_IMAGES_PER_UPLOAD)

    # Validate everything before uploading anything
    validated = [await read_validated_image(image) for image in images]
    results = [
        StorageService.upload_product_image(artist.id, content, filename) for content, filename in validated
    ]

    logger.info(f"Artist {artist.id} uploaded {len(results)} product images")
    return {"message": "Images uploaded successfully", "images": results}


@router.post("/artist-image")
async def upload_artist_image(
    image: Annotated[UploadFile | None, File(description="Profile image")] = None,
    artist: AuthArtist = Depends(get_current_artist),
):
    result = await _replace_artist_image(artist, image, "profile")
    return {"message": "Profile image uploaded successfully", **result}


@router.post("/artist-cover")
async def upload_artist_cover(
    image: Annotated[UploadFile | None, File(description="Cover image")] = None,
    artist: AuthArtist = Depends(get_current_artist),
):
    result = await _replace_artist_image(artist, image, "cover")
    return {"message": "Cover image uploaded successfully", **result}


@router.delete("/image")
async def delete_image(
    data: DeleteImageRequest,
    artist: AuthArtist = Depends(get_current_artist),
):
    """Delete one of the artist's own images; 403 for anyone else's."""
    StorageService.delete_image(data.image_url, artist.id)
    return {"message": "Image deleted successfully"}
