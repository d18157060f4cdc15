# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image upload/delete operations with Supabase Storage.
#
# Buckets:
# - product-images: product main images + thumbnails
# - artist-images: artist profile and cover images
#
# Every stored image is a JPEG produced by lib/images.py, stored under
# <artist_id>/ so an artist can only delete their own files.
# =============================================================================

import logging
from urllib.parse import urlparse
from uuid import UUID

from lib.images import (
    ARTIST_PRESETS,
    PRODUCT_MAIN,
    PRODUCT_THUMBNAIL,
    ImageProcessingFailure,
    image_size,
    process_image,
)
from lib.supabase_client import SupabaseClient
from lib.utils import unique_filename
from app.exceptions import (
    ImageProcessingError,
    InvalidRequestError,
    OwnershipError,
    StorageDeleteError,
    StorageUploadError,
)

logger = logging.getLogger(__name__)

PRODUCT_BUCKET = "product-images"
ARTIST_BUCKET = "artist-images"
BUCKETS = (PRODUCT_BUCKET, ARTIST_BUCKET)

JPEG_CONTENT_TYPE = "image/jpeg"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles resizing, uploading and deleting marketplace images.
    """

    # -------------------------------------------------------------------------
    # Low-level helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_bytes(bucket: str, path: str, content: bytes) -> str:
        """
        Upload JPEG bytes and return the public URL.

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": JPEG_CONTENT_TYPE,
                    "cache-control": "3600",
                    "upsert": "false",
                }
            )
            logger.info(f"Uploaded image to storage: {bucket}/{path}")
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        return StorageService.get_public_url(bucket, path)

    @staticmethod
    def get_public_url(bucket: str, path: str) -> str:
        client = SupabaseClient.get_client()
        return client.storage.from_(bucket).get_public_url(path)

    @staticmethod
    def delete_file(bucket: str, path: str) -> bool:
        """
        Delete a file from storage.

        Raises:
            StorageDeleteError: If deletion fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([path])
            logger.info(f"Deleted file from storage: {bucket}/{path}")
            return True
        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            raise StorageDeleteError(path, str(e))

    @staticmethod
    def ensure_buckets() -> list[str]:
        """
        Create any missing public image buckets.

        Returns:
            Names of buckets that were created
        """
        client = SupabaseClient.get_client()
        existing = {bucket.name for bucket in client.storage.list_buckets()}

        created = []
        for name in BUCKETS:
            if name in existing:
                continue
            client.storage.create_bucket(name, options={"public": True})
            logger.info(f"Created storage bucket: {name}")
            created.append(name)
        return created

    @staticmethod
    def parse_public_url(url: str) -> tuple[str, str]:
        """
        Split a public storage URL into (bucket, path).

        Public URLs look like
        https://<project>.supabase.co/storage/v1/object/public/<bucket>/<path>

        Raises:
            InvalidRequestError: If the URL is not a public URL for one of our buckets
        """
        marker = "/object/public/"
        url_path = urlparse(url).path
        if marker not in url_path:
            raise InvalidRequestError("Not a storage image URL", details={"url": url})

        bucket, _, path = url_path.split(marker, 1)[1].partition("/")
        if bucket not in BUCKETS or not path:
            raise InvalidRequestError("Not a storage image URL", details={"url": url})
        return bucket, path

    @staticmethod
    def artist_path(artist_id: str | UUID, name: str) -> str:
        """Storage path for a file owned by an artist: <artist_id>/<name>."""
        return f"{artist_id}/{name}"

    @staticmethod
    def owned_path(url: str, artist_id: str | UUID) -> tuple[str, str]:
        """
        (bucket, path) for an image URL the artist owns.

        Raises:
            InvalidRequestError: If the URL is not one of our storage URLs
            OwnershipError: If the file is not under the artist's folder
        """
        bucket, path = StorageService.parse_public_url(url)
        if not path.startswith(f"{artist_id}/") or ".." in path.split("/"):
            logger.warning(f"Artist {artist_id} tried to delete {bucket}/{path}")
            raise OwnershipError("image")
        return bucket, path

    # -------------------------------------------------------------------------
    # Image uploads
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_product_image(artist_id: str | UUID, content: bytes, filename: str) -> dict[str, str]:
        """
        Resize and upload a product image plus its thumbnail.

        Args:
            artist_id: Owner; files are stored under this artist's folder
            content: Raw uploaded bytes
            filename: Original filename (for error messages)

        Returns:
            {"url", "thumbnail_url", "filename"}

        Raises:
            ImageProcessingError: If the image cannot be decoded
            StorageUploadError: If upload fails
        """
        try:
            main = process_image(content, PRODUCT_MAIN)
            thumb = process_image(content, PRODUCT_THUMBNAIL)
        except ImageProcessingFailure as e:
            raise ImageProcessingError(filename, e.message)

        main_name = StorageService.artist_path(artist_id, unique_filename("product"))
        thumb_name = StorageService.artist_path(artist_id, unique_filename("thumb"))

        url = StorageService.upload_bytes(PRODUCT_BUCKET, main_name, main)
        thumbnail_url = StorageService.upload_bytes(PRODUCT_BUCKET, thumb_name, thumb)
        width, height = image_size(main)
        logger.debug(f"Product image {filename} stored as {main_name} ({width}x{height})")

        return {
            "url": url,
            "thumbnail_url": thumbnail_url,
            "filename": main_name,
        }

    @staticmethod
    def upload_artist_image(
        artist_id: str | UUID, content: bytes, filename: str, kind: str = "profile"
    ) -> dict[str, str]:
        """
        Resize and upload an artist profile or cover image.

        Args:
            artist_id: Owner of the image
            content: Raw uploaded bytes
            filename: Original filename
            kind: "profile" or "cover"
        """
        preset = ARTIST_PRESETS.get(kind)
        if preset is None:
            raise InvalidRequestError(f"Unknown artist image type: {kind}")

        try:
            processed = process_image(content, preset)
        except ImageProcessingFailure as e:
            raise ImageProcessingError(filename, e.message)

        name = StorageService.artist_path(artist_id, unique_filename(kind))
        url = StorageService.upload_bytes(ARTIST_BUCKET, name, processed)
        return {"url": url, "filename": name}

    @staticmethod
    def delete_image(url: str, artist_id: str | UUID) -> bool:
        """
        Delete one of the artist's images given its public URL.

        Raises:
            OwnershipError: If the image belongs to another artist
        """
        bucket, path = StorageService.owned_path(url, artist_id)
        return StorageService.delete_file(bucket, path)

    @staticmethod
    def delete_image_quietly(url: str | None, artist_id: str | UUID) -> None:
        """Delete a replaced image; failures are logged, not raised."""
        if not url:
            return
        try:
            StorageService.delete_image(url, artist_id)
        except (InvalidRequestError, OwnershipError, StorageDeleteError) as e:
            logger.warning(f"Could not delete old image {url}: {e.message}")
