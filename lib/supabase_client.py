# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# One Supabase client per process plus the helpers every service uses:
# - fetching a single row by id or by column
# - inserting / updating a row and returning the stored version
# - translating PostgREST "no rows" errors into None
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   product = SupabaseClient.fetch_by_id("products", product_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """A failed marketplace query or storage call, with a hint for the operator."""

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found(error: Exception) -> bool:
    """Check whether a PostgREST error means 'no matching row'."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Shared access to the marketplace tables.

    One service-role client per process; every helper is a classmethod.

    Example:
        artist = SupabaseClient.fetch_one("artists", "email", "amy@example.com")
        product = SupabaseClient.fetch_by_id("products", product_id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Return the process-wide client, creating it on first use.

        The service key bypasses row level security, so artist ownership
        is enforced in the services instead.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info(f"Connected to Supabase at {settings.SUPABASE_URL}")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row where `column` equals `value`.

        Args:
            table: Table name
            column: Column to match on
            value: Value to match
            columns: PostgREST select string

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If the query fails for any other reason
        """
        client = cls.get_client()
        if isinstance(value, UUID):
            value = normalize_uuid(value)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(column, value)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, column: str(value)},
            )

    @classmethod
    def fetch_by_id(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch a row by primary key, or None if it doesn't exist."""
        return cls.fetch_one(table, "id", normalize_uuid(row_id), columns=columns)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert(cls, table: str, data: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert one or more rows and return the stored rows.

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table},
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_NO_DATA",
                details={"table": table},
            )
        return response.data

    @classmethod
    def update_by_id(
        cls,
        table: str,
        row_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a row by primary key.

        Returns:
            The updated row, or None if no row had that id

        Raises:
            SupabaseClientError: If the update fails
        """
        client = cls.get_client()
        row_id_str = normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", row_id_str)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": row_id_str},
            )

        if response.data:
            logger.debug(f"Updated {table} row {row_id_str}")
            return response.data[0]
        return None
