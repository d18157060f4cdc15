# =============================================================================
# core/services/earnings_service.py - Artist Earnings Report
# =============================================================================
# Aggregates an artist's paid order items with pandas into:
# - overall totals
# - a monthly breakdown (YYYY-MM)
# - per-order earnings
# and exports the per-order table as CSV for the CMS "Download" button.
#
# The contribution column follows the configured contribution base
# (see core/pricing.py), and the report says which base it used.
# =============================================================================

import io
import logging
from typing import Any
from uuid import UUID

import pandas as pd

from core.models.artist import EarningsReport, MonthlyEarnings, OrderEarnings
from core.pricing import ContributionBase, contribution_factor, default_contribution_base, to_cents
from core.services.artist_service import ArtistService

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["order_number", "created_at", "items_sold", "revenue", "contribution"]


def items_frame(items: list[dict[str, Any]]) -> pd.DataFrame:
    """
    Flatten order_items rows (with embedded `order`) into a DataFrame.

    Columns: order_number, created_at, quantity, subtotal
    """
    records = []
    for item in items:
        order = item.get("order") or {}
        records.append({
            "order_number": order.get("order_number"),
            "created_at": order.get("created_at"),
            "quantity": item.get("quantity") or 0,
            "subtotal": float(item.get("subtotal") or 0),
        })

    df = pd.DataFrame(records, columns=["order_number", "created_at", "quantity", "subtotal"])
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True, errors="coerce")
    return df


def build_report(items: list[dict[str, Any]], base: ContributionBase | None = None) -> EarningsReport:
    """Aggregate paid order items into an EarningsReport."""
    base = base or default_contribution_base()
    df = items_frame(items)

    if df.empty:
        return EarningsReport(contribution_base=base.value)

    factor = contribution_factor(base)
    df["contribution"] = df["subtotal"] * factor

    per_order = (
        df.groupby("order_number", as_index=False)
        .agg(
            created_at=("created_at", "min"),
            items_sold=("quantity", "sum"),
            revenue=("subtotal", "sum"),
            contribution=("contribution", "sum"),
        )
        .sort_values("created_at", ascending=False)
    )

    dated = df.dropna(subset=["created_at"]).copy()
    dated["month"] = dated["created_at"].dt.strftime("%Y-%m")
    monthly = (
        dated.groupby("month", as_index=False)
        .agg(
            orders=("order_number", "nunique"),
            items_sold=("quantity", "sum"),
            revenue=("subtotal", "sum"),
            contribution=("contribution", "sum"),
        )
        .sort_values("month")
    )

    return EarningsReport(
        total_revenue=to_cents(df["subtotal"].sum()),
        total_items_sold=int(df["quantity"].sum()),
        total_orders=int(df["order_number"].nunique()),
        homelessness_contribution=to_cents(df["contribution"].sum()),
        contribution_base=base.value,
        monthly=[
            MonthlyEarnings(
                month=row.month,
                orders=int(row.orders),
                items_sold=int(row.items_sold),
                revenue=to_cents(row.revenue),
                contribution=to_cents(row.contribution),
            )
            for row in monthly.itertuples(index=False)
        ],
        orders=[
            OrderEarnings(
                order_number=row.order_number,
                created_at=None if pd.isna(row.created_at) else row.created_at.to_pydatetime(),
                items_sold=int(row.items_sold),
                revenue=to_cents(row.revenue),
                contribution=to_cents(row.contribution),
            )
            for row in per_order.itertuples(index=False)
        ],
    )


def report_to_csv(report: EarningsReport) -> str:
    """Per-order earnings as CSV text."""
    df = pd.DataFrame(
        [order.model_dump(mode="json") for order in report.orders],
        columns=CSV_COLUMNS,
    )
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue()


class EarningsService:
    """Earnings reporting for the artist CMS."""

    @staticmethod
    def get_report(artist_id: str | UUID) -> EarningsReport:
        items = ArtistService.paid_order_items(artist_id)
        report = build_report(items)
        logger.debug(f"Earnings report for {artist_id}: {report.total_orders} orders")
        return report

    @staticmethod
    def get_report_csv(artist_id: str | UUID) -> str:
        return report_to_csv(EarningsService.get_report(artist_id))
