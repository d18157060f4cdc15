# =============================================================================
# core/pricing.py - Price / Fee Split Policy
# =============================================================================
# Single home for every money calculation in the marketplace:
# - customer price (artist price + marketplace fee)
# - homelessness contribution
# - order totals (subtotal, shipping, tax, contribution, total)
#
# The storefront has historically disagreed about the contribution base:
# product records take 5% of the CUSTOMER price, while the add-product
# form shows 5% of the ARTIST price. Both are supported; which one is used
# is a setting (CONTRIBUTION_BASE) and every breakdown reports its base.
# =============================================================================

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, Field

from app.config import settings

CENT = Decimal("0.01")


class ContributionBase(str, Enum):
    """Which price the homelessness contribution percentage applies to."""
    CUSTOMER_PRICE = "customer_price"
    ARTIST_PRICE = "artist_price"


def to_cents(value: float | Decimal) -> float:
    """Round a money amount half-up to whole cents."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def default_contribution_base() -> ContributionBase:
    return ContributionBase(settings.CONTRIBUTION_BASE)


def contribution_factor(base: ContributionBase) -> float:
    """Multiplier that turns customer-price revenue into the contribution."""
    rate = settings.HOMELESS_CONTRIBUTION_RATE
    if base == ContributionBase.CUSTOMER_PRICE:
        return rate
    # Revenue is recorded at customer price; back out the marketplace fee
    return rate / (1 + settings.MARKETPLACE_FEE_RATE)


# =============================================================================
# Per-product pricing
# =============================================================================

def marketplace_fee(price: float, fee_rate: float | None = None) -> float:
    """Marketplace fee added on top of the artist's price."""
    rate = settings.MARKETPLACE_FEE_RATE if fee_rate is None else fee_rate
    return to_cents(Decimal(str(price)) * Decimal(str(rate)))


def customer_price(price: float, fee_rate: float | None = None) -> float:
    """
    Price shown to customers.

    Example:
        customer_price(40.00) -> 44.00
    """
    return to_cents(Decimal(str(price)) + Decimal(str(marketplace_fee(price, fee_rate))))


def homelessness_contribution(
    price: float,
    base: ContributionBase | None = None,
    fee_rate: float | None = None,
    contribution_rate: float | None = None,
) -> float:
    """
    Charitable contribution for one unit of a product.

    Args:
        price: The artist's price
        base: Price the rate applies to (defaults to the configured base)
        fee_rate: Override for the marketplace fee rate
        contribution_rate: Override for the contribution rate
    """
    base = base or default_contribution_base()
    rate = settings.HOMELESS_CONTRIBUTION_RATE if contribution_rate is None else contribution_rate

    if base == ContributionBase.CUSTOMER_PRICE:
        amount = Decimal(str(customer_price(price, fee_rate)))
    else:
        amount = Decimal(str(price))
    return to_cents(amount * Decimal(str(rate)))


class PriceBreakdown(BaseModel):
    """Everything a listing form or product record needs to show."""
    artist_price: float = Field(..., ge=0)
    marketplace_fee: float = Field(..., ge=0)
    customer_price: float = Field(..., ge=0)
    homelessness_contribution: float = Field(..., ge=0)
    contribution_base: ContributionBase


def price_breakdown(price: float, base: ContributionBase | None = None) -> PriceBreakdown:
    """Full fee split for an artist price."""
    if price < 0:
        raise ValueError("price must be non-negative")
    base = base or default_contribution_base()
    return PriceBreakdown(
        artist_price=to_cents(price),
        marketplace_fee=marketplace_fee(price),
        customer_price=customer_price(price),
        homelessness_contribution=homelessness_contribution(price, base),
        contribution_base=base,
    )


def derived_price_fields(price: float) -> dict[str, float]:
    """Columns stored alongside `price` on a product row."""
    breakdown = price_breakdown(price)
    return {
        "customer_price": breakdown.customer_price,
        "homelessness_contribution": breakdown.homelessness_contribution,
    }


# =============================================================================
# Order totals
# =============================================================================

class OrderLine(BaseModel):
    """One priced line used for checkout totals."""
    unit_price: float = Field(..., ge=0, description="Customer price per unit")
    quantity: int = Field(..., ge=1)
    shipping_cost: float = Field(default=0.0, ge=0)
    free_shipping: bool = False

    @property
    def subtotal(self) -> float:
        return to_cents(Decimal(str(self.unit_price)) * self.quantity)


class OrderTotals(BaseModel):
    subtotal: float
    shipping_cost: float
    tax: float
    homelessness_contribution: float
    total: float


def order_totals(
    lines: Iterable[OrderLine],
    tax_rate: float | None = None,
    contribution_rate: float | None = None,
) -> OrderTotals:
    """
    Compute checkout totals.

    Shipping is charged once per line using the product's own shipping
    cost unless the product ships free. The contribution is informational
    and is not added to the total.
    """
    tax_rate = settings.TAX_RATE if tax_rate is None else tax_rate
    contribution_rate = (
        settings.HOMELESS_CONTRIBUTION_RATE if contribution_rate is None else contribution_rate
    )

    subtotal = Decimal("0")
    shipping = Decimal("0")
    for line in lines:
        subtotal += Decimal(str(line.subtotal))
        if not line.free_shipping:
            shipping += Decimal(str(line.shipping_cost))

    tax = Decimal(str(to_cents(subtotal * Decimal(str(tax_rate)))))
    contribution = to_cents(subtotal * Decimal(str(contribution_rate)))
    total = subtotal + shipping + tax

    return OrderTotals(
        subtotal=to_cents(subtotal),
        shipping_cost=to_cents(shipping),
        tax=float(tax),
        homelessness_contribution=contribution,
        total=to_cents(total),
    )
