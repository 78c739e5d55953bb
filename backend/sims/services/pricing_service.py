"""
Pricing Service

Margin calculator for finished products. Given one product (with its filament
usages already resolved) and one snapshot of the pricing settings, produces the
full cost / price / profit breakdown:

    labor + filament + wear & tear + parts + packaging  -> total cost
    total cost / (1 - margin% - platform fee%)          -> suggested price
    list price (when set) or suggested price            -> selling price
    selling price - total cost - platform fee           -> gross profit

Nothing here touches the database or caches results; every product read
recomputes the breakdown from the current settings.

All money is float with full precision; rounding is left to whoever displays
the numbers.
"""
import math
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from sims.exceptions import InvalidInputError, UnachievableMarginError

GRAMS_PER_KG = 1000.0
MINUTES_PER_HOUR = 60.0


# ============================================================================
# INPUTS
# ============================================================================

class PricingSettings(BaseModel):
    """Immutable snapshot of the pricing parameters for one calculation."""

    model_config = ConfigDict(frozen=True)

    hourly_rate: float
    filament_spool_price: float  # per kg, fallback for filaments without a cost
    wear_tear_markup: float  # percent of filament cost
    platform_fees: float  # percent of selling price
    desired_profit_margin: float  # percent of selling price
    packaging_cost: float

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "PricingSettings":
        """
        Build a snapshot from a key -> number map such as the settings table.

        Raises:
            InvalidInputError: a pricing key is missing, not a number, or negative
        """
        snapshot = {}
        for key in cls.model_fields:
            if key not in values or values[key] is None:
                raise InvalidInputError(f"Missing pricing setting: {key}", field=key)
            snapshot[key] = _non_negative(key, values[key])
        return cls(**snapshot)

    @property
    def price_denominator(self) -> float:
        """Share of the selling price left to cover cost."""
        return 1 - self.desired_profit_margin / 100 - self.platform_fees / 100

    def require_achievable_margin(self) -> "PricingSettings":
        """
        Raises:
            UnachievableMarginError: desired margin plus platform fees reach 100%
        """
        if self.desired_profit_margin + self.platform_fees >= 100:
            raise UnachievableMarginError(self.desired_profit_margin, self.platform_fees)
        return self


class FilamentUsage(BaseModel):
    """Grams of one filament consumed per product, with its per-kg cost."""

    model_config = ConfigDict(frozen=True)

    filament_id: Optional[int] = None
    filament_usage_amount: Optional[float] = None  # grams
    cost: Optional[float] = None  # per kg


class ProductCostInput(BaseModel):
    """The product fields the calculator reads."""

    model_config = ConfigDict(frozen=True)

    print_prep_time: Optional[float] = 0  # minutes
    post_processing_time: Optional[float] = 0  # minutes
    additional_parts_cost: Optional[float] = 0
    list_price: Optional[float] = 0
    filament_used: Optional[float] = 0  # legacy aggregate grams
    filaments: List[FilamentUsage] = Field(default_factory=list)


# ============================================================================
# OUTPUT
# ============================================================================

class MarginBreakdown(BaseModel):
    """Derived financial fields for one product."""

    model_config = ConfigDict(frozen=True)

    filament_used: float
    labor_cost: float
    filament_cost: float
    wear_tear_cost: float
    total_cost: float
    selling_price: float
    platform_fee_amount: float
    gross_profit: float
    profit_margin: float
    suggested_price: float


# ============================================================================
# CALCULATION
# ============================================================================

def _non_negative(field: str, value: object) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a number, got {value!r}", field=field)
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(f"{field} must be a finite number", field=field)
    if number < 0:
        raise InvalidInputError(f"{field} must not be negative, got {number}", field=field)
    return number


def _amount(field: str, value: Optional[float]) -> float:
    """Nullable product fields count as zero."""
    if value is None:
        return 0.0
    return _non_negative(field, value)


def calculate_filament_cost(product: ProductCostInput, settings: PricingSettings):
    """
    Total grams and cost of the filament in one product.

    Linked filaments are priced individually (their own per-kg cost, or the
    global spool price when they have none). A product without linked
    filaments falls back to its legacy `filament_used` grams at the global
    spool price.

    Returns:
        (total_grams, filament_cost)
    """
    if not product.filaments:
        grams = _amount("filament_used", product.filament_used)
        return grams, grams / GRAMS_PER_KG * settings.filament_spool_price

    total_grams = 0.0
    total_cost = 0.0
    for usage in product.filaments:
        grams = _amount("filament_usage_amount", usage.filament_usage_amount)
        # A cost of 0 is treated as unset, like list_price
        price_per_kg = _amount("cost", usage.cost) or settings.filament_spool_price
        total_grams += grams
        total_cost += grams / GRAMS_PER_KG * price_per_kg
    return total_grams, total_cost


def calculate_product_margins(product: ProductCostInput, settings: PricingSettings) -> MarginBreakdown:
    """
    Compute the full cost / price / profit breakdown for one product.

    Raises:
        InvalidInputError: a numeric product field is negative or not a number
        UnachievableMarginError: desired margin plus platform fees reach 100%
    """
    prep_minutes = _amount("print_prep_time", product.print_prep_time)
    post_minutes = _amount("post_processing_time", product.post_processing_time)
    parts_cost = _amount("additional_parts_cost", product.additional_parts_cost)
    list_price = _amount("list_price", product.list_price)

    labor_cost = (prep_minutes + post_minutes) / MINUTES_PER_HOUR * settings.hourly_rate

    filament_used, filament_cost = calculate_filament_cost(product, settings)

    wear_tear_cost = filament_cost * (settings.wear_tear_markup / 100)

    total_cost = labor_cost + filament_cost + wear_tear_cost + parts_cost + settings.packaging_cost

    suggested_price = total_cost / settings.require_achievable_margin().price_denominator

    selling_price = list_price if list_price > 0 else suggested_price

    platform_fee_amount = selling_price * (settings.platform_fees / 100)

    gross_profit = selling_price - total_cost - platform_fee_amount

    profit_margin = gross_profit / selling_price * 100 if selling_price > 0 else 0.0

    return MarginBreakdown(
        filament_used=filament_used,
        labor_cost=labor_cost,
        filament_cost=filament_cost,
        wear_tear_cost=wear_tear_cost,
        total_cost=total_cost,
        selling_price=selling_price,
        platform_fee_amount=platform_fee_amount,
        gross_profit=gross_profit,
        profit_margin=profit_margin,
        suggested_price=suggested_price,
    )


def calculate_products_margins(
    products: Iterable[ProductCostInput],
    settings: PricingSettings,
) -> List[MarginBreakdown]:
    """Breakdowns for many products against the same settings snapshot."""
    return [calculate_product_margins(product, settings) for product in products]


def cost_input_from_product(product) -> ProductCostInput:
    """
    Resolve a Product row and its filament links into calculator input.

    Args:
        product: sims.models.Product with `filament_links` loaded
    """
    return ProductCostInput(
        print_prep_time=product.print_prep_time,
        post_processing_time=product.post_processing_time,
        additional_parts_cost=product.additional_parts_cost,
        list_price=product.list_price,
        filament_used=product.filament_used,
        filaments=[
            FilamentUsage(
                filament_id=link.filament_id,
                filament_usage_amount=link.filament_usage_amount,
                cost=link.filament.cost if link.filament is not None else None,
            )
            for link in product.filament_links
        ],
    )
