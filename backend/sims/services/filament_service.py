"""
Filament Service

Stock planning for filament spools. How many spools to keep on hand depends on
how much of the filament the products use:

    override set        -> the override
    used by no product  -> 0
    otherwise           -> 2 + total grams used per product set / 1000,
                           rounded half up, capped at 8 spools

When stock drops below that minimum, one open purchase-list entry is kept for
the filament, sized to bring stock back up with a 2 spool buffer.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from sims.logging_config import get_logger
from sims.models.filament import Filament
from sims.models.purchase_list import PurchaseListItem

logger = get_logger(__name__)

BASE_SPOOLS = 2
REORDER_BUFFER_SPOOLS = 2
MAX_MINIMUM_SPOOLS = 8


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_minimum_quantity(
    override: Optional[int],
    product_count: int,
    total_usage_grams: float,
) -> int:
    """Spools to keep on hand for one filament."""
    if override is not None:
        return override
    if product_count == 0:
        return 0
    return min(MAX_MINIMUM_SPOOLS, _round_half_up(BASE_SPOOLS + total_usage_grams / 1000))


def compute_needed_quantity(
    override: Optional[int],
    product_count: int,
    total_usage_grams: float,
    quantity: int,
) -> int:
    """Spools to buy so stock is back above the minimum with a buffer."""
    if override == 0 or product_count == 0:
        return 0
    minimum = compute_minimum_quantity(override, product_count, total_usage_grams)
    return max(0, minimum - quantity + REORDER_BUFFER_SPOOLS)


def _usage(filament: Filament):
    links = filament.product_links
    return len(links), sum(link.filament_usage_amount or 0 for link in links)


def minimum_quantity_for(filament: Filament) -> int:
    product_count, grams = _usage(filament)
    return compute_minimum_quantity(filament.minimum_quantity_override, product_count, grams)


def needed_quantity_for(filament: Filament) -> int:
    product_count, grams = _usage(filament)
    return compute_needed_quantity(
        filament.minimum_quantity_override, product_count, grams, filament.quantity or 0
    )


def refresh_stock_plan(db: Session, filament: Filament) -> Optional[PurchaseListItem]:
    """
    Recompute the filament's minimum quantity and sync its purchase-list entry.

    Only the open (not purchased) entry is touched; purchased history stays.
    Does not commit.

    Returns:
        The open purchase-list entry, or None when stock is sufficient
    """
    db.flush()
    db.refresh(filament)

    filament.minimum_quantity = minimum_quantity_for(filament)
    needed = needed_quantity_for(filament)

    open_entry = (
        db.query(PurchaseListItem)
        .filter(
            PurchaseListItem.filament_id == filament.id,
            PurchaseListItem.purchased == False,  # noqa: E712
        )
        .first()
    )

    below_minimum = (filament.quantity or 0) < filament.minimum_quantity
    if below_minimum and needed > 0:
        if open_entry is None:
            open_entry = PurchaseListItem(filament_id=filament.id, quantity=needed)
            db.add(open_entry)
            logger.info(
                f"Filament {filament.id} below minimum, added to purchase list",
                extra={"filament_id": filament.id, "needed_quantity": needed},
            )
        else:
            open_entry.quantity = needed
        return open_entry

    if open_entry is not None:
        db.delete(open_entry)
        logger.info(
            f"Filament {filament.id} restocked, removed from purchase list",
            extra={"filament_id": filament.id},
        )
    return None


def list_manufacturers(db: Session) -> List[str]:
    """Distinct, non-empty manufacturer names, alphabetical."""
    rows = (
        db.query(Filament.manufacturer)
        .filter(Filament.manufacturer.isnot(None), Filament.manufacturer != "")
        .distinct()
        .order_by(Filament.manufacturer)
        .all()
    )
    return [manufacturer for (manufacturer,) in rows]
