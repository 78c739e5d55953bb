"""
Print Queue Service

The queue is a strict total order over print jobs, kept in the `position`
column. New jobs go to the end; a reorder rewrites positions for the supplied
ids in a single transaction.
"""
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from sims.exceptions import InvalidInputError, NotFoundError
from sims.logging_config import get_logger
from sims.models.print_queue import PrintQueueItem
from sims.models.printer import Printer

logger = get_logger(__name__)


def list_queue(db: Session) -> List[PrintQueueItem]:
    """Whole queue in order, with printers loaded."""
    return (
        db.query(PrintQueueItem)
        .options(joinedload(PrintQueueItem.printer))
        .order_by(PrintQueueItem.position.asc(), PrintQueueItem.id.asc())
        .all()
    )


def get_queue_item(db: Session, item_id: int) -> PrintQueueItem:
    item = (
        db.query(PrintQueueItem)
        .options(joinedload(PrintQueueItem.printer))
        .filter(PrintQueueItem.id == item_id)
        .first()
    )
    if not item:
        raise NotFoundError("Print queue item", item_id)
    return item


def _require_printer(db: Session, printer_id: Optional[int]) -> None:
    if printer_id is None:
        return
    if not db.query(Printer.id).filter(Printer.id == printer_id).first():
        raise NotFoundError("Printer", printer_id)


def next_position(db: Session) -> int:
    """Position for a job appended at the end of the queue."""
    max_position = db.query(func.max(PrintQueueItem.position)).scalar()
    return 0 if max_position is None else max_position + 1


def create_queue_item(
    db: Session,
    item_name: str,
    printer_id: Optional[int] = None,
    color: Optional[str] = None,
    status: str = "pending",
) -> PrintQueueItem:
    """Append a job to the end of the queue."""
    _require_printer(db, printer_id)

    item = PrintQueueItem(
        item_name=item_name,
        printer_id=printer_id,
        color=color,
        status=status,
        position=next_position(db),
    )
    db.add(item)
    db.commit()

    logger.info(
        f"Queued print job {item.id} at position {item.position}",
        extra={"queue_item_id": item.id, "position": item.position},
    )
    return get_queue_item(db, item.id)


def update_queue_item(
    db: Session,
    item_id: int,
    item_name: str,
    printer_id: Optional[int] = None,
    color: Optional[str] = None,
    status: str = "pending",
) -> PrintQueueItem:
    """Replace a job's details. Its position is left alone."""
    item = get_queue_item(db, item_id)
    _require_printer(db, printer_id)

    item.item_name = item_name
    item.printer_id = printer_id
    item.color = color
    item.status = status
    db.commit()

    db.expire(item)
    return get_queue_item(db, item_id)


def delete_queue_item(db: Session, item_id: int) -> None:
    item = get_queue_item(db, item_id)
    db.delete(item)
    db.commit()
    logger.info(f"Removed print job {item_id} from queue", extra={"queue_item_id": item_id})


def reorder_queue(db: Session, item_ids: Sequence[int]) -> List[PrintQueueItem]:
    """
    Set `position = index` for every id, in list order, atomically.

    The existence check and the position writes share one transaction: if any
    id is unknown nothing changes. Jobs missing from `item_ids` keep their
    current position.

    Raises:
        InvalidInputError: the same id appears twice
        NotFoundError: an id does not exist (the first missing one is reported)

    Returns:
        Whole queue sorted by position
    """
    item_ids = list(item_ids)
    if len(set(item_ids)) != len(item_ids):
        duplicates = sorted({i for i in item_ids if item_ids.count(i) > 1})
        raise InvalidInputError(
            "Reorder list contains duplicate ids",
            field="items",
            details={"duplicate_ids": duplicates},
        )

    try:
        rows = (
            db.query(PrintQueueItem)
            .filter(PrintQueueItem.id.in_(item_ids))
            .with_for_update()
            .all()
        )
        by_id = {row.id: row for row in rows}

        for item_id in item_ids:
            if item_id not in by_id:
                raise NotFoundError("Print queue item", item_id)

        now = datetime.utcnow()
        for position, item_id in enumerate(item_ids):
            by_id[item_id].position = position
            by_id[item_id].updated_at = now

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Print queue reordered", extra={"item_count": len(item_ids)})
    return list_queue(db)
