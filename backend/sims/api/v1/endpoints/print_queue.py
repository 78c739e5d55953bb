"""
Print Queue API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from sims.db.session import get_db
from sims.logging_config import audit_log, get_client_ip
from sims.schemas.print_queue import (
    PrintQueueItemCreate,
    PrintQueueItemResponse,
    PrintQueueItemUpdate,
    PrintQueueReorderRequest,
)
from sims.services import print_queue_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[PrintQueueItemResponse])
def list_print_queue(db: Session = Depends(get_db)):
    """Whole queue ordered by position, each job with its printer"""
    return print_queue_service.list_queue(db)


@router.post("", response_model=PrintQueueItemResponse, status_code=status.HTTP_201_CREATED)
def create_print_queue_item(payload: PrintQueueItemCreate, db: Session = Depends(get_db)):
    """Add a job at the end of the queue"""
    return print_queue_service.create_queue_item(
        db,
        item_name=payload.item_name,
        printer_id=payload.printer_id,
        color=payload.color,
        status=payload.status.value,
    )


@router.post("/reorder", response_model=List[PrintQueueItemResponse])
def reorder_print_queue(
    payload: PrintQueueReorderRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Reorder the queue.

    Each listed job gets its index as position, all or nothing. Returns the
    whole queue in the new order.
    """
    item_ids = [item.id for item in payload.items]
    logger.info(f"Reordering print queue ({len(item_ids)} items)")

    items = print_queue_service.reorder_queue(db, item_ids)

    audit_log(
        "PRINT_QUEUE_REORDERED",
        resource_type="print_queue",
        details={"order": item_ids},
        ip_address=get_client_ip(request),
    )
    return items


@router.get("/{item_id}", response_model=PrintQueueItemResponse)
def get_print_queue_item(item_id: int, db: Session = Depends(get_db)):
    return print_queue_service.get_queue_item(db, item_id)


@router.put("/{item_id}", response_model=PrintQueueItemResponse)
def update_print_queue_item(item_id: int, payload: PrintQueueItemUpdate, db: Session = Depends(get_db)):
    return print_queue_service.update_queue_item(
        db,
        item_id,
        item_name=payload.item_name,
        printer_id=payload.printer_id,
        color=payload.color,
        status=payload.status.value,
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_print_queue_item(item_id: int, db: Session = Depends(get_db)):
    print_queue_service.delete_queue_item(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
