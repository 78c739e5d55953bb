"""
Purchase List API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session, joinedload

from sims.db.session import get_db
from sims.exceptions import InvalidInputError, NotFoundError
from sims.models.filament import Filament
from sims.models.purchase_list import PurchaseListItem
from sims.schemas.purchase_list import (
    PurchaseListItemCreate,
    PurchaseListItemResponse,
    PurchaseListItemUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_response(item: PurchaseListItem) -> PurchaseListItemResponse:
    filament = item.filament
    return PurchaseListItemResponse(
        id=item.id,
        filament_id=item.filament_id,
        quantity=item.quantity,
        purchased=item.purchased,
        notes=item.notes,
        created_at=item.created_at,
        updated_at=item.updated_at,
        name=filament.name,
        material=filament.material,
        color=filament.color,
        manufacturer=filament.manufacturer,
    )


def _get_item(db: Session, item_id: int) -> PurchaseListItem:
    item = (
        db.query(PurchaseListItem)
        .options(joinedload(PurchaseListItem.filament))
        .filter(PurchaseListItem.id == item_id)
        .first()
    )
    if not item:
        raise NotFoundError("Purchase list item", item_id)
    return item


def _require_filament(db: Session, filament_id: int) -> None:
    if not db.query(Filament.id).filter(Filament.id == filament_id).first():
        raise NotFoundError("Filament", filament_id)


@router.get("", response_model=List[PurchaseListItemResponse])
def list_purchase_items(db: Session = Depends(get_db)):
    """Purchase list, newest first, with filament details"""
    items = (
        db.query(PurchaseListItem)
        .options(joinedload(PurchaseListItem.filament))
        .order_by(PurchaseListItem.created_at.desc(), PurchaseListItem.id.desc())
        .all()
    )
    return [_to_response(item) for item in items]


@router.post("", response_model=PurchaseListItemResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_item(payload: PurchaseListItemCreate, db: Session = Depends(get_db)):
    _require_filament(db, payload.filament_id)
    item = PurchaseListItem(
        filament_id=payload.filament_id,
        quantity=payload.quantity,
        notes=payload.notes,
    )
    db.add(item)
    db.commit()
    return _to_response(_get_item(db, item.id))


@router.put("/{item_id}", response_model=PurchaseListItemResponse)
def update_purchase_item(item_id: int, payload: PurchaseListItemUpdate, db: Session = Depends(get_db)):
    """Update a purchase list entry; only the fields sent are changed"""
    item = _get_item(db, item_id)

    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise InvalidInputError("No valid fields to update")
    for field in ("filament_id", "quantity", "purchased"):
        if field in updates and updates[field] is None:
            raise InvalidInputError(f"{field} cannot be empty", field=field)
    if "filament_id" in updates:
        _require_filament(db, updates["filament_id"])

    for field, value in updates.items():
        setattr(item, field, value)
    db.commit()
    db.expire_all()
    return _to_response(_get_item(db, item_id))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_item(item_id: int, db: Session = Depends(get_db)):
    item = _get_item(db, item_id)
    db.delete(item)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
