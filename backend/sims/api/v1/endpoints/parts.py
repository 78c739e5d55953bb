"""
Spare Parts API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session, selectinload

from sims.db.session import get_db
from sims.exceptions import NotFoundError
from sims.models.part import Part
from sims.models.printer import Printer
from sims.schemas.part import PartCreate, PartResponse, PartUpdate

router = APIRouter()
logger = logging.getLogger(__name__)

PART_FIELDS = (
    "name",
    "description",
    "quantity",
    "minimum_quantity",
    "supplier",
    "part_number",
    "price",
    "link",
    "notes",
)


def _get_part(db: Session, part_id: int) -> Part:
    part = (
        db.query(Part)
        .options(selectinload(Part.printers))
        .filter(Part.id == part_id)
        .first()
    )
    if not part:
        raise NotFoundError("Part", part_id)
    return part


def _resolve_printers(db: Session, printer_ids: List[int]) -> List[Printer]:
    unique_ids = list(dict.fromkeys(printer_ids))
    printers = db.query(Printer).filter(Printer.id.in_(unique_ids)).all()
    found = {printer.id for printer in printers}
    for printer_id in unique_ids:
        if printer_id not in found:
            raise NotFoundError("Printer", printer_id)
    return printers


@router.get("", response_model=List[PartResponse])
def list_parts(db: Session = Depends(get_db)):
    """List parts by name, each with the printers it fits"""
    return db.query(Part).options(selectinload(Part.printers)).order_by(Part.name, Part.id).all()


@router.get("/{part_id}", response_model=PartResponse)
def get_part(part_id: int, db: Session = Depends(get_db)):
    return _get_part(db, part_id)


@router.post("", response_model=PartResponse, status_code=status.HTTP_201_CREATED)
def create_part(payload: PartCreate, db: Session = Depends(get_db)):
    """Create a part and its printer links in one transaction"""
    try:
        part = Part(**{field: getattr(payload, field) for field in PART_FIELDS})
        part.printers = _resolve_printers(db, payload.printer_ids)
        db.add(part)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Created part {part.id}", extra={"part_id": part.id})
    return _get_part(db, part.id)


@router.put("/{part_id}", response_model=PartResponse)
def update_part(part_id: int, payload: PartUpdate, db: Session = Depends(get_db)):
    """Replace a part; printer links are replaced when printer_ids is sent"""
    part = _get_part(db, part_id)
    try:
        for field in PART_FIELDS:
            setattr(part, field, getattr(payload, field))
        if payload.printer_ids is not None:
            part.printers = _resolve_printers(db, payload.printer_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.expire_all()
    return _get_part(db, part_id)


@router.delete("/{part_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_part(part_id: int, db: Session = Depends(get_db)):
    part = _get_part(db, part_id)
    db.delete(part)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
