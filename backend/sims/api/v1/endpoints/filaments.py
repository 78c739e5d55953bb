"""
Filaments API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from sims.db.session import get_db
from sims.exceptions import InvalidInputError, NotFoundError
from sims.logging_config import audit_log, get_client_ip
from sims.models.filament import Filament
from sims.schemas.filament import FilamentCreate, FilamentResponse, FilamentUpdate
from sims.services.filament_service import list_manufacturers, refresh_stock_plan

router = APIRouter()
logger = logging.getLogger(__name__)

# Columns that may not be cleared by an update
REQUIRED_FIELDS = ("name", "material", "color", "quantity")


def _get_filament(db: Session, filament_id: int) -> Filament:
    filament = db.query(Filament).filter(Filament.id == filament_id).first()
    if not filament:
        raise NotFoundError("Filament", filament_id)
    return filament


@router.get("", response_model=List[FilamentResponse])
def list_filaments(db: Session = Depends(get_db)):
    """List filaments, newest first"""
    return db.query(Filament).order_by(Filament.created_at.desc(), Filament.id.desc()).all()


@router.get("/manufacturers", response_model=List[str])
def get_manufacturers(db: Session = Depends(get_db)):
    """Distinct manufacturer names, for the form autocomplete"""
    return list_manufacturers(db)


@router.get("/{filament_id}", response_model=FilamentResponse)
def get_filament(filament_id: int, db: Session = Depends(get_db)):
    return _get_filament(db, filament_id)


@router.post("", response_model=FilamentResponse, status_code=status.HTTP_201_CREATED)
def create_filament(payload: FilamentCreate, db: Session = Depends(get_db)):
    try:
        filament = Filament(**payload.model_dump())
        db.add(filament)
        refresh_stock_plan(db, filament)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(filament)
    logger.info(f"Created filament {filament.id}", extra={"filament_id": filament.id})
    return filament


@router.put("/{filament_id}", response_model=FilamentResponse)
def update_filament(filament_id: int, payload: FilamentUpdate, db: Session = Depends(get_db)):
    """Update a filament; only the fields sent are changed"""
    filament = _get_filament(db, filament_id)

    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise InvalidInputError("No valid fields to update")
    for field in REQUIRED_FIELDS:
        if field in updates and updates[field] is None:
            raise InvalidInputError(f"{field} cannot be empty", field=field)

    try:
        for field, value in updates.items():
            setattr(filament, field, value)
        refresh_stock_plan(db, filament)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(filament)
    return filament


@router.delete("/{filament_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_filament(filament_id: int, request: Request, db: Session = Depends(get_db)):
    """Delete a filament with its product links and purchase list entries"""
    filament = _get_filament(db, filament_id)
    name = filament.name
    db.delete(filament)
    db.commit()

    audit_log(
        "FILAMENT_DELETED",
        resource_type="filament",
        resource_id=filament_id,
        details={"name": name},
        ip_address=get_client_ip(request),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
