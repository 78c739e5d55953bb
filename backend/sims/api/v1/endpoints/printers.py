"""
Printers API Endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from sims.db.session import get_db
from sims.exceptions import NotFoundError
from sims.models.printer import Printer
from sims.schemas.printer import PrinterCreate, PrinterResponse, PrinterUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_printer(db: Session, printer_id: int) -> Printer:
    printer = db.query(Printer).filter(Printer.id == printer_id).first()
    if not printer:
        raise NotFoundError("Printer", printer_id)
    return printer


@router.get("", response_model=List[PrinterResponse])
def list_printers(db: Session = Depends(get_db)):
    """List printers by name"""
    return db.query(Printer).order_by(Printer.name, Printer.id).all()


@router.post("", response_model=PrinterResponse, status_code=status.HTTP_201_CREATED)
def create_printer(payload: PrinterCreate, db: Session = Depends(get_db)):
    printer = Printer(name=payload.name)
    db.add(printer)
    db.commit()
    db.refresh(printer)
    logger.info(f"Created printer {printer.id}", extra={"printer_id": printer.id})
    return printer


@router.put("/{printer_id}", response_model=PrinterResponse)
def update_printer(printer_id: int, payload: PrinterUpdate, db: Session = Depends(get_db)):
    printer = _get_printer(db, printer_id)
    printer.name = payload.name
    db.commit()
    db.refresh(printer)
    return printer


@router.delete("/{printer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_printer(printer_id: int, db: Session = Depends(get_db)):
    """
    Delete a printer.

    Queued jobs assigned to it become unassigned; part links are removed.
    """
    printer = _get_printer(db, printer_id)
    db.delete(printer)
    db.commit()
    logger.info(f"Deleted printer {printer_id}", extra={"printer_id": printer_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
