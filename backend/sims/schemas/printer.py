"""
Printer Pydantic Schemas
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PrinterBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, description="Printer name")


class PrinterCreate(PrinterBase):
    """Create a printer"""
    pass


class PrinterUpdate(PrinterBase):
    """Rename a printer"""
    pass


class PrinterRef(BaseModel):
    """Printer as embedded in queue items and parts"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class PrinterResponse(PrinterRef):
    created_at: datetime
    updated_at: datetime
