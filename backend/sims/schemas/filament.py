"""
Filament Pydantic Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FilamentBase(BaseModel):
    """Base filament fields"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    material: str = Field(..., min_length=1, max_length=50, description="PLA, PETG, ABS, ...")
    color: str = Field(..., min_length=1, max_length=100)
    color2: Optional[str] = Field(None, max_length=100)
    color3: Optional[str] = Field(None, max_length=100)
    quantity: int = Field(1, ge=0, description="Spools on hand")
    minimum_quantity_override: Optional[int] = Field(None, ge=0, description="Fixed minimum stock, in spools")
    manufacturer: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0, description="Cost per kg; falls back to the spool price")


class FilamentCreate(FilamentBase):
    """Create a filament"""
    pass


class FilamentUpdate(BaseModel):
    """Update a filament; omitted fields are left unchanged"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    material: Optional[str] = Field(None, min_length=1, max_length=50)
    color: Optional[str] = Field(None, min_length=1, max_length=100)
    color2: Optional[str] = Field(None, max_length=100)
    color3: Optional[str] = Field(None, max_length=100)
    quantity: Optional[int] = Field(None, ge=0)
    minimum_quantity_override: Optional[int] = Field(None, ge=0)
    manufacturer: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)


class FilamentResponse(FilamentBase):
    id: int
    minimum_quantity: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
