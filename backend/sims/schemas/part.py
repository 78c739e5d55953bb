"""
Spare Part Pydantic Schemas
"""
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sims.schemas.printer import PrinterRef


def clean_link(value: Optional[str]) -> Optional[str]:
    """Keep only http(s) links; anything else is stored as an empty string."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return ""
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ""
    return value


class PartBase(BaseModel):
    """Base part fields"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    quantity: int = Field(0, ge=0)
    minimum_quantity: Optional[int] = Field(None, ge=0)
    supplier: Optional[str] = Field(None, max_length=255)
    part_number: Optional[str] = Field(None, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    link: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = None

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: Optional[str]) -> Optional[str]:
        return clean_link(v)


class PartCreate(PartBase):
    """Create a part, optionally linked to printers"""
    printer_ids: List[int] = Field(default_factory=list)


class PartUpdate(PartBase):
    """Replace a part; printer links are replaced only when printer_ids is sent"""
    printer_ids: Optional[List[int]] = None


class PartResponse(PartBase):
    id: int
    printers: List[PrinterRef] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
