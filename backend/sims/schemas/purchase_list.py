"""
Purchase List Pydantic Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PurchaseListItemCreate(BaseModel):
    """Add a filament to the purchase list"""
    filament_id: int
    quantity: int = Field(..., ge=1, description="Spools to buy")
    notes: Optional[str] = None


class PurchaseListItemUpdate(BaseModel):
    """Update a purchase list entry; omitted fields are left unchanged"""
    filament_id: Optional[int] = None
    quantity: Optional[int] = Field(None, ge=1)
    purchased: Optional[bool] = None
    notes: Optional[str] = None


class PurchaseListItemResponse(BaseModel):
    id: int
    filament_id: int
    quantity: int
    purchased: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    # Joined from the filament
    name: str
    material: str
    color: str
    manufacturer: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
