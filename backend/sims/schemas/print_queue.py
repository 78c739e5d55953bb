"""
Print Queue Pydantic Schemas
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sims.schemas.printer import PrinterRef


class PrintQueueStatus(str, Enum):
    """Lifecycle of a queued print job"""
    PENDING = "pending"
    PRINTING = "printing"
    COMPLETED = "completed"
    CANCELED = "canceled"


class PrintQueueItemBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    item_name: str = Field(..., min_length=1, max_length=255, description="What to print")
    printer_id: Optional[int] = Field(None, description="Printer assigned to the job")
    color: Optional[str] = Field(None, max_length=100)
    status: PrintQueueStatus = Field(PrintQueueStatus.PENDING)


class PrintQueueItemCreate(PrintQueueItemBase):
    """Append a job to the queue"""
    pass


class PrintQueueItemUpdate(PrintQueueItemBase):
    """Replace a job's details (position is changed through reorder)"""
    pass


class PrintQueueItemResponse(BaseModel):
    id: int
    item_name: str
    printer_id: Optional[int] = None
    color: Optional[str] = None
    status: PrintQueueStatus
    position: int
    printer: Optional[PrinterRef] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReorderItem(BaseModel):
    """One entry of a reorder request; only the id is read"""
    model_config = ConfigDict(extra="ignore")

    id: int


class PrintQueueReorderRequest(BaseModel):
    """New queue order, first item first"""
    items: List[ReorderItem]
