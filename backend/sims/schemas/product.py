"""
Product Pydantic Schemas

Product responses always carry the derived financial fields computed by
sims.services.pricing_service; they are never stored.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    """Stored product fields"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    business: Optional[str] = Field(None, max_length=255)
    filament_used: Optional[float] = Field(0, ge=0, description="Grams, used when no filaments are linked")
    print_prep_time: Optional[float] = Field(0, ge=0, description="Minutes")
    post_processing_time: Optional[float] = Field(0, ge=0, description="Minutes")
    additional_parts_cost: Optional[float] = Field(0, ge=0)
    list_price: Optional[float] = Field(0, ge=0, description="0 = sell at the suggested price")
    notes: Optional[str] = None


class ProductFilamentInput(BaseModel):
    """Filament usage sent with a new product"""
    filament_id: int
    filament_usage_amount: Optional[float] = Field(None, ge=0, description="Grams")


class ProductCreate(ProductBase):
    """Create a product, optionally with its filament usages"""
    filaments: List[ProductFilamentInput] = Field(default_factory=list)


class ProductUpdate(ProductBase):
    """Replace the stored product fields"""
    pass


class ProductFilamentLinkCreate(BaseModel):
    """Link a filament to a product"""
    filament_id: int
    filament_usage_amount: Optional[float] = Field(None, ge=0)


class ProductFilamentUsageUpdate(BaseModel):
    """Change how many grams of a linked filament a product uses"""
    filament_usage_amount: float = Field(..., ge=0)


class ProductFilamentResponse(BaseModel):
    """Linked filament with its usage"""
    id: int
    name: str
    material: str
    color: str
    color2: Optional[str] = None
    color3: Optional[str] = None
    manufacturer: Optional[str] = None
    quantity: int
    cost: Optional[float] = None
    filament_usage_amount: Optional[float] = None


class MarginFields(BaseModel):
    """Derived financial fields"""
    filament_used: float
    labor_cost: float
    filament_cost: float
    wear_tear_cost: float
    total_cost: float
    selling_price: float
    platform_fee_amount: float
    gross_profit: float
    profit_margin: float
    suggested_price: float


class ProductResponse(MarginFields):
    id: int
    name: str
    business: Optional[str] = None
    print_prep_time: Optional[float] = None
    post_processing_time: Optional[float] = None
    additional_parts_cost: Optional[float] = None
    list_price: Optional[float] = None
    notes: Optional[str] = None
    filaments: List[ProductFilamentResponse] = []
    created_at: datetime
    updated_at: datetime


class PreviewFilament(BaseModel):
    """Filament usage in a pricing preview; cost is looked up when omitted"""
    filament_id: Optional[int] = None
    filament_usage_amount: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)


class PricingPreviewRequest(BaseModel):
    """Unsaved product to price, with optional what-if setting overrides"""
    print_prep_time: Optional[float] = Field(0, ge=0)
    post_processing_time: Optional[float] = Field(0, ge=0)
    additional_parts_cost: Optional[float] = Field(0, ge=0)
    list_price: Optional[float] = Field(0, ge=0)
    filament_used: Optional[float] = Field(0, ge=0)
    filaments: List[PreviewFilament] = Field(default_factory=list)
    settings: Dict[str, float] = Field(
        default_factory=dict,
        description="Pricing settings to use instead of the stored ones",
    )

    model_config = ConfigDict(extra="ignore")
