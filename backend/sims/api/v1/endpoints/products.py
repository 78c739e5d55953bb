"""
Products API Endpoints

Every product returned here includes its cost, price and profit breakdown,
computed from the current pricing settings on each request.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from sims.db.session import get_db
from sims.exceptions import InvalidInputError
from sims.logging_config import audit_log, get_client_ip
from sims.models.filament import Filament
from sims.schemas.product import (
    MarginFields,
    PricingPreviewRequest,
    ProductCreate,
    ProductFilamentLinkCreate,
    ProductFilamentResponse,
    ProductFilamentUsageUpdate,
    ProductResponse,
    ProductUpdate,
)
from sims.services import product_service
from sims.services.pricing_service import (
    FilamentUsage,
    PricingSettings,
    ProductCostInput,
    calculate_product_margins,
)
from sims.services.settings_service import get_pricing_snapshot, get_settings_map

router = APIRouter()
logger = logging.getLogger(__name__)


def _pricing(db: Session) -> PricingSettings:
    return get_pricing_snapshot(db)


@router.get("", response_model=List[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    """List products by name with their filaments and margins"""
    pricing = _pricing(db)
    return [
        product_service.product_with_margins(product, pricing)
        for product in product_service.list_products(db)
    ]


@router.post("/pricing-preview", response_model=MarginFields)
def preview_pricing(payload: PricingPreviewRequest, db: Session = Depends(get_db)):
    """
    Price an unsaved product.

    Filaments referenced by id without a cost use the stored filament cost.
    `settings` overrides stored pricing settings for this calculation only.
    """
    stored = get_settings_map(db)
    unknown = sorted(set(payload.settings) - set(PricingSettings.model_fields))
    if unknown:
        raise InvalidInputError(f"Unknown pricing settings: {', '.join(unknown)}", field="settings")
    pricing = PricingSettings.from_mapping({**stored, **payload.settings})

    usages = []
    for entry in payload.filaments:
        cost = entry.cost
        if cost is None and entry.filament_id is not None:
            filament = db.query(Filament).filter(Filament.id == entry.filament_id).first()
            if filament is None:
                raise InvalidInputError(f"Filament {entry.filament_id} does not exist", field="filaments")
            cost = filament.cost
        usages.append(FilamentUsage(
            filament_id=entry.filament_id,
            filament_usage_amount=entry.filament_usage_amount,
            cost=cost,
        ))

    product = ProductCostInput(
        print_prep_time=payload.print_prep_time,
        post_processing_time=payload.post_processing_time,
        additional_parts_cost=payload.additional_parts_cost,
        list_price=payload.list_price,
        filament_used=payload.filament_used,
        filaments=usages,
    )
    return calculate_product_margins(product, pricing).model_dump()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    return product_service.product_with_margins(product, _pricing(db))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    """Create a product, with its filament usages if given"""
    # Margins are part of the response, so refuse before writing
    pricing = _pricing(db).require_achievable_margin()
    product = product_service.create_product(
        db,
        payload.model_dump(exclude={"filaments"}),
        filaments=[entry.model_dump() for entry in payload.filaments],
    )
    return product_service.product_with_margins(product, pricing)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    pricing = _pricing(db).require_achievable_margin()
    product = product_service.update_product(db, product_id, payload.model_dump())
    return product_service.product_with_margins(product, pricing)


@router.delete("/{product_id}")
def delete_product(product_id: int, request: Request, db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    audit_log(
        "PRODUCT_DELETED",
        resource_type="product",
        resource_id=product_id,
        ip_address=get_client_ip(request),
    )
    return {"message": "Product deleted successfully"}


# ============================================================================
# PRODUCT FILAMENTS
# ============================================================================

@router.get("/{product_id}/filaments", response_model=List[ProductFilamentResponse])
def list_product_filaments(product_id: int, db: Session = Depends(get_db)):
    product = product_service.get_product(db, product_id)
    return product_service.linked_filaments(product)


@router.post("/{product_id}/filaments", status_code=status.HTTP_201_CREATED)
def add_product_filament(
    product_id: int,
    payload: ProductFilamentLinkCreate,
    db: Session = Depends(get_db),
):
    product_service.add_product_filament(
        db,
        product_id,
        payload.filament_id,
        payload.filament_usage_amount,
    )
    return {"message": "Filament added to product successfully"}


@router.patch("/{product_id}/filaments/{filament_id}")
def update_product_filament(
    product_id: int,
    filament_id: int,
    payload: ProductFilamentUsageUpdate,
    db: Session = Depends(get_db),
):
    product_service.update_product_filament(db, product_id, filament_id, payload.filament_usage_amount)
    return {"message": "Filament usage amount updated successfully"}


@router.delete("/{product_id}/filaments/{filament_id}")
def remove_product_filament(product_id: int, filament_id: int, db: Session = Depends(get_db)):
    product_service.remove_product_filament(db, product_id, filament_id)
    return {"message": "Filament removed from product successfully"}
