"""
Product Service

Products and the filaments they consume. Every read is returned together with
its margin breakdown, computed against the settings snapshot passed in.
"""
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from sims.exceptions import ConflictError, InvalidInputError, NotFoundError
from sims.logging_config import get_logger
from sims.models.filament import Filament
from sims.models.product import Product, ProductFilament
from sims.services.filament_service import refresh_stock_plan
from sims.services.pricing_service import (
    PricingSettings,
    calculate_product_margins,
    cost_input_from_product,
)

logger = get_logger(__name__)

PRODUCT_FIELDS = (
    "name",
    "business",
    "filament_used",
    "print_prep_time",
    "post_processing_time",
    "additional_parts_cost",
    "list_price",
    "notes",
)


def _product_query(db: Session):
    return db.query(Product).options(
        selectinload(Product.filament_links).joinedload(ProductFilament.filament)
    )


def list_products(db: Session) -> List[Product]:
    return _product_query(db).order_by(Product.name, Product.id).all()


def get_product(db: Session, product_id: int) -> Product:
    product = _product_query(db).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def _get_filament(db: Session, filament_id: int) -> Filament:
    filament = db.query(Filament).filter(Filament.id == filament_id).first()
    if not filament:
        raise NotFoundError("Filament", filament_id)
    return filament


def _get_link(db: Session, product_id: int, filament_id: int) -> ProductFilament:
    link = (
        db.query(ProductFilament)
        .options(joinedload(ProductFilament.filament))
        .filter(
            ProductFilament.product_id == product_id,
            ProductFilament.filament_id == filament_id,
        )
        .first()
    )
    if not link:
        raise NotFoundError("Product filament", f"{product_id}/{filament_id}")
    return link


def linked_filaments(product: Product) -> List[Dict[str, Any]]:
    """Filament rows of a product with their usage, ordered by filament name."""
    rows = []
    for link in product.filament_links:
        filament = link.filament
        rows.append({
            "id": filament.id,
            "name": filament.name,
            "material": filament.material,
            "color": filament.color,
            "color2": filament.color2,
            "color3": filament.color3,
            "manufacturer": filament.manufacturer,
            "quantity": filament.quantity,
            "cost": filament.cost,
            "filament_usage_amount": link.filament_usage_amount,
        })
    return sorted(rows, key=lambda row: (row["name"].lower(), row["id"]))


def product_with_margins(product: Product, pricing: PricingSettings) -> Dict[str, Any]:
    """Stored product fields plus its filaments and the derived financial fields."""
    data = {
        "id": product.id,
        **{field: getattr(product, field) for field in PRODUCT_FIELDS},
        "created_at": product.created_at,
        "updated_at": product.updated_at,
        "filaments": linked_filaments(product),
    }
    breakdown = calculate_product_margins(cost_input_from_product(product), pricing)
    data.update(breakdown.model_dump())
    return data


def _refresh_filaments(db: Session, filament_ids: Iterable[int]) -> None:
    for filament_id in set(filament_ids):
        filament = db.query(Filament).filter(Filament.id == filament_id).first()
        if filament is not None:
            refresh_stock_plan(db, filament)


def create_product(
    db: Session,
    values: Dict[str, Any],
    filaments: Optional[List[Dict[str, Any]]] = None,
) -> Product:
    """
    Create a product, optionally with its filament usages, in one transaction.

    Args:
        values: product columns (see PRODUCT_FIELDS)
        filaments: [{"filament_id": .., "filament_usage_amount": ..}, ...]
    """
    filaments = filaments or []
    filament_ids = [entry["filament_id"] for entry in filaments]
    if len(set(filament_ids)) != len(filament_ids):
        raise InvalidInputError("A filament can only be linked once per product", field="filaments")

    try:
        product = Product(**{field: values.get(field) for field in PRODUCT_FIELDS})
        db.add(product)
        db.flush()

        for entry in filaments:
            _get_filament(db, entry["filament_id"])
            db.add(ProductFilament(
                product_id=product.id,
                filament_id=entry["filament_id"],
                filament_usage_amount=entry.get("filament_usage_amount"),
            ))

        _refresh_filaments(db, filament_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Created product {product.id}", extra={"product_id": product.id})
    return get_product(db, product.id)


def update_product(db: Session, product_id: int, values: Dict[str, Any]) -> Product:
    """Overwrite the product columns. Filament links are managed separately."""
    product = get_product(db, product_id)
    for field in PRODUCT_FIELDS:
        if field in values:
            setattr(product, field, values[field])
    db.commit()
    db.expire_all()
    return get_product(db, product_id)


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    filament_ids = [link.filament_id for link in product.filament_links]
    try:
        db.delete(product)
        db.flush()
        _refresh_filaments(db, filament_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Deleted product {product_id}", extra={"product_id": product_id})


def add_product_filament(
    db: Session,
    product_id: int,
    filament_id: int,
    filament_usage_amount: Optional[float] = None,
) -> ProductFilament:
    """
    Link a filament to a product.

    Raises:
        NotFoundError: product or filament missing
        ConflictError: already linked
    """
    get_product(db, product_id)
    _get_filament(db, filament_id)

    existing = (
        db.query(ProductFilament)
        .filter(
            ProductFilament.product_id == product_id,
            ProductFilament.filament_id == filament_id,
        )
        .first()
    )
    if existing:
        raise ConflictError(
            "Filament already associated with this product",
            {"product_id": product_id, "filament_id": filament_id},
        )

    try:
        link = ProductFilament(
            product_id=product_id,
            filament_id=filament_id,
            filament_usage_amount=filament_usage_amount,
        )
        db.add(link)
        _refresh_filaments(db, [filament_id])
        db.commit()
    except Exception:
        db.rollback()
        raise
    return _get_link(db, product_id, filament_id)


def update_product_filament(
    db: Session,
    product_id: int,
    filament_id: int,
    filament_usage_amount: float,
) -> ProductFilament:
    link = _get_link(db, product_id, filament_id)
    try:
        link.filament_usage_amount = filament_usage_amount
        _refresh_filaments(db, [filament_id])
        db.commit()
    except Exception:
        db.rollback()
        raise
    return _get_link(db, product_id, filament_id)


def remove_product_filament(db: Session, product_id: int, filament_id: int) -> None:
    link = _get_link(db, product_id, filament_id)
    try:
        db.delete(link)
        db.flush()
        _refresh_filaments(db, [filament_id])
        db.commit()
    except Exception:
        db.rollback()
        raise
