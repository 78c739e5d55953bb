"""
API v1 Router - SIMS
"""
from fastapi import APIRouter

from sims.api.v1.endpoints import (
    filaments,
    parts,
    print_queue,
    printers,
    products,
    purchase_list,
    settings,
)

router = APIRouter()

# Filaments
router.include_router(
    filaments.router,
    prefix="/filaments",
    tags=["filaments"]
)

# Printers
router.include_router(
    printers.router,
    prefix="/printers",
    tags=["printers"]
)

# Print Queue
router.include_router(
    print_queue.router,
    prefix="/print-queue",
    tags=["print-queue"]
)

# Spare Parts
router.include_router(
    parts.router,
    prefix="/parts",
    tags=["parts"]
)

# Products (with margins)
router.include_router(
    products.router,
    prefix="/products",
    tags=["products"]
)

# Purchase List
router.include_router(
    purchase_list.router,
    prefix="/purchase-list",
    tags=["purchase-list"]
)

# Pricing Settings
router.include_router(
    settings.router,
    prefix="/settings",
    tags=["settings"]
)
