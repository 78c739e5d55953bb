"""
SIMS database models

Importing this package registers every table on Base.metadata.
"""
from sims.models.part import Part, part_printers
from sims.models.printer import Printer
from sims.models.filament import Filament
from sims.models.product import Product, ProductFilament
from sims.models.print_queue import PrintQueueItem
from sims.models.purchase_list import PurchaseListItem
from sims.models.setting import Setting

__all__ = [
    "Filament",
    "Part",
    "Printer",
    "PrintQueueItem",
    "Product",
    "ProductFilament",
    "PurchaseListItem",
    "Setting",
    "part_printers",
]
