"""
Filament purchase list model
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from sims.db.base import Base


class PurchaseListItem(Base):
    """Filament to reorder - matches purchase_list table"""
    __tablename__ = "purchase_list"

    id = Column(Integer, primary_key=True, index=True)

    filament_id = Column(Integer, ForeignKey("filaments.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)  # spools
    purchased = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    filament = relationship("Filament", back_populates="purchase_items")

    def __repr__(self):
        return f"<PurchaseListItem {self.id}: filament={self.filament_id} x{self.quantity}>"
