"""
Filament model
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from sims.db.base import Base


class Filament(Base):
    """Filament spool stock - matches filaments table"""
    __tablename__ = "filaments"

    id = Column(Integer, primary_key=True, index=True)

    # Identification
    name = Column(String(255), nullable=False)
    material = Column(String(50), nullable=False)  # PLA, PETG, ABS, TPU, ...
    color = Column(String(100), nullable=False)
    color2 = Column(String(100), nullable=True)  # multi-color spools
    color3 = Column(String(100), nullable=True)
    manufacturer = Column(String(255), nullable=True)

    # Stock (whole spools)
    quantity = Column(Integer, nullable=False, default=1)
    minimum_quantity = Column(Integer, nullable=True, default=0)  # derived, see filament_service
    minimum_quantity_override = Column(Integer, nullable=True)

    # Cost per kg; overrides the global spool price when set
    cost = Column(Float, nullable=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    product_links = relationship(
        "ProductFilament",
        back_populates="filament",
        cascade="all, delete-orphan",
    )
    purchase_items = relationship(
        "PurchaseListItem",
        back_populates="filament",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Filament {self.id}: {self.name} {self.material}/{self.color}>"
