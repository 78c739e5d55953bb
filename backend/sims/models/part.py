"""
Spare part model
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from sims.db.base import Base

# Which printers a spare part fits
part_printers = Table(
    "part_printers",
    Base.metadata,
    Column("part_id", Integer, ForeignKey("parts.id", ondelete="CASCADE"), primary_key=True),
    Column("printer_id", Integer, ForeignKey("printers.id", ondelete="CASCADE"), primary_key=True),
)


class Part(Base):
    """Spare part - matches parts table"""
    __tablename__ = "parts"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Stock
    quantity = Column(Integer, nullable=False, default=0)
    minimum_quantity = Column(Integer, nullable=True)

    # Sourcing
    supplier = Column(String(255), nullable=True)
    part_number = Column(String(100), nullable=True)
    price = Column(Float, nullable=True)
    link = Column(String(1000), nullable=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    printers = relationship(
        "Printer",
        secondary=part_printers,
        back_populates="parts",
        order_by="Printer.name",
    )

    def __repr__(self):
        return f"<Part {self.id}: {self.name}>"
