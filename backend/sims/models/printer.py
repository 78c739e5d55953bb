"""
Printer model
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from sims.db.base import Base
from sims.models.part import part_printers


class Printer(Base):
    """Printer model - matches printers table"""
    __tablename__ = "printers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    queue_items = relationship("PrintQueueItem", back_populates="printer")
    parts = relationship("Part", secondary=part_printers, back_populates="printers")

    def __repr__(self):
        return f"<Printer {self.id}: {self.name}>"
