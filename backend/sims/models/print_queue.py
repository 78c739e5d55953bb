"""
Print queue model
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from sims.db.base import Base


class PrintQueueItem(Base):
    """Queued print job - matches print_queue table"""
    __tablename__ = "print_queue"

    id = Column(Integer, primary_key=True, index=True)

    item_name = Column(String(255), nullable=False)
    printer_id = Column(Integer, ForeignKey("printers.id", ondelete="SET NULL"), nullable=True)
    color = Column(String(100), nullable=True)

    status = Column(String(20), nullable=False, default="pending")
    # pending, printing, completed, canceled

    # Zero-based order of the queue
    position = Column(Integer, nullable=False, default=0, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    printer = relationship("Printer", back_populates="queue_items")

    def __repr__(self):
        return f"<PrintQueueItem {self.id} @{self.position}: {self.item_name} ({self.status})>"
