"""
Pricing settings key/value model
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from sims.db.base import Base


class Setting(Base):
    """One pricing parameter - matches settings table

    Values are stored as text; sims.services.settings_service converts them.
    """
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"
