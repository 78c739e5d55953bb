"""
Product and product/filament usage models
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from sims.db.base import Base


class Product(Base):
    """Finished product - matches products table"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)
    business = Column(String(255), nullable=True)  # which storefront sells it

    # Legacy aggregate filament usage in grams, used when no filaments are linked
    filament_used = Column(Float, nullable=True, default=0)

    # Labor, in minutes
    print_prep_time = Column(Float, nullable=True, default=0)
    post_processing_time = Column(Float, nullable=True, default=0)

    # Money
    additional_parts_cost = Column(Float, nullable=True, default=0)
    list_price = Column(Float, nullable=True, default=0)  # 0 = use suggested price

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    filament_links = relationship(
        "ProductFilament",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Product {self.id}: {self.name}>"


class ProductFilament(Base):
    """Filament used by a product - matches product_filaments table"""
    __tablename__ = "product_filaments"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    filament_id = Column(Integer, ForeignKey("filaments.id", ondelete="CASCADE"), primary_key=True)

    filament_usage_amount = Column(Float, nullable=True)  # grams per unit

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    product = relationship("Product", back_populates="filament_links")
    filament = relationship("Filament", back_populates="product_links")

    def __repr__(self):
        return f"<ProductFilament product={self.product_id} filament={self.filament_id}>"
