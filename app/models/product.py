from sqlalchemy import Column, String, Integer, Numeric, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.models.base import Base, JSONType


def _uuid() -> str:
    return str(uuid.uuid4())


class Product(Base):
    __tablename__ = "products"
    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(String(2000))
    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2))
    images = Column(JSONType, default=list)  # Ordered list of image URLs
    stock_quantity = Column(Integer, default=0)
    category = Column(String(100), index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product_variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by=lambda: [ProductVariant.created_at, ProductVariant.id],
    )


class ProductVariant(Base):
    __tablename__ = "product_variants"
    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    product_id = Column(Uuid(as_uuid=False), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    sku = Column(String(100))
    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2))
    stock_quantity = Column(Integer, default=0)
    # One default variant per product; kept by creation logic, not by the schema
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship("Product", back_populates="product_variants")
    variant_attributes = relationship(
        "VariantAttribute",
        back_populates="variant",
        cascade="all, delete-orphan",
    )


class VariantAttribute(Base):
    __tablename__ = "variant_attributes"
    variant_id = Column(Uuid(as_uuid=False), ForeignKey("product_variants.id", ondelete="CASCADE"), primary_key=True)
    attribute_value_id = Column(Uuid(as_uuid=False), ForeignKey("attribute_values.id", ondelete="CASCADE"), primary_key=True)

    variant = relationship("ProductVariant", back_populates="variant_attributes")
    attribute_values = relationship("AttributeValue")
