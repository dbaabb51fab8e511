from sqlalchemy import Column, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime

from app.models.base import Base
from app.models.product import _uuid


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    # Identity lives in the auth provider; user ids are its subject claims
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=False), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    variant_id = Column(Uuid(as_uuid=False), ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship("Product")
    variants = relationship("ProductVariant")
