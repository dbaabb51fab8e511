from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Uuid
from datetime import datetime

from app.models.base import Base
from app.models.product import _uuid


class Comment(Base):
    __tablename__ = "comments"
    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    product_id = Column(Uuid(as_uuid=False), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer)  # 1..5, optional
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
