from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime

from app.models.base import Base, JSONType
from app.models.product import _uuid


class AttributeType(Base):
    __tablename__ = "attribute_types"
    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    name = Column(String(100), nullable=False, unique=True)  # machine key, e.g. "color"
    display_name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    attribute_values = relationship(
        "AttributeValue",
        back_populates="attribute_types",
        cascade="all, delete-orphan",
    )


class AttributeValue(Base):
    __tablename__ = "attribute_values"
    id = Column(Uuid(as_uuid=False), primary_key=True, default=_uuid)
    attribute_type_id = Column(
        Uuid(as_uuid=False), ForeignKey("attribute_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value = Column(String(100), nullable=False)
    display_value = Column(String(255), nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSONType, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    attribute_types = relationship("AttributeType", back_populates="attribute_values")
