from datetime import datetime
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.attribute import AttributeType, AttributeValue
from app.schemas.attribute import (
    AttributeTypeCreate,
    AttributeTypeUpdate,
    AttributeValueCreate,
    AttributeValueUpdate,
)
from app.utils.rows import attribute_type_row, attribute_value_row


class AttributeService:
    """Attribute type/value vocabulary. Reads use ``db``, writes the elevated ``admin_db``."""

    def __init__(self, db: Session, admin_db: Session):
        self.db = db
        self.admin_db = admin_db

    # ---- types ----
    def list_types(self) -> List[Dict[str, Any]]:
        rows = self.db.query(AttributeType).order_by(AttributeType.name).all()
        return [attribute_type_row(t) for t in rows]

    def _find_type(self, session: Session, id: str) -> AttributeType:
        attr_type = session.query(AttributeType).filter(AttributeType.id == id).first()
        if not attr_type:
            raise HTTPException(status_code=404, detail="Attribute type not found")
        return attr_type

    def get_type(self, id: str) -> Dict[str, Any]:
        return attribute_type_row(self._find_type(self.db, id))

    def create_type(self, payload: AttributeTypeCreate) -> Dict[str, Any]:
        attr_type = AttributeType(name=payload.name, display_name=payload.displayName)
        self.admin_db.add(attr_type)
        self.admin_db.commit()
        self.admin_db.refresh(attr_type)
        return attribute_type_row(attr_type)

    def update_type(self, id: str, payload: AttributeTypeUpdate) -> Dict[str, Any]:
        attr_type = self._find_type(self.admin_db, id)
        # The machine name is immutable once created
        attr_type.display_name = payload.displayName
        attr_type.updated_at = datetime.utcnow()
        self.admin_db.commit()
        self.admin_db.refresh(attr_type)
        return attribute_type_row(attr_type)

    def delete_type(self, id: str) -> Dict[str, Any]:
        attr_type = self._find_type(self.admin_db, id)
        self.admin_db.delete(attr_type)
        self.admin_db.commit()
        return {"message": "Attribute type deleted successfully", "id": id}

    # ---- values ----
    def list_values(self, type_id: str) -> List[Dict[str, Any]]:
        rows = (
            self.db.query(AttributeValue)
            .filter(AttributeValue.attribute_type_id == type_id)
            .order_by(AttributeValue.value)
            .all()
        )
        return [attribute_value_row(v) for v in rows]

    def _find_value(self, session: Session, id: str) -> AttributeValue:
        value = session.query(AttributeValue).filter(AttributeValue.id == id).first()
        if not value:
            raise HTTPException(status_code=404, detail="Attribute value not found")
        return value

    def get_value(self, id: str) -> Dict[str, Any]:
        return attribute_value_row(self._find_value(self.db, id))

    def create_value(self, payload: AttributeValueCreate) -> Dict[str, Any]:
        value = AttributeValue(
            attribute_type_id=payload.attributeTypeId,
            value=payload.value,
            display_value=payload.displayValue,
            meta=payload.metadata or {},
        )
        self.admin_db.add(value)
        self.admin_db.commit()
        self.admin_db.refresh(value)
        return attribute_value_row(value)

    def update_value(self, id: str, payload: AttributeValueUpdate) -> Dict[str, Any]:
        value = self._find_value(self.admin_db, id)
        if payload.displayValue is not None:
            value.display_value = payload.displayValue
        if payload.metadata is not None:
            value.meta = payload.metadata
        value.updated_at = datetime.utcnow()
        self.admin_db.commit()
        self.admin_db.refresh(value)
        return attribute_value_row(value)

    def delete_value(self, id: str) -> Dict[str, Any]:
        value = self._find_value(self.admin_db, id)
        self.admin_db.delete(value)
        self.admin_db.commit()
        return {"message": "Attribute value deleted successfully", "id": id}
