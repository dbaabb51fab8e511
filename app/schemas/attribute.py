from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional
from datetime import datetime


class AttributeTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    displayName: str = Field(min_length=1)


class AttributeTypeUpdate(BaseModel):
    displayName: str = Field(min_length=1)


class AttributeTypeOut(BaseModel):
    id: str
    name: str
    display_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttributeValueCreate(BaseModel):
    attributeTypeId: str = Field(min_length=1)
    value: str = Field(min_length=1)
    displayValue: str = Field(min_length=1)
    metadata: Optional[Dict[str, str]] = None


class AttributeValueUpdate(BaseModel):
    displayValue: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class AttributeValueOut(BaseModel):
    id: str
    attribute_type_id: str
    value: str
    display_value: str
    metadata: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
