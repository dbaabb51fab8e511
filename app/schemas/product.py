from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class VariantIn(BaseModel):
    sku: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discountPrice: Optional[float] = Field(None, ge=0)
    stockQuantity: Optional[int] = Field(None, ge=0)
    attributeValueIds: Optional[List[str]] = None


class VariantUpdate(VariantIn):
    # Present: update that variant; absent: create a new one
    id: Optional[str] = None


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(ge=0)
    discountPrice: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    stockQuantity: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    variants: List[VariantIn] = []


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discountPrice: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    stockQuantity: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    variants: Optional[List[VariantUpdate]] = None


class ProductOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    discount_price: Optional[float] = None
    images: Optional[List[str]] = None
    stock_quantity: Optional[int] = 0
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Pydantic v2 config
    model_config = ConfigDict(from_attributes=True)


class ProductPage(BaseModel):
    data: List[ProductOut]
    offset: int
    limit: int
    total: int
