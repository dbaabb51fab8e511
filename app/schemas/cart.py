from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class CartItemIn(BaseModel):
    productId: str = Field(min_length=1)
    variantId: str = Field(min_length=1)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=1)


class CartItemOut(BaseModel):
    id: str
    user_id: str
    product_id: str
    variant_id: str
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
