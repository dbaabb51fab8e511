from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)


class CommentUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)


class CommentOut(BaseModel):
    id: str
    product_id: str
    user_id: str
    content: str
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CommentPage(BaseModel):
    data: List[CommentOut]
    offset: int
    limit: int
    total: int
