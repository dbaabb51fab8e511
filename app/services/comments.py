from datetime import datetime
from typing import Any, Dict

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.comment import Comment
from app.models.product import Product
from app.schemas.comment import CommentCreate, CommentUpdate
from app.utils.rows import comment_row


class CommentService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_product(self, product_id: str, offset: int = 0, limit: int = 10) -> Dict[str, Any]:
        query = self.db.query(Comment).filter(Comment.product_id == product_id)
        total = query.count()
        rows = query.order_by(Comment.created_at.desc()).offset(offset).limit(limit).all()
        return {
            "data": [comment_row(c) for c in rows],
            "offset": offset,
            "limit": limit,
            "total": total,
        }

    def create(self, product_id: str, user_id: str, payload: CommentCreate) -> Dict[str, Any]:
        if not self.db.query(Product.id).filter(Product.id == product_id).first():
            raise HTTPException(status_code=404, detail="Product not found")
        comment = Comment(
            product_id=product_id,
            user_id=user_id,
            content=payload.content,
            rating=payload.rating,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment_row(comment)

    def owned(self, comment_id: str, user_id: str, action: str) -> Comment:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        if comment.user_id != user_id:
            raise HTTPException(status_code=403, detail=f"You can only {action} your own comments")
        return comment

    def update(self, comment_id: str, user_id: str, payload: CommentUpdate) -> Dict[str, Any]:
        comment = self.owned(comment_id, user_id, "update")
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(comment, key, value)
        comment.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(comment)
        return comment_row(comment)

    def delete(self, comment_id: str, user_id: str) -> Dict[str, Any]:
        comment = self.owned(comment_id, user_id, "delete")
        self.db.delete(comment)
        self.db.commit()
        return {"message": "Comment deleted successfully", "id": comment_id}
