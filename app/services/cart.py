from datetime import datetime
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from app.models.cart import CartItem
from app.models.product import Product, ProductVariant, VariantAttribute
from app.utils.rows import cart_item_row

NOT_ENOUGH_STOCK = "Not enough stock available"


class CartService:
    """Per-user cart line items, checked against variant stock.

    The stock check and the write are separate statements; concurrent adds
    can overshoot stock.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_items(self, user_id: str) -> List[Dict[str, Any]]:
        items = (
            self.db.query(CartItem)
            .options(
                selectinload(CartItem.products),
                selectinload(CartItem.variants)
                .selectinload(ProductVariant.variant_attributes)
                .selectinload(VariantAttribute.attribute_values),
            )
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
            .all()
        )
        return [cart_item_row(i, nested=True) for i in items]

    def add_item(self, user_id: str, product_id: str, variant_id: str, quantity: int = 1) -> Dict[str, Any]:
        product = self.db.query(Product.id).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        variant = (
            self.db.query(ProductVariant)
            .filter(ProductVariant.id == variant_id, ProductVariant.product_id == product_id)
            .first()
        )
        if not variant:
            raise HTTPException(status_code=404, detail="Product variant not found")

        available = int(variant.stock_quantity or 0)
        if quantity > available:
            raise HTTPException(status_code=400, detail=NOT_ENOUGH_STOCK)

        existing = (
            self.db.query(CartItem)
            .filter(
                CartItem.user_id == user_id,
                CartItem.product_id == product_id,
                CartItem.variant_id == variant_id,
            )
            .first()
        )

        if existing:
            # Merge into the existing line instead of adding a duplicate row
            new_qty = existing.quantity + quantity
            if new_qty > available:
                raise HTTPException(status_code=400, detail=NOT_ENOUGH_STOCK)
            existing.quantity = new_qty
            existing.updated_at = datetime.utcnow()
            item = existing
        else:
            item = CartItem(user_id=user_id, product_id=product_id, variant_id=variant_id, quantity=quantity)
            self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return cart_item_row(item)

    def _owned_item(self, user_id: str, item_id: str) -> CartItem:
        item = self.db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()
        if not item:
            raise HTTPException(status_code=404, detail="Cart item not found")
        return item

    def update_item(self, user_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        item = self._owned_item(user_id, item_id)
        variant = self.db.query(ProductVariant).filter(ProductVariant.id == item.variant_id).first()
        if not variant:
            raise HTTPException(status_code=404, detail="Product variant not found")
        if quantity > int(variant.stock_quantity or 0):
            raise HTTPException(status_code=400, detail=NOT_ENOUGH_STOCK)

        item.quantity = quantity
        item.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(item)
        return cart_item_row(item)

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        item = self._owned_item(user_id, item_id)
        self.db.delete(item)
        self.db.commit()
        return {"message": "Item removed from cart", "id": item_id}

    def clear(self, user_id: str) -> Dict[str, Any]:
        self.db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
        self.db.commit()
        return {"message": "Cart cleared successfully"}
