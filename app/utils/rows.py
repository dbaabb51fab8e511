"""Plain-dict renderings of store rows.

Rows are returned in the same nested shape the managed store produces for
relation selects (``product_variants -> variant_attributes -> attribute_values
-> attribute_types``), so the variant builder can work on plain documents.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from app.models.attribute import AttributeType, AttributeValue
from app.models.cart import CartItem
from app.models.comment import Comment
from app.models.product import Product, ProductVariant, VariantAttribute


def _num(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return float(value)
    return value


def product_row(p: Product) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "price": _num(p.price),
        "discount_price": _num(p.discount_price),
        "images": p.images or [],
        "stock_quantity": p.stock_quantity,
        "category": p.category,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }


def attribute_type_row(t: AttributeType) -> Dict[str, Any]:
    return {
        "id": t.id,
        "name": t.name,
        "display_name": t.display_name,
        "created_at": t.created_at,
        "updated_at": t.updated_at,
    }


def attribute_value_row(v: AttributeValue, with_type: bool = False) -> Dict[str, Any]:
    row = {
        "id": v.id,
        "attribute_type_id": v.attribute_type_id,
        "value": v.value,
        "display_value": v.display_value,
        "metadata": v.meta if v.meta is not None else {},
        "created_at": v.created_at,
        "updated_at": v.updated_at,
    }
    if with_type:
        t = v.attribute_types
        row["attribute_types"] = (
            {"id": t.id, "name": t.name, "display_name": t.display_name} if t is not None else None
        )
    return row


def variant_attribute_row(link: VariantAttribute, with_type: bool = True) -> Dict[str, Any]:
    value = link.attribute_values
    return {
        "attribute_value_id": link.attribute_value_id,
        "attribute_values": attribute_value_row(value, with_type=with_type) if value is not None else None,
    }


def variant_row(v: ProductVariant, with_attributes: bool = True, with_type: bool = True) -> Dict[str, Any]:
    row = {
        "id": v.id,
        "product_id": v.product_id,
        "sku": v.sku,
        "price": _num(v.price),
        "discount_price": _num(v.discount_price),
        "stock_quantity": v.stock_quantity,
        "is_default": bool(v.is_default),
        "created_at": v.created_at,
        "updated_at": v.updated_at,
    }
    if with_attributes:
        row["variant_attributes"] = [variant_attribute_row(a, with_type=with_type) for a in v.variant_attributes]
    return row


def cart_item_row(item: CartItem, nested: bool = False) -> Dict[str, Any]:
    row = {
        "id": item.id,
        "user_id": item.user_id,
        "product_id": item.product_id,
        "variant_id": item.variant_id,
        "quantity": item.quantity,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }
    if nested:
        row["products"] = product_row(item.products) if item.products is not None else None
        row["variants"] = variant_row(item.variants, with_type=False) if item.variants is not None else None
    return row


def comment_row(c: Comment) -> Dict[str, Any]:
    return {
        "id": c.id,
        "product_id": c.product_id,
        "user_id": c.user_id,
        "content": c.content,
        "rating": c.rating,
        "created_at": c.created_at,
        "updated_at": c.updated_at,
    }
