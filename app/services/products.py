"""Product catalog operations.

Writes are a sequence of independently committed steps (product, then
variants, then variant attribute links). A failure after the product row is
committed is logged and the partially written product is kept.
"""
from datetime import datetime
from typing import Any, Dict, List
import logging
import re
import time

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.attribute import AttributeValue
from app.models.comment import Comment
from app.models.product import Product, ProductVariant, VariantAttribute
from app.schemas.product import ProductCreate, ProductUpdate, VariantIn, VariantUpdate
from app.services.variants import assemble_product
from app.utils.rows import comment_row, product_row, variant_row

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = {
    "name": "name",
    "description": "description",
    "price": "price",
    "discountPrice": "discount_price",
    "images": "images",
    "stockQuantity": "stock_quantity",
    "category": "category",
}
# Product fields mirrored onto the default variant
VARIANT_COLUMNS = {
    "price": "price",
    "discountPrice": "discount_price",
    "stockQuantity": "stock_quantity",
}


def sku_prefix(name: str) -> str:
    return re.sub(r"\s+", "-", name[:10].upper())


def _pick(value, fallback):
    return value if value is not None else fallback


class ProductService:
    def __init__(self, db: Session, admin_db: Session):
        self.db = db
        self.admin_db = admin_db

    def list_products(self, offset: int = 0, limit: int = 10) -> Dict[str, Any]:
        query = self.db.query(Product)
        total = query.count()
        rows = query.order_by(Product.created_at.desc(), Product.id).offset(offset).limit(limit).all()
        return {
            "data": [product_row(p) for p in rows],
            "offset": offset,
            "limit": limit,
            "total": total,
        }

    def get_product(self, id: str) -> Dict[str, Any]:
        product = (
            self.db.query(Product)
            .options(
                selectinload(Product.product_variants)
                .selectinload(ProductVariant.variant_attributes)
                .selectinload(VariantAttribute.attribute_values)
                .selectinload(AttributeValue.attribute_types)
            )
            .filter(Product.id == id)
            .first()
        )
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        comments = (
            self.db.query(Comment)
            .filter(Comment.product_id == id)
            .order_by(Comment.created_at.desc())
            .all()
        )
        variants = [variant_row(v) for v in product.product_variants]
        return assemble_product(product_row(product), variants, [comment_row(c) for c in comments])

    def _exists(self, id: str) -> None:
        if not self.db.query(Product.id).filter(Product.id == id).first():
            raise HTTPException(status_code=404, detail="Product not found!!")

    def _link_attributes(self, variant_id: str, attribute_value_ids: List[str]) -> None:
        for value_id in attribute_value_ids:
            self.admin_db.add(VariantAttribute(variant_id=variant_id, attribute_value_id=value_id))
        self.admin_db.commit()

    def create_product(self, payload: ProductCreate) -> Dict[str, Any]:
        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            discount_price=payload.discountPrice,
            images=payload.images or [],
            stock_quantity=payload.stockQuantity or 0,
            category=payload.category,
        )
        self.admin_db.add(product)
        self.admin_db.commit()
        self.admin_db.refresh(product)
        product_id = product.id
        prefix = sku_prefix(product.name)

        if not payload.variants:
            try:
                self.admin_db.add(
                    ProductVariant(
                        product_id=product_id,
                        sku=f"{prefix}-DEFAULT",
                        price=payload.price,
                        discount_price=payload.discountPrice,
                        stock_quantity=payload.stockQuantity or 0,
                        is_default=True,
                    )
                )
                self.admin_db.commit()
            except SQLAlchemyError as e:
                self.admin_db.rollback()
                logger.error("Failed to create default variant for product %s: %s", product_id, e)
        else:
            self._create_variants(product_id, prefix, payload)

        return self.get_product(product_id)

    def _create_variants(self, product_id: str, prefix: str, payload: ProductCreate) -> None:
        created: List[ProductVariant] = []
        try:
            for index, v in enumerate(payload.variants):
                variant = ProductVariant(
                    product_id=product_id,
                    sku=v.sku or f"{prefix}-{index + 1}",
                    price=_pick(v.price, payload.price),
                    discount_price=_pick(v.discountPrice, payload.discountPrice),
                    stock_quantity=_pick(v.stockQuantity, payload.stockQuantity or 0),
                    is_default=index == 0,
                )
                self.admin_db.add(variant)
                created.append(variant)
            self.admin_db.commit()
        except SQLAlchemyError as e:
            self.admin_db.rollback()
            logger.error("Failed to create variants for product %s: %s", product_id, e)
            return

        for variant, v in zip(created, payload.variants):
            if not v.attributeValueIds:
                continue
            try:
                self._link_attributes(variant.id, v.attributeValueIds)
            except SQLAlchemyError as e:
                self.admin_db.rollback()
                logger.error("Failed to create attributes for variant %s: %s", variant.id, e)

    def update_product(self, id: str, payload: ProductUpdate) -> Dict[str, Any]:
        self._exists(id)
        product = self.admin_db.query(Product).filter(Product.id == id).first()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found!!")

        fields = payload.model_dump(exclude_unset=True, exclude={"variants"})
        for key, value in fields.items():
            setattr(product, PRODUCT_COLUMNS[key], value)
        product.updated_at = datetime.utcnow()
        self.admin_db.commit()
        self.admin_db.refresh(product)

        if payload.variants:
            for v in payload.variants:
                try:
                    if v.id:
                        self._update_variant(id, v)
                    else:
                        self._add_variant(product, v)
                except SQLAlchemyError as e:
                    self.admin_db.rollback()
                    logger.error("Failed to write variant %s of product %s: %s", v.id or "(new)", id, e)
        elif fields.keys() & VARIANT_COLUMNS.keys():
            self._sync_default_variant(id, fields)

        return self.get_product(id)

    def _update_variant(self, product_id: str, v: VariantUpdate) -> None:
        variant = (
            self.admin_db.query(ProductVariant)
            .filter(ProductVariant.id == v.id, ProductVariant.product_id == product_id)
            .first()
        )
        if not variant:
            return
        columns = dict(VARIANT_COLUMNS, sku="sku")
        for key, value in v.model_dump(exclude_unset=True, include=set(columns)).items():
            setattr(variant, columns[key], value)
        variant.updated_at = datetime.utcnow()
        self.admin_db.commit()

        if v.attributeValueIds:
            # Replace the variant's whole attribute set
            links = self.admin_db.query(VariantAttribute).filter(VariantAttribute.variant_id == v.id).all()
            for link in links:
                self.admin_db.delete(link)
            self.admin_db.commit()
            self._link_attributes(v.id, v.attributeValueIds)

    def _add_variant(self, product: Product, v: VariantIn) -> ProductVariant:
        variant = ProductVariant(
            product_id=product.id,
            sku=v.sku or f"{sku_prefix(product.name)}-{int(time.time() * 1000)}",
            price=_pick(v.price, product.price),
            discount_price=_pick(v.discountPrice, product.discount_price),
            stock_quantity=_pick(v.stockQuantity, product.stock_quantity or 0),
            is_default=False,
        )
        self.admin_db.add(variant)
        self.admin_db.commit()
        self.admin_db.refresh(variant)
        if v.attributeValueIds:
            self._link_attributes(variant.id, v.attributeValueIds)
        return variant

    def _sync_default_variant(self, product_id: str, fields: Dict[str, Any]) -> None:
        values: Dict[str, Any] = {"updated_at": datetime.utcnow()}
        for key in fields.keys() & VARIANT_COLUMNS.keys():
            values[VARIANT_COLUMNS[key]] = fields[key]
        self.admin_db.query(ProductVariant).filter(
            ProductVariant.product_id == product_id,
            ProductVariant.is_default.is_(True),
        ).update(values, synchronize_session=False)
        self.admin_db.commit()

    def delete_product(self, id: str) -> Dict[str, Any]:
        self._exists(id)
        product = self.admin_db.query(Product).filter(Product.id == id).first()
        if product:
            self.admin_db.delete(product)
            self.admin_db.commit()
        return {"message": "Product deleted successfully", "id": id}
