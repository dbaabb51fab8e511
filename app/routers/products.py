from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from uuid import UUID

from app.models.base import get_db, get_admin_db
from app.schemas.product import ProductCreate, ProductUpdate, ProductPage
from app.services.products import ProductService
from app.utils.security import CurrentUser, require_admin

router = APIRouter()


def get_product_service(db: Session = Depends(get_db), admin_db: Session = Depends(get_admin_db)) -> ProductService:
    return ProductService(db, admin_db)


# List Products (paginated)
@router.get("", response_model=ProductPage)
def get_all_products(
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1),
    service: ProductService = Depends(get_product_service),
):
    return service.list_products(offset=offset, limit=limit)


# Product detail with variants, attribute matrix and review stats
@router.get("/{id}")
def get_product_by_id(id: UUID, service: ProductService = Depends(get_product_service)):
    return service.get_product(str(id))


# Create Product (Admin)
@router.post("", status_code=201)
def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.create_product(payload)


# Update Product (Admin)
@router.put("/{id}")
def update_product(
    id: UUID,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.update_product(str(id), payload)


# Delete Product (Admin)
@router.delete("/{id}")
def delete_product(
    id: UUID,
    service: ProductService = Depends(get_product_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.delete_product(str(id))
