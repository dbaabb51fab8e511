from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.models.base import get_db, get_admin_db
from app.schemas.attribute import (
    AttributeTypeCreate,
    AttributeTypeOut,
    AttributeTypeUpdate,
    AttributeValueCreate,
    AttributeValueOut,
    AttributeValueUpdate,
)
from app.services.attributes import AttributeService
from app.utils.security import CurrentUser, require_admin

router = APIRouter()


def get_attribute_service(db: Session = Depends(get_db), admin_db: Session = Depends(get_admin_db)) -> AttributeService:
    return AttributeService(db, admin_db)


# ---- attribute types ----
@router.get("/types", response_model=List[AttributeTypeOut])
def get_all_attribute_types(service: AttributeService = Depends(get_attribute_service)):
    return service.list_types()


@router.get("/types/{id}", response_model=AttributeTypeOut)
def get_attribute_type(id: str, service: AttributeService = Depends(get_attribute_service)):
    return service.get_type(id)


@router.post("/types", response_model=AttributeTypeOut, status_code=201)
def create_attribute_type(
    payload: AttributeTypeCreate,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.create_type(payload)


@router.put("/types/{id}", response_model=AttributeTypeOut)
def update_attribute_type(
    id: str,
    payload: AttributeTypeUpdate,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.update_type(id, payload)


@router.delete("/types/{id}")
def delete_attribute_type(
    id: str,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.delete_type(id)


@router.get("/types/{typeId}/values", response_model=List[AttributeValueOut])
def get_attribute_values_by_type(typeId: str, service: AttributeService = Depends(get_attribute_service)):
    return service.list_values(typeId)


# ---- attribute values ----
@router.get("/values/{id}", response_model=AttributeValueOut)
def get_attribute_value(id: str, service: AttributeService = Depends(get_attribute_service)):
    return service.get_value(id)


@router.post("/values", response_model=AttributeValueOut, status_code=201)
def create_attribute_value(
    payload: AttributeValueCreate,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.create_value(payload)


@router.put("/values/{id}", response_model=AttributeValueOut)
def update_attribute_value(
    id: str,
    payload: AttributeValueUpdate,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.update_value(id, payload)


@router.delete("/values/{id}")
def delete_attribute_value(
    id: str,
    service: AttributeService = Depends(get_attribute_service),
    current_user: CurrentUser = Depends(require_admin),
):
    return service.delete_value(id)
