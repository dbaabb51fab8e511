from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.models.base import get_db
from app.schemas.cart import CartItemIn, CartItemUpdate, CartItemOut
from app.services.cart import CartService
from app.utils.security import CurrentUser, get_current_user


# Every cart route requires an authenticated caller
router = APIRouter(dependencies=[Depends(get_current_user)])


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


# Get Cart
@router.get("")
def get_cart(service: CartService = Depends(get_cart_service), current_user: CurrentUser = Depends(get_current_user)):
    return service.get_items(current_user.id)


# Add Cart Item (merges with an existing line for the same variant)
@router.post("/add", response_model=CartItemOut, status_code=201)
def add_to_cart(
    payload: CartItemIn,
    service: CartService = Depends(get_cart_service),
    current_user: CurrentUser = Depends(get_current_user),
):
    return service.add_item(current_user.id, payload.productId, payload.variantId, payload.quantity)


# Update Cart Item quantity
@router.put("/{cartItemId}", response_model=CartItemOut)
def update_cart_item(
    cartItemId: str,
    payload: CartItemUpdate,
    service: CartService = Depends(get_cart_service),
    current_user: CurrentUser = Depends(get_current_user),
):
    return service.update_item(current_user.id, cartItemId, payload.quantity)


# Remove Cart Item
@router.delete("/{cartItemId}")
def remove_cart_item(
    cartItemId: str,
    service: CartService = Depends(get_cart_service),
    current_user: CurrentUser = Depends(get_current_user),
):
    return service.remove_item(current_user.id, cartItemId)


# Clear Cart
@router.delete("")
def clear_cart(service: CartService = Depends(get_cart_service), current_user: CurrentUser = Depends(get_current_user)):
    return service.clear(current_user.id)
