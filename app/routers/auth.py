from fastapi import APIRouter, Depends, HTTPException
import logging

from app.config import get_settings
from app.schemas.user import RegisterSchema, LoginSchema
from app.utils.identity import IdentityError, IdentityProvider, get_identity_provider
from app.utils.security import CurrentUser, get_bearer_token, get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201)
def register(user: RegisterSchema, provider: IdentityProvider = Depends(get_identity_provider)):
    settings = get_settings()
    try:
        created = provider.sign_up(user.email, user.password, metadata={"role": settings.DEFAULT_USER_ROLE})
    except IdentityError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"message": "Registration successful", "user": created}


@router.post("/login")
def login(credentials: LoginSchema, provider: IdentityProvider = Depends(get_identity_provider)):
    try:
        session = provider.sign_in(credentials.email, credentials.password)
    except IdentityError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return {
        "message": "Login successful",
        "accessToken": session.get("access_token"),
        "refreshToken": session.get("refresh_token"),
        "user": session.get("user"),
    }


@router.post("/logout")
def logout(
    current_user: CurrentUser = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    # Best effort: the caller is told the session ended even if revocation fails
    try:
        provider.sign_out(token)
    except Exception as e:
        logger.warning("Logout for user %s failed at the auth provider: %s", current_user.id, e)
    return {"message": "Logout successful"}


@router.get("/profile")
def get_profile(current_user: CurrentUser = Depends(get_current_user)):
    return {"user": current_user}
