from enum import Enum
from typing import Any, Dict, Optional
import logging

from fastapi import HTTPException, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from app.utils.identity import IdentityError, IdentityProvider, get_identity_provider

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)


class Role(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[Role] = None
    user_metadata: Dict[str, Any] = {}


def parse_role(value: Any) -> Optional[Role]:
    try:
        return Role(value)
    except ValueError:
        return None


def to_current_user(user: Dict[str, Any]) -> CurrentUser:
    metadata = user.get("user_metadata") or {}
    return CurrentUser(
        id=str(user["id"]),
        email=user.get("email"),
        role=parse_role(metadata.get("role")),
        user_metadata=metadata,
    )


def get_bearer_token(request: Request, token: HTTPAuthorizationCredentials = Depends(http_bearer)) -> str:
    if not token or not token.credentials:
        if request.headers.get("Authorization"):
            # Header present with another scheme
            raise HTTPException(status_code=401, detail="Invalid token")
        raise HTTPException(status_code=401, detail="Missing authorization header")
    return token.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> CurrentUser:
    try:
        user = provider.get_user(token)
    except IdentityError:
        raise HTTPException(status_code=401, detail="Invalid token")
    except Exception as e:
        logger.error("Token resolution failed: %s", e, exc_info=True)
        raise HTTPException(status_code=401, detail="Authentication failed")
    if not user or not user.get("id"):
        raise HTTPException(status_code=401, detail="Invalid token")
    return to_current_user(user)


def require_roles(*roles: Role):
    """Dependency allowing only callers whose role is in ``roles``.

    A role mismatch is reported as 401, same as a bad token.
    """
    allowed = set(roles)

    def _check(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if allowed and user.role not in allowed:
            names = ", ".join(r.value for r in roles)
            raise HTTPException(status_code=401, detail=f"Requires one of these roles: {names}")
        return user

    return _check


require_admin = require_roles(Role.ADMIN)
