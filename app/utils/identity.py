"""Client for the managed auth provider (GoTrue-compatible REST API).

Accounts, passwords and token issuance live entirely in the provider; this
module only forwards credentials and resolves bearer tokens to users.
"""
from functools import lru_cache
from typing import Any, Dict, Optional
import logging

import httpx
from jose import jwt, JWTError

from app.config import get_settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


class IdentityProvider:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        service_key: str = "",
        jwt_secret: str = "",
        algorithm: str = "HS256",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.service_key = service_key or api_key
        self.jwt_secret = jwt_secret
        self.algorithm = algorithm
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/auth/v1",
            timeout=timeout,
            transport=transport,
            headers={"apikey": api_key},
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Auth provider request %s %s failed: %s", method, path, e)
            raise IdentityError("Auth provider unavailable", status_code=503) from e
        if response.is_error:
            raise IdentityError(_error_message(response), status_code=response.status_code)
        return response

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create an account; ``metadata`` is stored as the user's metadata (carries the role)."""
        response = self._request(
            "POST", "/signup", json={"email": email, "password": password, "data": metadata or {}}
        )
        body = response.json()
        # With auto-confirm the provider answers with a session wrapping the user
        if isinstance(body, dict) and isinstance(body.get("user"), dict):
            return body["user"]
        return body

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        response = self._request(
            "POST", "/token", params={"grant_type": "password"}, json={"email": email, "password": password}
        )
        return response.json()

    def get_user(self, token: str) -> Dict[str, Any]:
        if self.jwt_secret:
            return self._decode(token)
        response = self._request("GET", "/user", headers={"Authorization": f"Bearer {token}"})
        return response.json()

    def sign_out(self, token: str) -> None:
        """Revoke every session of the token's user."""
        self._request(
            "POST",
            "/logout",
            params={"scope": "global"},
            headers={"Authorization": f"Bearer {token}", "apikey": self.service_key},
        )

    def _decode(self, token: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(token, self.jwt_secret, algorithms=[self.algorithm], options={"verify_aud": False})
        except JWTError as e:
            raise IdentityError("invalid JWT", status_code=401) from e
        if not claims.get("sub"):
            raise IdentityError("invalid JWT: missing sub claim", status_code=401)
        return {
            "id": claims["sub"],
            "email": claims.get("email"),
            "role": claims.get("role"),
            "user_metadata": claims.get("user_metadata") or {},
            "app_metadata": claims.get("app_metadata") or {},
        }


@lru_cache
def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    return IdentityProvider(
        base_url=settings.SUPABASE_URL,
        api_key=settings.SUPABASE_ANON_KEY,
        service_key=settings.SUPABASE_SERVICE_KEY,
        jwt_secret=settings.SUPABASE_JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        timeout=settings.AUTH_TIMEOUT_SECONDS,
    )
