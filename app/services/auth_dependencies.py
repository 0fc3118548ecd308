"""Resolve the signed-in user and their admin status from a bearer token.

Tokens are issued by the identity provider; this service only verifies them
with the shared secret and reads the claims.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import Header, HTTPException, Request
from jose import JWTError, jwt

from app.config import settings


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip()
    return None


def decode_access_token(token: str) -> dict[str, Any]:
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc


def _roles(payload: Mapping[str, Any]) -> list[str]:
    roles: set[str] = set()
    app_metadata = payload.get("app_metadata")
    sources = [payload]
    if isinstance(app_metadata, Mapping):
        sources.append(app_metadata)
    for source in sources:
        role_value = source.get("role")
        roles_value = source.get("roles")
        if isinstance(role_value, str):
            roles.add(role_value)
        if isinstance(roles_value, (list, tuple, set)):
            roles.update(str(item) for item in roles_value)
    return sorted(roles)


def is_admin_claims(payload: Mapping[str, Any], admin_emails: tuple[str, ...] | None = None) -> bool:
    """Admin when the email is allow-listed or the provider's metadata says so."""
    allowlist = settings.admin_emails if admin_emails is None else admin_emails
    email = str(payload.get("email") or "").strip().lower()
    if email and email in allowlist:
        return True
    app_metadata = payload.get("app_metadata")
    if not isinstance(app_metadata, Mapping):
        return False
    if app_metadata.get("role") == "admin":
        return True
    roles = app_metadata.get("roles")
    if isinstance(roles, (list, tuple, set)) and "admin" in roles:
        return True
    return app_metadata.get("is_admin") is True


def require_user_auth(
    request: Request = None,  # type: ignore[assignment]
    authorization: str | None = Header(default=None),
):
    token = _extract_bearer_token(authorization)
    if not token and request is not None:
        token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    auth = {
        "user_id": str(user_id),
        "email": payload.get("email"),
        "roles": _roles(payload),
        "is_admin": is_admin_claims(payload),
    }
    if request is not None:
        request.state.actor_id = auth["user_id"]
    return auth

