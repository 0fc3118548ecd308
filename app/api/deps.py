from fastapi import Depends

from app.db import get_db
from app.services.auth_dependencies import require_user_auth


def get_current_user(auth=Depends(require_user_auth)):
    """Get current authenticated user info.

    Returns a dict with user_id, email, roles and is_admin.
    """
    return auth


def actor_label(auth: dict) -> str:
    return auth.get("email") or auth.get("user_id") or "unknown"


__all__ = [
    "actor_label",
    "get_db",
    "get_current_user",
    "require_user_auth",
]
