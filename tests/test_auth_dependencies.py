from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from jose import jwt

from app.services.auth_dependencies import (
    decode_access_token,
    is_admin_claims,
    require_user_auth,
)


def _token(claims, secret="test-secret"):
    return jwt.encode(claims, secret, algorithm="HS256")


def _request(cookies=None):
    return SimpleNamespace(cookies=cookies or {}, state=SimpleNamespace())


def test_bearer_token_resolves_user(auth_settings):
    request = _request()
    auth = require_user_auth(
        request=request,
        authorization=f"Bearer {_token({'sub': 'u-1', 'email': 'viewer@example.com'})}",
    )
    assert auth == {"user_id": "u-1", "email": "viewer@example.com", "roles": [], "is_admin": False}
    assert request.state.actor_id == "u-1"


def test_allow_listed_email_is_admin(auth_settings):
    auth = require_user_auth(
        request=_request(),
        authorization=f"Bearer {_token({'sub': 'u-2', 'email': 'Boss@Example.com'})}",
    )
    assert auth["is_admin"] is True


def test_session_cookie_is_accepted(auth_settings):
    token = _token({"sub": "u-3", "app_metadata": {"role": "admin"}})
    auth = require_user_auth(request=_request({auth_settings.session_cookie_name: token}), authorization=None)
    assert auth["is_admin"] is True
    assert auth["roles"] == ["admin"]


def test_missing_token_is_rejected(auth_settings):
    with pytest.raises(HTTPException) as exc_info:
        require_user_auth(request=_request(), authorization=None)
    assert exc_info.value.status_code == 401


def test_token_without_subject_is_rejected(auth_settings):
    with pytest.raises(HTTPException) as exc_info:
        require_user_auth(request=_request(), authorization=f"Bearer {_token({'email': 'x@example.com'})}")
    assert exc_info.value.status_code == 401


def test_wrong_secret_is_rejected(auth_settings):
    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(_token({"sub": "u-1"}, secret="other-secret"))
    assert exc_info.value.detail == "Invalid token"


@pytest.mark.parametrize(
    "claims",
    [
        {"app_metadata": {"role": "admin"}},
        {"app_metadata": {"roles": ["sales", "admin"]}},
        {"app_metadata": {"is_admin": True}},
        {"email": "boss@example.com"},
    ],
)
def test_admin_claims(claims):
    assert is_admin_claims(claims, admin_emails=("boss@example.com",)) is True


@pytest.mark.parametrize(
    "claims",
    [
        {},
        {"email": "viewer@example.com"},
        {"role": "admin"},
        {"app_metadata": {"is_admin": "yes"}},
        {"app_metadata": ["admin"]},
    ],
)
def test_non_admin_claims(claims):
    assert is_admin_claims(claims, admin_emails=("boss@example.com",)) is False

