"""
Unit tests for JWT session tokens
"""

from datetime import timedelta
import uuid
from jose import jwt

from gestia.core.auth import create_session_token, decode_access_token, decode_session_token
from gestia.core.config import get_settings
from gestia.models.user import Role

from conftest import session_for

settings = get_settings()


def test_create_session_token(admin_a):
    """Token carries the principal's claims"""
    token = create_session_token(admin_a)

    assert isinstance(token, str)
    payload = decode_access_token(token)
    assert payload["sub"] == str(admin_a.id)
    assert payload["company_id"] == str(admin_a.company_id)
    assert payload["role"] == "ADMIN"
    assert payload["email_verified"] is True
    assert "exp" in payload


def test_decode_session_token(secretary_a):
    context = decode_session_token(create_session_token(secretary_a))

    assert context == session_for(secretary_a)
    assert context.role == Role.SECRETARY


def test_decode_invalid_token():
    assert decode_access_token("invalid.token.string.here") is None
    assert decode_session_token("invalid.token.string.here") is None


def test_expired_token_is_rejected(admin_a):
    token = create_session_token(admin_a, expires_delta=timedelta(hours=-1))

    assert decode_access_token(token) is None
    assert decode_session_token(token) is None


def test_token_signed_with_other_key_is_rejected(admin_a):
    token = jwt.encode(
        {"sub": str(admin_a.id), "company_id": str(admin_a.company_id), "role": "ADMIN"},
        "another-secret",
        algorithm=settings.JWT_ALGORITHM,
    )

    assert decode_session_token(token) is None


def test_token_without_company_decodes_without_tenant():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "role": "ADMIN"},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )

    context = decode_session_token(token)
    assert context is not None
    assert context.company_id is None


def test_token_with_unknown_role_is_rejected():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "company_id": str(uuid.uuid4()), "role": "OWNER"},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )

    assert decode_session_token(token) is None
