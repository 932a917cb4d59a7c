"""
Password hashing and one-time token helpers
"""

import hashlib
import secrets
from typing import Tuple

from passlib.context import CryptContext

from gestia.core.config import get_settings

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Spend the same time as a real check when no user matched"""
    pwd_context.dummy_verify()


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_one_time_token() -> Tuple[str, str]:
    """Return (raw, sha256 hex); only the hash is ever persisted"""
    raw_token = secrets.token_hex(32)
    return raw_token, hash_token(raw_token)
