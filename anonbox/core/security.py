import hashlib
import hmac
import secrets
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from anonbox.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)


def generate_verify_code() -> str:
    """Six decimal digits, never with a leading zero."""
    return str(100000 + secrets.randbelow(900000))


def codes_match(supplied: str, stored: str | None) -> bool:
    if not stored or not isinstance(supplied, str):
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


def get_session_serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(
        settings.secret_key,
        salt="anonbox-session",
        signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
    )


def create_session_cookie(payload: dict[str, Any]) -> str:
    return get_session_serializer().dumps(payload)


def load_session_cookie(cookie_value: str, max_age_seconds: int | None = None) -> dict[str, Any] | None:
    serializer = get_session_serializer()
    if max_age_seconds is None:
        max_age_seconds = get_settings().session_max_age_seconds
    try:
        payload = serializer.loads(cookie_value, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    return payload if isinstance(payload, dict) else None
