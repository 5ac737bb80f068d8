"""
Security Utilities.

Telegram initData verification and JWT session tokens.

initData is the URL-encoded payload the Telegram client hands to a Mini App.
It is trusted only if its `hash` field matches an HMAC-SHA256 computed with
a key derived from one of the configured bot tokens:

    secret_key = HMAC_SHA256(key="WebAppData", msg=bot_token)
    hash       = hex(HMAC_SHA256(key=secret_key, msg=data_check_string))

where data_check_string is every other field as `key=value`, sorted by key
and joined with newlines.
"""

import hashlib
import hmac
from collections.abc import Sequence
from datetime import timedelta
from typing import Any
from urllib.parse import parse_qsl

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from wedding_tma.backend.core.config import get_app_config, get_settings
from wedding_tma.backend.core.exceptions import (
    AuthenticationError,
    MalformedIdentityError,
    SignatureInvalidError,
)
from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.core.utils import utc_now

logger = get_logger(__name__)

WEBAPP_KEY_CONSTANT = b"WebAppData"


class TelegramUser(BaseModel):
    """User object embedded as JSON under the `user` key of initData."""

    id: int
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None

    model_config = ConfigDict(extra="ignore")


def _parse_init_data(raw: str) -> dict[str, str]:
    return dict(parse_qsl(raw, keep_blank_values=True))


def build_data_check_string(fields: dict[str, str]) -> str:
    """Join fields as sorted `key=value` lines, the form Telegram signs."""
    return "\n".join(f"{key}={value}" for key, value in sorted(fields.items()))


def sign_init_data(fields: dict[str, str], bot_token: str) -> str:
    """
    Compute the initData hash for the given fields and bot token.

    Args:
        fields: All initData fields except `hash`
        bot_token: Bot token the payload is attributed to

    Returns:
        Hex-encoded HMAC-SHA256 signature
    """
    secret_key = hmac.new(WEBAPP_KEY_CONSTANT, bot_token.encode("utf-8"), hashlib.sha256).digest()
    check_string = build_data_check_string(fields)
    return hmac.new(secret_key, check_string.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_init_data(raw: str, secrets: Sequence[str]) -> bool:
    """
    Check that initData was signed by one of the trusted bot tokens.

    Several tokens may be configured to allow rotation or multiple bots
    fronting the same Mini App; the first match wins.

    Args:
        raw: URL-encoded initData string
        secrets: Candidate bot tokens

    Returns:
        True if the `hash` field matches any candidate, False otherwise
    """
    fields = _parse_init_data(raw)
    received_hash = fields.pop("hash", None)
    if not received_hash:
        return False

    for secret in secrets:
        expected = sign_init_data(fields, secret)
        if hmac.compare_digest(expected, received_hash):
            return True
    return False


def parse_init_data_user(raw: str) -> TelegramUser:
    """
    Extract the embedded Telegram user from initData.

    Raises:
        MalformedIdentityError: If `user` is missing, not JSON, or has no id
    """
    raw_user = _parse_init_data(raw).get("user")
    if not raw_user:
        raise MalformedIdentityError("No user data in initData")

    try:
        return TelegramUser.model_validate_json(raw_user)
    except PydanticValidationError as e:
        logger.warning("Unparsable initData user", extra={"error_count": e.error_count()})
        raise MalformedIdentityError("Invalid user data in initData")


def authenticate_init_data(raw: str, secrets: Sequence[str]) -> TelegramUser:
    """
    Verify initData and return the Telegram user it asserts.

    Raises:
        SignatureInvalidError: If no trusted token produced the hash
        MalformedIdentityError: If the signed payload has no usable user
    """
    if not verify_init_data(raw, secrets):
        logger.warning("initData signature rejected", extra={"candidates": len(secrets)})
        raise SignatureInvalidError()
    return parse_init_data_user(raw)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT session token.

    Args:
        data: Payload data to encode
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(days=jwt_config.access_token_expire_days)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")
    return payload
