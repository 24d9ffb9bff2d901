"""
Bearer tokens.

Sign-in belongs to the identity provider. The backend only needs to read
the opaque user id out of a signed access token; ``create_access_token``
exists for development (``python cli.py --service token``) and tests.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from inkline.backend.core.config import get_app_config, get_settings
from inkline.backend.core.exceptions import AuthenticationError
from inkline.backend.core.logging import get_logger
from inkline.backend.core.utils import utc_now

logger = get_logger(__name__)

TOKEN_TYPE = "access"
INVALID_TOKEN = "Invalid or expired token"


def _signing():
    return get_settings().jwt_secret, get_app_config().security.jwt


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` (which should carry ``sub``) with expiry and audience claims."""
    secret, jwt_config = _signing()
    lifetime = expires_delta or timedelta(minutes=jwt_config.access_token_expire_minutes)
    claims = {
        **data,
        "exp": utc_now() + lifetime,
        "type": TOKEN_TYPE,
        "aud": jwt_config.audience,
    }
    return jwt.encode(claims, secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature, expiry and audience.

    Raises:
        AuthenticationError: On any verification failure
    """
    secret, jwt_config = _signing()
    try:
        return jwt.decode(token, secret, algorithms=[jwt_config.algorithm], audience=jwt_config.audience)
    except JWTError as e:
        logger.warning("Rejected bearer token", extra={"reason": str(e)})
        raise AuthenticationError(INVALID_TOKEN) from e


def user_id_from_token(token: str) -> str:
    claims = decode_token(token)
    subject = claims.get("sub")
    if claims.get("type") != TOKEN_TYPE or not subject:
        raise AuthenticationError(INVALID_TOKEN)
    return str(subject)
