import hmac
import logging

from homebrew.errors import AuthError

logger = logging.getLogger(__name__)

SECRET_HEADER = "Authorization"


def require_api_key(provided: str | None, expected: str) -> None:
    """
    Ensure the caller sent the shared secret, byte for byte.
    Raises AuthError otherwise; an empty configured key rejects everyone.
    """
    if not provided:
        logger.warning("Missing secret header")
        raise AuthError("missing secret header")
    if not expected or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Invalid secret header")
        raise AuthError("invalid secret header")
