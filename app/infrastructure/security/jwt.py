"""JWT token creation and verification for authentication.

Uses app.core.config for secret and algorithm; app.shared.utils for UTC time.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import Settings, get_settings
from app.shared.utils.datetime import utc_now


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (e.g. sub, username).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.
        settings: Optional settings; defaults to get_settings().

    Returns:
        Encoded JWT string.
    """
    s = settings or get_settings()
    to_encode = data.copy()
    if expires_delta is not None:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=s.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded = jwt.encode(
        to_encode,
        s.secret_key.get_secret_value(),
        algorithm=s.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub. Raises ValueError if the token is
    invalid, expired, or missing required claims.

    Args:
        token: JWT string (e.g. from Authorization header).
        settings: Optional settings; defaults to get_settings().

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    s = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            s.secret_key.get_secret_value(),
            algorithms=[s.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    return payload


class JWTTokenIssuer:
    """Token issuer backed by python-jose (implements ITokenIssuer).

    Expiry and signing key come from settings; verification happens in the
    HTTP layer via verify_token.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def issue(self, claims: dict[str, Any]) -> str:
        """Sign claims into a bearer token."""
        try:
            return create_access_token(claims, settings=self._settings)
        except JWTError as e:
            raise ValueError(f"Token signing failed: {e!s}") from e
