"""Security helpers for session and custom token handling."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from govconsole.config import get_settings
from govconsole.domain.entities import Identity

ALGORITHM = "HS256"

TOKEN_TYPE_SESSION = "session"
TOKEN_TYPE_CUSTOM = "custom"

_CUSTOM_TOKEN_LIFETIME = timedelta(hours=1)


def _is_valid_user_id(user_id: object) -> bool:
    # User ids become a single segment of collection paths.
    return isinstance(user_id, str) and bool(user_id.strip()) and "/" not in user_id


def _scoped_claims() -> dict[str, Any]:
    settings = get_settings()
    claims: dict[str, Any] = {}
    if settings.project_auth_domain:
        claims["iss"] = settings.project_auth_domain
    if settings.project_id:
        claims["aud"] = settings.project_id
    return claims


def _encode(claims: dict[str, Any], expires_delta: timedelta) -> str:
    settings = get_settings()
    expire = datetime.now(tz=timezone.utc) + expires_delta
    return jwt.encode(
        {**claims, **_scoped_claims(), "exp": expire},
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def _decode(token: str, expected_type: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            audience=settings.project_id or None,
            issuer=settings.project_auth_domain or None,
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc

    if payload.get("typ") != expected_type:
        raise ValueError("Could not validate credentials")
    if not _is_valid_user_id(payload.get("sub")):
        raise ValueError("Could not validate credentials")
    return payload


def create_session_token(identity: Identity, expires_delta: timedelta | None = None) -> str:
    """Return a signed token that identifies ``identity`` on later requests."""

    settings = get_settings()
    return _encode(
        {
            "sub": identity.user_id,
            "anon": identity.is_anonymous,
            "typ": TOKEN_TYPE_SESSION,
        },
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def decode_session_token(token: str) -> Identity:
    payload = _decode(token, TOKEN_TYPE_SESSION)
    return Identity(user_id=payload["sub"], is_anonymous=bool(payload.get("anon", False)))


def create_custom_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Mint a pre-issued token a hosting environment can hand to the console."""

    if not _is_valid_user_id(user_id):
        raise ValueError("A user id without '/' is required to mint a custom token")
    return _encode(
        {"sub": user_id.strip(), "typ": TOKEN_TYPE_CUSTOM},
        expires_delta or _CUSTOM_TOKEN_LIFETIME,
    )


def verify_custom_token(token: str) -> str:
    """Return the user id carried by a valid custom token."""

    return _decode(token, TOKEN_TYPE_CUSTOM)["sub"]


__all__ = [
    "create_custom_token",
    "create_session_token",
    "decode_session_token",
    "verify_custom_token",
]
