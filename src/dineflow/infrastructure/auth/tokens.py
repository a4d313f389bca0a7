from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt


class Role(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    OWNER = "owner"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: Role


class InvalidTokenError(Exception):
    pass


def _jwt_secret() -> str:
    return os.getenv("AUTH_JWT_SECRET", "dev-secret-change-me")


def _jwt_algorithm() -> str:
    return os.getenv("AUTH_JWT_ALGORITHM", "HS256")


def decode_token(token: str) -> Principal:
    """Verify a bearer token issued by the identity provider and read its claims."""
    audience = os.getenv("AUTH_JWT_AUDIENCE")
    options = {"verify_aud": bool(audience)}
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            _jwt_secret(),
            algorithms=[_jwt_algorithm()],
            audience=audience or None,
            options=options,
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("token is invalid") from exc

    metadata = claims.get("user_metadata")
    raw_role = claims.get("role")
    if raw_role is None and isinstance(metadata, dict):
        raw_role = metadata.get("role")
    try:
        role = Role(raw_role)
    except ValueError as exc:
        raise InvalidTokenError(f"unknown role {raw_role!r}") from exc

    user_id = claims.get("userId") or claims.get("sub")
    if not user_id:
        raise InvalidTokenError("token carries no user id")
    return Principal(user_id=str(user_id), role=role)


def issue_token(user_id: str, role: Role, expires_in_seconds: int = 3600) -> str:
    """Mint a token the way the identity provider does; used by seeding and tests."""
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": user_id,
        "userId": user_id,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in_seconds)).timestamp()),
    }
    audience = os.getenv("AUTH_JWT_AUDIENCE")
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, _jwt_secret(), algorithm=_jwt_algorithm())
