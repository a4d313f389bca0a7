from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dineflow.infrastructure.auth.tokens import InvalidTokenError, Principal, Role, decode_token

bearer_scheme = HTTPBearer(auto_error=False)


class UnauthenticatedError(Exception):
    pass


class ForbiddenError(Exception):
    pass


def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    if credentials is None:
        raise UnauthenticatedError("a bearer token is required")
    try:
        return decode_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise UnauthenticatedError(str(exc)) from exc


def require_roles(*roles: Role) -> Callable[..., Principal]:
    allowed = frozenset(roles)

    def _dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role not in allowed:
            raise ForbiddenError(f"role {principal.role.value} may not perform this action")
        return principal

    return _dependency


require_any_role = require_roles(Role.CUSTOMER, Role.STAFF, Role.OWNER)
require_staff = require_roles(Role.STAFF, Role.OWNER)
require_owner = require_roles(Role.OWNER)
