from dataclasses import dataclass

from jose import jwt, JWTError
from fastapi import Request, HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import JWT_SECRET, JWT_ALGORITHM

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    user_id: int
    email: str | None
    roles: tuple

    def has_role(self, role: str) -> bool:
        return role.lower() in self.roles


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_actor(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Actor:
    """Resolve the bearer token into the requester.

    Tokens carry the numeric user id in ``sub`` plus ``email`` and ``roles``.
    """
    if not creds or creds.scheme.lower() != "bearer" or not creds.credentials:
        raise _unauthorized("Missing Bearer token")

    try:
        claims = jwt.decode(creds.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Token subject is not a user id")

    roles = claims.get("roles")
    if not isinstance(roles, list):
        roles = []
    actor = Actor(
        user_id=user_id,
        email=claims.get("email"),
        roles=tuple(str(r).lower() for r in roles),
    )

    # picked up by the request log line
    request.state.user_sub = str(actor.user_id)
    request.state.user_roles = list(actor.roles)
    return actor
