from fastapi import HTTPException, status

from .security import Actor


def require_role(actor: Actor, allowed_roles: list[str]):
    if not actor.roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Roles missing in token",
        )

    allowed = {r.lower() for r in allowed_roles}

    if allowed.isdisjoint(actor.roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access forbidden for this role",
        )
