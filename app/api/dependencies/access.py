"""Caller identity and route access predicates.

Callers present a bearer JWT. Route guards are ordered predicate chains:
no principal means 401, the first predicate that denies means 403.

Usage:
    @router.get("/stats")
    def stats(principal: Principal = Depends(guard(require_role("admin", "manager")))):
        ...
"""

from dataclasses import dataclass
from typing import Callable, Optional

import structlog
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError, decode

from infrastructure.services import RecipientDirectoryDep, SettingsDep

logger = structlog.get_logger()
security = HTTPBearer(auto_error=False)

ADMIN = "admin"
MANAGER = "manager"
USER = "user"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = USER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


AccessPredicate = Callable[[Request, Principal], bool]


def get_optional_principal(
    settings: SettingsDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[Principal]:
    """Verified caller, or None for anonymous or invalid credentials."""
    if credentials is None:
        return None

    secret = settings.server.JWT_SECRET
    if not secret:
        logger.error("jwt_validation_unconfigured", error="JWT_SECRET is missing")
        return None

    try:
        claims = decode(
            credentials.credentials,
            secret,
            algorithms=[settings.server.JWT_ALGORITHM],
            audience=settings.server.JWT_AUDIENCE,
            options={"verify_aud": settings.server.JWT_AUDIENCE is not None},
        )
    except PyJWTError as e:
        logger.warning("jwt_validation_failed", error=str(e))
        return None

    subject = claims.get("sub")
    if not subject:
        logger.warning("jwt_missing_subject")
        return None

    return Principal(
        user_id=str(subject).split("/")[-1],
        role=claims.get("role", USER),
        email=claims.get("email"),
    )


def require_authenticated(request: Request, principal: Principal) -> bool:
    return True


def require_role(*roles: str) -> AccessPredicate:
    """Allow only callers whose role is one of `roles`."""

    def predicate(request: Request, principal: Principal) -> bool:
        return principal.role in roles

    return predicate


def require_ownership(
    path_param: str = "user_id", query_param: str = "userId"
) -> AccessPredicate:
    """Allow callers acting on their own resources; admins act on anyone's.

    The target user comes from the path parameter, else the query parameter.
    Requests naming no target user are allowed (they default to the caller).
    """

    def predicate(request: Request, principal: Principal) -> bool:
        if principal.is_admin:
            return True
        target = request.path_params.get(path_param) or request.query_params.get(
            query_param
        )
        return target is None or target == principal.user_id

    return predicate


def guard(*predicates: AccessPredicate):
    """Build a dependency that enforces `predicates` in order."""

    def dependency(
        request: Request,
        directory: RecipientDirectoryDep,
        principal: Optional[Principal] = Depends(get_optional_principal),
    ) -> Principal:
        if principal is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        for predicate in predicates:
            if not predicate(request, principal):
                logger.warning(
                    "access_denied",
                    user_id=principal.user_id,
                    role=principal.role,
                    path=request.url.path,
                )
                raise HTTPException(status_code=403, detail="Insufficient permissions")
        # A verified email claim is the fallback address for the email channel
        if principal.email:
            directory.set_default_email(principal.user_id, principal.email)
        return principal

    return dependency


def resolve_target_user(principal: Principal, requested: Optional[str]) -> str:
    """Admins may act for another user; everyone else acts for themselves."""
    if principal.is_admin and requested:
        return requested
    return principal.user_id
