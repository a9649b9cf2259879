"""
FastAPI Dependencies

Request-scoped dependencies shared by the v1 routers: database session,
settings and app-level services, the authenticated user, permission checks
and the shared-secret guards used by the cron and backup hooks.

Example usage in a router:
    from fastapi import APIRouter, Depends
    from staysync.api import deps

    router = APIRouter()

    @router.get("/rooms")
    def list_rooms(
        db: Session = Depends(deps.get_db),
        current_user: User = Depends(deps.require_permission("rooms", "read")),
    ):
        ...
"""

from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import AuthenticationError, AuthorizationError
from staysync.core.logging import get_logger, set_request_context
from staysync.core.permissions import has_permission
from staysync.core.security import extract_bearer, verify_shared_secret
from staysync.db.session import get_db
from staysync.models import User
from staysync.models.base.enums import UserRole
from staysync.repositories.organization import OrganizationRepository
from staysync.services.analytics import DashboardService
from staysync.services.audit import AuditContext, AuditService
from staysync.services.auth import AuthService
from staysync.services.base import CacheService
from staysync.services.communication import NotificationDispatcher
from staysync.services.integrations import LineMessagingClient

logger = get_logger(__name__)

# Missing credentials are reported through AuthenticationError, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


# --- App-level objects ---------------------------------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_line_client(request: Request) -> LineMessagingClient:
    return request.app.state.line_client


def get_dispatcher(
    client: LineMessagingClient = Depends(get_line_client),
    settings: Settings = Depends(get_settings),
) -> NotificationDispatcher:
    return NotificationDispatcher(client, settings.OWNER_LINE_USER_ID)


# --- Authentication & Authorization -------------------------------------------

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None:
        raise AuthenticationError("Authentication required")
    user = AuthService(db, settings).resolve_user(credentials.credentials)
    set_request_context(uid=user.id)
    return user


class PermissionDependency:
    """Requires the caller's role to grant ``action`` on ``resource``."""

    def __init__(self, resource: str, action: str):
        self.resource = resource
        self.action = action

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, self.resource, self.action):
            logger.info(
                "Permission denied",
                extra={"user_id": current_user.id, "resource": self.resource, "action": self.action},
            )
            raise AuthorizationError(
                "You do not have permission to perform this action",
                required=f"{self.resource}:{self.action}",
            )
        return current_user


class RoleDependency:
    """Requires the caller to hold one of ``roles``."""

    def __init__(self, *roles: UserRole):
        self.roles = roles

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if UserRole(current_user.role) not in self.roles:
            raise AuthorizationError(
                "Role not allowed",
                required="|".join(role.value for role in self.roles),
            )
        return current_user


def require_permission(resource: str, action: str) -> PermissionDependency:
    return PermissionDependency(resource, action)


def require_roles(*roles: UserRole) -> RoleDependency:
    return RoleDependency(*roles)


def require_deployment_owner(
    current_user: User = Depends(require_roles(UserRole.OWNER)),
    db: Session = Depends(get_db),
) -> User:
    """
    Whole-database operations (export, restore) are reserved for the owner
    of the first organization registered on the deployment.
    """
    primary = OrganizationRepository(db).primary()
    if primary is None or primary.id != current_user.organization_id:
        raise AuthorizationError("Only the deployment owner can manage backups", required="deployment_owner")
    return current_user


# --- Shared-secret hooks -------------------------------------------------------

def require_cron_secret(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not verify_shared_secret(extract_bearer(authorization), settings.CRON_SECRET):
        raise AuthenticationError("Invalid cron secret")


def require_backup_key(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not verify_shared_secret(extract_bearer(authorization), settings.BACKUP_API_KEY):
        raise AuthenticationError("Invalid backup key")


# --- Audit ---------------------------------------------------------------------

def get_audit_context(request: Request, current_user: User = Depends(get_current_user)) -> AuditContext:
    return AuditContext.for_user(
        current_user,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_audit_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuditService:
    return AuditService(db, settings)


# --- Services backed by app state ---------------------------------------------

def get_dashboard_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    cache: CacheService = Depends(get_cache),
) -> DashboardService:
    return DashboardService(db, settings, cache)


__all__ = [
    "get_db",
    "get_settings",
    "get_cache",
    "get_line_client",
    "get_dispatcher",
    "get_current_user",
    "require_permission",
    "require_roles",
    "require_deployment_owner",
    "require_cron_secret",
    "require_backup_key",
    "get_audit_context",
    "get_audit_service",
    "get_dashboard_service",
]
