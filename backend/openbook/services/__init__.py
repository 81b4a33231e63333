from .auth_service import AuthenticationService, get_auth_service
from .permission_resolver import resolve_permissions, resolve_user_permissions, resolve_guest_permissions

__all__ = [
    "AuthenticationService",
    "get_auth_service",
    "resolve_permissions",
    "resolve_user_permissions",
    "resolve_guest_permissions"
]
