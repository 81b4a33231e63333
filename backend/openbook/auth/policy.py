"""Authorization checks shared by every route."""
import logging
from typing import Optional

from openbook.api.errors import AuthenticationError, PermissionDeniedError
from openbook.models.user import User
from openbook.models.wiki_page import WikiPage
from openbook.services.permission_resolver import resolve_user_permissions

logger = logging.getLogger(__name__)

PROTECT_PERMISSION = "protect_pages"


async def has_permission(user: Optional[User], permission: str) -> bool:
    """Admins always pass; everyone else (guests included) goes through their tags"""
    if user is not None and user.is_admin:
        return True
    return permission in await resolve_user_permissions(user)


async def ensure_permission(user: Optional[User], permission: str):
    if await has_permission(user, permission):
        return
    if user is None:
        raise AuthenticationError("Authentication required")
    logger.info(f"User {user.username} denied '{permission}'")
    raise PermissionDeniedError(f"Insufficient permissions. Required: {permission}")


def ensure_admin(user: Optional[User]):
    if user is None:
        raise AuthenticationError("Authentication required")
    if not user.is_admin:
        raise PermissionDeniedError("Administrator access required")


async def ensure_page_writable(user: Optional[User], page: WikiPage, permission: str):
    """The action's own permission, plus admin or protect_pages on protected pages"""
    await ensure_permission(user, permission)
    if page.is_protected and not await has_permission(user, PROTECT_PERMISSION):
        raise PermissionDeniedError(
            "This page is protected. Only administrators or users with protect_pages permission can modify it."
        )


def ensure_owner_or_admin(user: User, owner_id: Optional[int], action: str = "modify this resource"):
    if user.is_admin or (owner_id is not None and user.id == owner_id):
        return
    raise PermissionDeniedError(f"You can only {action} if you own it or are an administrator")
