"""Resolve the set of permission names a requester holds through their tags."""
import logging
from typing import Optional, Set

from openbook.db.repositories import PermissionRepository, UserRepository
from openbook.models.tag import GUEST_TAG
from openbook.models.user import User

logger = logging.getLogger(__name__)


async def resolve_guest_permissions() -> Set[str]:
    """Permissions attached to the reserved Unauthenticated User tag"""
    return await PermissionRepository.get_names_for_tag_name(GUEST_TAG)


async def resolve_permissions(user_id: Optional[int]) -> Set[str]:
    """
    Return the permission names granted to a user.

    None means a guest. Administrators resolve to every permission regardless
    of their tags. An unknown user, a user without tags, or tags without
    grants all yield an empty set. Nothing is cached, so grant changes apply
    on the next check.
    """
    if user_id is None:
        return await resolve_guest_permissions()

    user = await UserRepository.get_by_id(user_id)
    if user is None:
        logger.debug(f"Permission lookup for unknown user {user_id}")
        return set()

    return await resolve_user_permissions(user)


async def resolve_user_permissions(user: Optional[User]) -> Set[str]:
    """Same as resolve_permissions for an already loaded user"""
    if user is None:
        return await resolve_guest_permissions()
    if user.is_admin:
        return await PermissionRepository.list_names()
    return await PermissionRepository.get_names_for_user(user.id)
