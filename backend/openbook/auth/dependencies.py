from fastapi import Depends, Request
from typing import Optional, Callable

from openbook.api.errors import AuthenticationError
from openbook.auth.policy import ensure_permission
from openbook.core.security import decode_access_token
from openbook.db.repositories import UserRepository
from openbook.models.user import User


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[len("Bearer "):].strip() or None


async def _load_user(token: str) -> Optional[User]:
    payload = decode_access_token(token)
    if not payload:
        return None
    # Reloaded on every request so deleted users and admin changes apply at once
    return await UserRepository.get_by_id(int(payload["sub"]))


async def get_current_user(request: Request) -> User:
    """
    Dependency that requires a valid bearer token.
    Use this on all protected endpoints.
    """
    token = _bearer_token(request)
    if not token:
        raise AuthenticationError("Access token required")

    user = await _load_user(token)
    if not user:
        raise AuthenticationError("Invalid or expired token")

    return user


async def get_current_user_optional(request: Request) -> Optional[User]:
    """
    Optional dependency that validates the token if present.
    Returns None (a guest) when the token is missing or invalid.
    """
    token = _bearer_token(request)
    if not token:
        return None
    return await _load_user(token)


def require_permission(permission: str) -> Callable:
    """Dependency factory: authenticated user holding the given permission"""
    async def dependency(user: User = Depends(get_current_user)) -> User:
        await ensure_permission(user, permission)
        return user

    return dependency
