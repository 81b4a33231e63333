import logging
from typing import Optional, Dict, Any, Tuple, List

from openbook.core.config import settings
from openbook.core.security import create_access_token, verify_password
from openbook.db.repositories import ActivityRepository, UserRepository
from openbook.models.tag import CONTRIBUTOR_TAG
from openbook.models.user import User
from openbook.services.permission_resolver import resolve_user_permissions

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Registration, password login and password changes"""

    default_tags: List[str] = [CONTRIBUTOR_TAG]

    async def user_payload(self, user: User) -> Dict[str, Any]:
        """Public user data plus the resolved permission names"""
        data = user.to_dict()
        data["permissions"] = sorted(await resolve_user_permissions(user))
        return data

    async def check_available(self, username: Optional[str], email: Optional[str],
                              exclude_user_id: Optional[int] = None) -> Optional[str]:
        """Return an error message if the username or email is already taken"""
        if username:
            existing = await UserRepository.get_by_username(username)
            if existing and existing.id != exclude_user_id:
                return "This username is already taken"
        if email:
            existing = await UserRepository.get_by_email(email)
            if existing and existing.id != exclude_user_id:
                return "This email is already in use"
        return None

    async def register_user(self, username: str, email: str, password: str) -> Tuple[User, str]:
        """Create a Contributor account and issue its token"""
        problem = await self.check_available(username, email)
        if problem:
            raise ValueError(problem)

        user = await UserRepository.create(
            username=username,
            email=email,
            password=password,
            avatar=settings.DEFAULT_AVATAR,
            tags=self.default_tags
        )
        await ActivityRepository.create(
            user_id=user.id,
            type="auth",
            title="Registration successful",
            description=f"New user: {user.username}",
            icon="user"
        )
        logger.info(f"Registered user {user.username}")
        return user, self.create_token(user)

    async def authenticate_password(self, username: str, password: str) -> Tuple[bool, Optional[User], str]:
        """Authenticate user with password"""
        user = await UserRepository.get_by_username(username)

        # Same message for unknown users and wrong passwords
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for '{username}'")
            return False, None, "Invalid credentials"

        await UserRepository.update_last_login(user.id)
        await ActivityRepository.create(
            user_id=user.id,
            type="auth",
            title="Successful login",
            description=f"Login by {user.username}",
            icon="shield"
        )
        user = await UserRepository.get_by_id(user.id)
        return True, user, "Login successful"

    def create_token(self, user: User) -> str:
        return create_access_token({"id": user.id, "username": user.username, "is_admin": user.is_admin})

    async def logout(self, user: User):
        """Tokens are stateless; logging out only records the activity"""
        await ActivityRepository.create(
            user_id=user.id,
            type="auth",
            title="Logout",
            description=f"Logout by {user.username}",
            icon="shield"
        )

    async def change_password(self, user_id: int, current_password: str, new_password: str) -> Tuple[bool, str]:
        """Change user password with current password verification"""
        user = await UserRepository.get_by_id(user_id)
        if not user:
            return False, "User not found"

        if not verify_password(current_password, user.password_hash):
            return False, "Current password is incorrect"

        await UserRepository.update_password(user_id, new_password)
        await ActivityRepository.create(
            user_id=user_id,
            type="auth",
            title="Password changed",
            description=f"Password changed by {user.username}",
            icon="key"
        )
        return True, "Password updated successfully"


# Global auth service instance
_auth_service: Optional[AuthenticationService] = None


def get_auth_service() -> AuthenticationService:
    """Get global authentication service instance"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthenticationService()
    return _auth_service
