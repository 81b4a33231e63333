import logging
from fastapi import APIRouter, HTTPException, Depends, status

import aiosqlite

from openbook.api.errors import (
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    PermissionDeniedError
)
from openbook.api.schemas import (
    LoginRequest,
    RegisterRequest,
    ProfileUpdateRequest,
    ChangePasswordRequest,
    AdminUserCreateRequest,
    AdminUserUpdateRequest,
    UserResponse,
    AuthTokenResponse,
    UserListResponse,
    PermissionNamesResponse,
    SuccessResponse
)
from openbook.auth.dependencies import get_current_user, require_permission
from openbook.auth.policy import ensure_admin, has_permission
from openbook.core.config import settings
from openbook.db.repositories import ActivityRepository, TagRepository, UserRepository
from openbook.models.user import User
from openbook.services.auth_service import get_auth_service
from openbook.services.permission_resolver import resolve_guest_permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


async def _validate_tags(tags):
    if tags is None:
        return None
    tags = list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))
    known = await TagRepository.get_existing_names(tags)
    unknown = [tag for tag in tags if tag not in known]
    if unknown:
        raise BadRequestError(f"Unknown tag(s): {', '.join(unknown)}")
    return tags


@router.get("/guest-permissions", response_model=PermissionNamesResponse)
async def get_guest_permissions():
    """Permissions granted to unauthenticated visitors"""
    permissions = await resolve_guest_permissions()
    return PermissionNamesResponse(permissions=sorted(permissions))


@router.post("/login", response_model=AuthTokenResponse)
async def login_user(request: LoginRequest):
    """Login with username and password, returning a bearer token"""
    auth_service = get_auth_service()
    success, user, message = await auth_service.authenticate_password(
        request.username, request.password
    )
    if not success:
        raise AuthenticationError(message)

    return AuthTokenResponse(
        message=message,
        token=auth_service.create_token(user),
        user=await auth_service.user_payload(user)
    )


@router.post("/register", response_model=AuthTokenResponse, status_code=status.HTTP_201_CREATED)
async def register_user(request: RegisterRequest):
    """Register a new account with the default Contributor tag"""
    auth_service = get_auth_service()
    try:
        user, token = await auth_service.register_user(
            username=request.username,
            email=request.email,
            password=request.password
        )
    except ValueError as e:
        raise BadRequestError(str(e))
    except aiosqlite.IntegrityError:
        raise BadRequestError("This username or email is already in use")

    return AuthTokenResponse(
        message="Registration successful",
        token=token,
        user=await auth_service.user_payload(user)
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout_user(user: User = Depends(get_current_user)):
    """Tokens are discarded client-side; the server records the logout"""
    await get_auth_service().logout(user)
    return SuccessResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return UserResponse(user=await get_auth_service().user_payload(user))


@router.get("/verify", response_model=UserResponse)
async def verify_token(user: User = Depends(get_current_user)):
    """Check a token and return the user it belongs to"""
    return UserResponse(message="Token is valid", user=await get_auth_service().user_payload(user))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(require_permission("edit_own_profile"))
):
    """Update own username, email, bio or avatar"""
    if request.avatar is not None and not await has_permission(user, "change_avatar"):
        raise PermissionDeniedError("Permission 'change_avatar' required")

    if all(value is None for value in (request.username, request.email, request.avatar, request.bio)):
        raise BadRequestError("No data to update")

    auth_service = get_auth_service()
    problem = await auth_service.check_available(request.username, request.email, exclude_user_id=user.id)
    if problem:
        raise BadRequestError(problem)

    try:
        updated = await UserRepository.update_profile(
            user.id,
            username=request.username,
            email=request.email,
            avatar=request.avatar,
            bio=request.bio
        )
    except aiosqlite.IntegrityError:
        raise BadRequestError("This username or email is already in use")

    await ActivityRepository.create(
        user_id=user.id,
        type="auth",
        title="Profile updated",
        description=f"Profile update for {updated.username}",
        icon="user"
    )
    return UserResponse(
        message="Profile updated successfully",
        user=await auth_service.user_payload(updated)
    )


@router.put("/password", response_model=SuccessResponse)
async def change_password(request: ChangePasswordRequest, user: User = Depends(get_current_user)):
    success, message = await get_auth_service().change_password(
        user.id, request.current_password, request.new_password
    )
    if not success:
        raise BadRequestError(message)
    return SuccessResponse(message=message)


# Administration of accounts

@router.get("/users", response_model=UserListResponse)
async def list_users(user: User = Depends(require_permission("user_management"))):
    users = await UserRepository.list_all()
    return UserListResponse(users=[u.to_dict() for u in users])


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: AdminUserCreateRequest,
    user: User = Depends(require_permission("user_management"))
):
    """Create an account with explicit tags and admin flag"""
    if request.is_admin:
        ensure_admin(user)
    problem = await get_auth_service().check_available(request.username, request.email)
    if problem:
        raise BadRequestError(problem)
    tags = await _validate_tags(request.tags)

    try:
        created = await UserRepository.create(
            username=request.username,
            email=request.email,
            password=request.password,
            is_admin=request.is_admin,
            avatar=request.avatar or settings.DEFAULT_AVATAR,
            bio=request.bio,
            tags=tags
        )
    except aiosqlite.IntegrityError:
        raise BadRequestError("This username or email is already in use")

    await ActivityRepository.create(
        user_id=user.id,
        type="admin",
        title="User created",
        description=f"User {created.username} created by {user.username}",
        icon="user-plus"
    )
    logger.info(f"User {created.username} created by {user.username}")
    return UserResponse(message="User created successfully", user=created.to_dict())


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: AdminUserUpdateRequest,
    user: User = Depends(require_permission("user_management"))
):
    existing = await UserRepository.get_by_id(user_id)
    if not existing:
        raise NotFoundError("User not found")

    fields = request.model_dump(exclude={"tags", "password"}, exclude_none=True)
    if not fields and request.tags is None and request.password is None:
        raise BadRequestError("No data to update")

    if user_id == user.id and request.is_admin is False:
        raise BadRequestError("You cannot remove your own administrator status")
    if request.is_admin is not None and request.is_admin != existing.is_admin:
        ensure_admin(user)

    problem = await get_auth_service().check_available(request.username, request.email, exclude_user_id=user_id)
    if problem:
        raise BadRequestError(problem)
    tags = await _validate_tags(request.tags)

    try:
        updated = await UserRepository.update(user_id, fields, password=request.password, tags=tags)
    except aiosqlite.IntegrityError:
        raise BadRequestError("This username or email is already in use")

    await ActivityRepository.create(
        user_id=user.id,
        type="admin",
        title="User profile modified",
        description=f"User profile {updated.username} modified by {user.username}",
        icon="user"
    )
    return UserResponse(message="User profile updated successfully", user=updated.to_dict())


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(user_id: int, user: User = Depends(require_permission("user_management"))):
    existing = await UserRepository.get_by_id(user_id)
    if not existing:
        raise NotFoundError("User not found")
    if existing.id == user.id:
        raise BadRequestError("You cannot delete your own account")

    try:
        await UserRepository.delete(user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user"
        )

    await ActivityRepository.create(
        user_id=user.id,
        type="admin",
        title="User deleted",
        description=f"User {existing.username} deleted by {user.username}",
        icon="trash"
    )
    return SuccessResponse(message="User deleted successfully")
