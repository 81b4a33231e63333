from .common import (
    SuccessResponse,
    ErrorResponse,
    HealthResponse
)
from .auth import (
    LoginRequest,
    RegisterRequest,
    ProfileUpdateRequest,
    ChangePasswordRequest,
    AdminUserCreateRequest,
    AdminUserUpdateRequest,
    UserResponse,
    AuthTokenResponse,
    UserListResponse,
    PermissionNamesResponse
)
from .wiki import (
    PageCreateRequest,
    PageUpdateRequest,
    PageRenameRequest,
    PageProtectRequest,
    PageCommentsRequest,
    SectionCreateRequest,
    SectionUpdateRequest,
    SectionRenameRequest,
    SectionReorderRequest,
    PageResponse,
    PageListResponse,
    HistoryListResponse,
    HistoryDetailResponse,
    SectionListResponse,
    SectionResponse
)
from .tags import (
    TagRequest,
    PermissionRequest,
    TagPermissionsRequest,
    TagResponse,
    TagListResponse,
    PermissionResponse,
    PermissionListResponse,
    PermissionsByCategoryResponse
)
from .comments import (
    CommentCreateRequest,
    CommentUpdateRequest,
    CommentResponse,
    CommentListResponse
)
from .activities import (
    ActivityCreateRequest,
    ActivityResponse,
    ActivityListResponse,
    PaginatedActivityResponse
)
from .export import BulkExportRequest

__all__ = [
    # Common
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "ProfileUpdateRequest",
    "ChangePasswordRequest",
    "AdminUserCreateRequest",
    "AdminUserUpdateRequest",
    "UserResponse",
    "AuthTokenResponse",
    "UserListResponse",
    "PermissionNamesResponse",
    # Wiki
    "PageCreateRequest",
    "PageUpdateRequest",
    "PageRenameRequest",
    "PageProtectRequest",
    "PageCommentsRequest",
    "SectionCreateRequest",
    "SectionUpdateRequest",
    "SectionRenameRequest",
    "SectionReorderRequest",
    "PageResponse",
    "PageListResponse",
    "HistoryListResponse",
    "HistoryDetailResponse",
    "SectionListResponse",
    "SectionResponse",
    # Tags and permissions
    "TagRequest",
    "PermissionRequest",
    "TagPermissionsRequest",
    "TagResponse",
    "TagListResponse",
    "PermissionResponse",
    "PermissionListResponse",
    "PermissionsByCategoryResponse",
    # Comments
    "CommentCreateRequest",
    "CommentUpdateRequest",
    "CommentResponse",
    "CommentListResponse",
    # Activities
    "ActivityCreateRequest",
    "ActivityResponse",
    "ActivityListResponse",
    "PaginatedActivityResponse",
    # Export
    "BulkExportRequest"
]
