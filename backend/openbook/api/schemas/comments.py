from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any


def _check_content(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Comment content is required")
    return value


class CommentCreateRequest(BaseModel):
    page_id: int = Field(..., alias="pageId")
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: Optional[int] = Field(None, alias="parentId")

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return _check_content(v)

    class Config:
        populate_by_name = True


class CommentUpdateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return _check_content(v)


class CommentResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    comment: Dict[str, Any]


class CommentListResponse(BaseModel):
    success: bool = True
    comments: List[Dict[str, Any]]
    total: int
