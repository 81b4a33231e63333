from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any


def _check_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    return value


class PageCreateRequest(BaseModel):
    """Schema for creating a new page"""
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field("", max_length=1_000_000)
    is_protected: bool = Field(False, alias="isProtected")
    icon: Optional[str] = Field(None, max_length=100)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "title": "Intro",
                "content": "# Intro\n\nWelcome.",
                "icon": "book"
            }
        }


class PageUpdateRequest(BaseModel):
    """Content and/or icon update; archives the previous version"""
    content: Optional[str] = Field(None, max_length=1_000_000)
    icon: Optional[str] = Field(None, max_length=100)
    change_reason: Optional[str] = Field(None, max_length=500, alias="changeReason")

    class Config:
        populate_by_name = True


class PageRenameRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)


class PageProtectRequest(BaseModel):
    is_protected: bool = Field(..., alias="isProtected")

    class Config:
        populate_by_name = True


class PageCommentsRequest(BaseModel):
    comments_enabled: bool = Field(..., alias="commentsEnabled")

    class Config:
        populate_by_name = True


class SectionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field("", max_length=1_000_000)
    id: Optional[str] = Field(None, max_length=100)


class SectionUpdateRequest(BaseModel):
    content: str = Field(..., max_length=1_000_000)
    title: Optional[str] = Field(None, min_length=1, max_length=200)


class SectionRenameRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class SectionReorderRequest(BaseModel):
    order: List[str] = Field(..., min_length=1)


class PageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    page: Dict[str, Any]


class PageListResponse(BaseModel):
    success: bool = True
    pages: List[Dict[str, Any]]


class HistoryListResponse(BaseModel):
    success: bool = True
    history: List[Dict[str, Any]]


class HistoryDetailResponse(BaseModel):
    success: bool = True
    version: Dict[str, Any]


class SectionListResponse(BaseModel):
    success: bool = True
    sections: List[Dict[str, Any]]


class SectionResponse(PageResponse):
    section: Optional[Dict[str, Any]] = None
    sections: List[Dict[str, Any]]
