import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any

COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class TagRequest(BaseModel):
    """Create or update a tag"""
    name: str = Field(..., min_length=1, max_length=50)
    color: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Tag name is required")
        return v

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        v = v.strip()
        if not COLOR_PATTERN.match(v):
            raise ValueError("Color must be a hex value like #RGB or #RRGGBB")
        return v

    class Config:
        json_schema_extra = {
            "example": {"name": "Editors", "color": "#112233"}
        }


class PermissionRequest(BaseModel):
    """Create or update a permission"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: str = Field("general", min_length=1, max_length=50)

    @field_validator('name', 'category')
    @classmethod
    def strip_value(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {"name": "edit_pages", "description": "Can edit pages", "category": "pages"}
        }


class TagPermissionsRequest(BaseModel):
    permission_ids: List[int] = Field(..., alias="permissionIds")

    class Config:
        populate_by_name = True


class TagResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    tag: Dict[str, Any]


class TagListResponse(BaseModel):
    success: bool = True
    tags: List[Dict[str, Any]]


class PermissionResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    permission: Dict[str, Any]


class PermissionListResponse(BaseModel):
    success: bool = True
    permissions: List[Dict[str, Any]]


class PermissionsByCategoryResponse(BaseModel):
    success: bool = True
    categories: Dict[str, List[Dict[str, Any]]]
