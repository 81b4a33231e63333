from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class ActivityCreateRequest(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=50)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ActivityResponse(BaseModel):
    success: bool = True
    activity: Dict[str, Any]


class ActivityListResponse(BaseModel):
    success: bool = True
    activities: List[Dict[str, Any]]


class PaginatedActivityResponse(ActivityListResponse):
    page: int
    limit: int
    total: int
    has_more: bool = Field(..., serialization_alias="hasMore")
