from pydantic import BaseModel
from typing import Optional, TypeVar, Generic

T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """Standard success response"""
    success: bool = True
    message: str = "Operation completed successfully"
    data: Optional[T] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Page deleted successfully",
                "data": None
            }
        }


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    message: str
    status_code: int
    path: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Page not found",
                "status_code": 404,
                "path": "/api/wiki/42"
            }
        }


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    service: str = "open-book-wiki-api"
    version: str
    environment: str
    timestamp: str
    database: str = "connected"

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "service": "open-book-wiki-api",
                "version": "1.0.0",
                "environment": "development",
                "timestamp": "2024-01-01T12:00:00Z",
                "database": "connected"
            }
        }
