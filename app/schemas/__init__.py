"""Pydantic schemas for request/response validation."""

from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.user import LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest, UserResponse
from app.schemas.task import TaskCompletionUpdate, TaskCreate, TaskListResponse, TaskResponse
from app.schemas.category import CategoryListResponse, CategoryRename, CategoryResponse, CategoryUpdateResponse

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "LoginRequest",
    "PasswordChange",
    "ProfileUpdate",
    "RegisterRequest",
    "UserResponse",
    "TaskCompletionUpdate",
    "TaskCreate",
    "TaskListResponse",
    "TaskResponse",
    "CategoryListResponse",
    "CategoryRename",
    "CategoryResponse",
    "CategoryUpdateResponse",
]
