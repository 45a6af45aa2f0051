"""Pydantic schemas for category endpoints."""

from typing import List

from app.schemas.base import CamelModel


class CategoryResponse(CamelModel):
    name: str
    task_count: int


class CategoryListResponse(CamelModel):
    categories: List[CategoryResponse]


class CategoryRename(CamelModel):
    """Schema for renaming a category across all of the user's tasks."""
    new_name: str


class CategoryUpdateResponse(CamelModel):
    message: str
    tasks_updated: int
