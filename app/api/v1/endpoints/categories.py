"""
Category endpoints.

Categories are derived from the labels on the user's tasks; renaming and
deleting apply to every task carrying the label.
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user, get_task_service
from app.models.user import User
from app.schemas.category import CategoryListResponse, CategoryRename, CategoryResponse, CategoryUpdateResponse
from app.services.task_service import TaskService

router = APIRouter()


@router.get("", summary="List the current user's categories with task counts.",
            response_model=CategoryListResponse, )
def list_categories(user: User = Depends(get_current_user), service: TaskService = Depends(get_task_service), ):
    categories = service.get_user_categories(user.id)
    return CategoryListResponse(categories=[CategoryResponse.model_validate(c) for c in categories])


@router.put("/{name}", summary="Rename a category.", response_model=CategoryUpdateResponse, )
def rename_category(name: str, data: CategoryRename, user: User = Depends(get_current_user),
                    service: TaskService = Depends(get_task_service), ):
    updated = service.rename_category(user.id, name, data.new_name)
    return CategoryUpdateResponse(message="Category renamed successfully", tasks_updated=updated)


@router.delete("/{name}", summary="Remove a category from all tasks.", response_model=CategoryUpdateResponse, )
def delete_category(name: str, user: User = Depends(get_current_user),
                    service: TaskService = Depends(get_task_service), ):
    updated = service.delete_category(user.id, name)
    return CategoryUpdateResponse(message="Category deleted successfully", tasks_updated=updated)
