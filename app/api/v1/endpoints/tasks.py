"""
Task endpoints.

CRUD for the current user's tasks, plus soft-delete and restore.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_task_service
from app.models.task import TaskFilters
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.task import TaskCompletionUpdate, TaskCreate, TaskListResponse, TaskResponse
from app.services.task_service import TaskService

router = APIRouter()

DEFAULT_PAGE_SIZE = 100


@router.get("", summary="List the current user's tasks.", response_model=TaskListResponse, )
def list_tasks(category: Optional[str] = Query(None, description="Exact category label"),
               completed: Optional[bool] = Query(None, description="Only completed (true) or open (false) tasks"),
               include_deleted: bool = Query(False, alias="includeDeleted", description="Include soft-deleted tasks"),
               limit: int = Query(DEFAULT_PAGE_SIZE, description="Page size, 0-1000 (0 = no limit)"),
               offset: int = Query(0, description="Number of tasks to skip"),
               user: User = Depends(get_current_user), service: TaskService = Depends(get_task_service), ):
    filters = TaskFilters(category=category or None, completed=completed, include_deleted=include_deleted,
                          limit=limit, offset=offset, )
    tasks = service.list_tasks(user.id, filters)
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks], total=len(tasks))


@router.post("", summary="Create a task.", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, )
def create_task(data: TaskCreate, user: User = Depends(get_current_user),
                service: TaskService = Depends(get_task_service), ):
    task = service.create_task(user.id, data.description, data.category)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", summary="Get a task.", response_model=TaskResponse, )
def get_task(task_id: str, user: User = Depends(get_current_user), service: TaskService = Depends(get_task_service), ):
    return TaskResponse.model_validate(service.get_task_by_id(user.id, task_id))


@router.put("/{task_id}/complete", summary="Set a task's completion state.", response_model=TaskResponse, )
def update_task_completion(task_id: str, data: TaskCompletionUpdate, user: User = Depends(get_current_user),
                           service: TaskService = Depends(get_task_service), ):
    task = service.update_task_completion(user.id, task_id, data.completed)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", summary="Soft-delete a task.", response_model=MessageResponse, )
def delete_task(task_id: str, user: User = Depends(get_current_user),
                service: TaskService = Depends(get_task_service), ):
    service.soft_delete_task(user.id, task_id)
    return MessageResponse(message="Task deleted successfully")


@router.post("/{task_id}/restore", summary="Restore a soft-deleted task.", response_model=TaskResponse, )
def restore_task(task_id: str, user: User = Depends(get_current_user),
                 service: TaskService = Depends(get_task_service), ):
    task = service.restore_task(user.id, task_id)
    return TaskResponse.model_validate(task)
