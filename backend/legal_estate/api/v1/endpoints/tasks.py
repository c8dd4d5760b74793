"""
Case task endpoints
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_current_user, get_task_service
from legal_estate.db.models import TaskPriority, TaskStatus, User
from legal_estate.db.schemas import (
    MessageResponse,
    Paginated,
    TaskAssign,
    TaskCreate,
    TaskFilter,
    TaskResponse,
    TaskUpdate,
    TaskWithCase,
)
from legal_estate.services.task_service import TaskService
from legal_estate.utils.validators import validate_date_range

router = APIRouter()


def task_filters(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    assigned_to: Optional[UUID] = Query(None, alias="assignedTo"),
    due_date_from: Optional[datetime] = Query(None, alias="dueDateFrom"),
    due_date_to: Optional[datetime] = Query(None, alias="dueDateTo"),
) -> TaskFilter:
    validate_date_range(due_date_from, due_date_to, "due date")
    return TaskFilter(
        page=page,
        limit=limit,
        status=task_status,
        priority=priority,
        assigned_to=assigned_to,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )


@router.get("/cases/{case_id}", response_model=Paginated[TaskResponse])
async def list_tasks(
    case_id: UUID,
    filters: TaskFilter = Depends(task_filters),
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.find_all(case_id, filters)


@router.post("/cases/{case_id}", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    case_id: UUID,
    payload: TaskCreate,
    current_user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.create(case_id, payload, current_user)


@router.get("/cases/{case_id}/summary")
async def get_task_summary(case_id: UUID, tasks: TaskService = Depends(get_task_service)):
    """Totals by status and priority plus the overdue count."""
    return await tasks.summary(case_id)


@router.get("/users/{user_id}", response_model=Paginated[TaskWithCase])
async def get_user_tasks(
    user_id: UUID,
    filters: TaskFilter = Depends(task_filters),
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.user_tasks(user_id, filters)


@router.get("/{task_id}", response_model=TaskWithCase)
async def get_task(task_id: UUID, tasks: TaskService = Depends(get_task_service)):
    return await tasks.find_one(task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.update(task_id, payload)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: UUID, tasks: TaskService = Depends(get_task_service)):
    return await tasks.remove(task_id)


@router.patch("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(task_id: UUID, tasks: TaskService = Depends(get_task_service)):
    return await tasks.complete(task_id)


@router.patch("/{task_id}/assign", response_model=TaskResponse)
async def assign_task(
    task_id: UUID,
    payload: TaskAssign,
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.assign(task_id, payload)
