# legal_estate/services/task_service.py

from typing import Optional
from uuid import UUID

from sqlalchemy import case as sql_case, func, select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import CaseTask, TaskPriority, TaskStatus, User
from legal_estate.db.schemas import TaskAssign, TaskCreate, TaskFilter, TaskResponse, TaskUpdate, TaskWithCase
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.services.case_service import TASK_STATUS_ORDER, task_options
from legal_estate.utils.exceptions import BadRequestError, NotFoundError, UserNotFoundError
from legal_estate.utils.helpers import page_meta, page_offset, tally, utcnow

TASK_NOT_FOUND = "Task not found"
CLOSED_TASK_STATUSES = (TaskStatus.COMPLETED, TaskStatus.CANCELLED)

TASK_PRIORITY_ORDER = sql_case(
    {priority: index for index, priority in enumerate(TaskPriority)},
    value=CaseTask.priority,
)

# status, most urgent first, earliest due date first
TASK_LIST_ORDER = (TASK_STATUS_ORDER, TASK_PRIORITY_ORDER.desc(), CaseTask.due_date.asc().nulls_last())


def _task_conditions(filters: TaskFilter) -> list:
    conditions = []
    if filters.status:
        conditions.append(CaseTask.status == filters.status)
    if filters.priority:
        conditions.append(CaseTask.priority == filters.priority)
    if filters.due_date_from:
        conditions.append(CaseTask.due_date >= filters.due_date_from)
    if filters.due_date_to:
        conditions.append(CaseTask.due_date <= filters.due_date_to)
    return conditions


class TaskService(BaseService):

    async def _paginate(self, conditions: list, filters: TaskFilter, *options) -> dict:
        tasks, total = await self.gather(
            self.fetch_all(
                select(CaseTask)
                .where(*conditions)
                .options(*options)
                .order_by(*TASK_LIST_ORDER, CaseTask.id)
                .offset(page_offset(filters.page, filters.limit))
                .limit(filters.limit)
            ),
            self.count(CaseTask, *conditions),
        )
        return {"tasks": tasks, "meta": page_meta(total, filters.page, filters.limit)}

    async def find_all(self, case_id: UUID, filters: TaskFilter) -> dict:
        await self.ensure_case(case_id)
        conditions = [CaseTask.case_id == case_id, *_task_conditions(filters)]
        if filters.assigned_to:
            conditions.append(CaseTask.assigned_to_id == filters.assigned_to)

        page = await self._paginate(conditions, filters, *task_options())
        return {"data": [TaskResponse.model_validate(t) for t in page["tasks"]], "meta": page["meta"]}

    async def user_tasks(self, user_id: UUID, filters: TaskFilter) -> dict:
        conditions = [CaseTask.assigned_to_id == user_id, *_task_conditions(filters)]
        page = await self._paginate(conditions, filters, *task_options(), selectinload(CaseTask.case))
        return {"data": [TaskWithCase.model_validate(t) for t in page["tasks"]], "meta": page["meta"]}

    async def _load(self, task_id: UUID, with_case: bool = False) -> CaseTask:
        options = list(task_options())
        if with_case:
            options.append(selectinload(CaseTask.case))
        task = await self.fetch_first(select(CaseTask).where(CaseTask.id == task_id).options(*options))
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def find_one(self, task_id: UUID) -> TaskWithCase:
        return TaskWithCase.model_validate(await self._load(task_id, with_case=True))

    @staticmethod
    async def _check_user(session, user_id: Optional[UUID]) -> None:
        if user_id is not None and await session.get(User, user_id) is None:
            raise UserNotFoundError()

    async def create(self, case_id: UUID, payload: TaskCreate, actor: User) -> TaskResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            await self._check_user(session, payload.assigned_to_id)
            task = CaseTask(**payload.model_dump(), case_id=case_id, created_by_id=actor.id)
            if task.status == TaskStatus.COMPLETED:
                task.completed_at = utcnow()
            session.add(task)

        logger.info(f"Task created on case {case_id}: {task.title}")
        return TaskResponse.model_validate(await self._load(task.id))

    async def update(self, task_id: UUID, payload: TaskUpdate) -> TaskResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            task = await self.get_or_404(session, CaseTask, task_id, TASK_NOT_FOUND)
            if "assigned_to_id" in changes:
                await self._check_user(session, changes["assigned_to_id"])
            apply_changes(task, changes)
            if "status" in changes:
                task.completed_at = utcnow() if task.status == TaskStatus.COMPLETED else None

        logger.info(f"Task updated: {task_id} fields={sorted(changes)}")
        return TaskResponse.model_validate(await self._load(task_id))

    async def remove(self, task_id: UUID) -> dict:
        async with self.db.transaction() as session:
            task = await self.get_or_404(session, CaseTask, task_id, TASK_NOT_FOUND)
            await session.delete(task)
        logger.info(f"Task deleted: {task_id}")
        return {"message": "Task deleted successfully"}

    async def complete(self, task_id: UUID) -> TaskResponse:
        async with self.db.transaction() as session:
            task = await self.get_or_404(session, CaseTask, task_id, TASK_NOT_FOUND)
            if task.status == TaskStatus.COMPLETED:
                raise BadRequestError("Task is already completed")
            task.status = TaskStatus.COMPLETED
            task.completed_at = utcnow()

        logger.info(f"Task completed: {task_id}")
        return TaskResponse.model_validate(await self._load(task_id))

    async def assign(self, task_id: UUID, payload: TaskAssign) -> TaskResponse:
        async with self.db.transaction() as session:
            task = await self.get_or_404(session, CaseTask, task_id, TASK_NOT_FOUND)
            await self._check_user(session, payload.user_id)
            task.assigned_to_id = payload.user_id

        logger.info(f"Task {task_id} assigned to {payload.user_id}")
        return TaskResponse.model_validate(await self._load(task_id))

    async def summary(self, case_id: UUID) -> dict:
        await self.ensure_case(case_id)

        total, overdue, by_status, by_priority = await self.gather(
            self.count(CaseTask, CaseTask.case_id == case_id),
            self.count(
                CaseTask,
                CaseTask.case_id == case_id,
                CaseTask.due_date < utcnow(),
                CaseTask.status.not_in(CLOSED_TASK_STATUSES),
            ),
            self.fetch_rows(
                select(CaseTask.status, func.count())
                .where(CaseTask.case_id == case_id)
                .group_by(CaseTask.status)
            ),
            self.fetch_rows(
                select(CaseTask.priority, func.count())
                .where(CaseTask.case_id == case_id)
                .group_by(CaseTask.priority)
            ),
        )
        return {
            "total": total,
            "overdue": overdue,
            "byStatus": tally(by_status, lower=True),
            "byPriority": tally(by_priority, lower=True),
        }
