# legal_estate/services/case_service.py
"""
Case CRUD, assignments and the case-level aggregation reads
(overview, timeline, tasks, documents).
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case as sql_case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from legal_estate.core.config import settings
from legal_estate.core.logger import logger
from legal_estate.db.models import (
    Case,
    CaseAssignment,
    CaseNote,
    CaseTask,
    Client,
    Document,
    DocumentType,
    InsurancePolicy,
    MedicalProvider,
    TaskStatus,
    User,
)
from legal_estate.db.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    CaseCounts,
    CaseCreate,
    CaseDetail,
    CaseFilter,
    CaseListItem,
    CaseOverview,
    CaseResponse,
    CaseStatistics,
    CaseUpdate,
    PolicySummary,
    TimelineEntry,
    UserSummary,
)
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.services.storage_service import DocumentStorage
from legal_estate.utils.exceptions import (
    BadRequestError,
    CaseNotFoundError,
    ClientNotFoundError,
    NotFoundError,
    UserNotFoundError,
)
from legal_estate.utils.helpers import days_between, enum_value, icontains, page_meta, page_offset, tally, utcnow

PRIMARY_ATTORNEY_ROLE = "Primary Attorney"
OPEN_TASK_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)

# Declaration order of TaskStatus, used for "order by status"
TASK_STATUS_ORDER = sql_case(
    {status: index for index, status in enumerate(TaskStatus)},
    value=CaseTask.status,
)


def case_response_options():
    """Relation graph returned by create / update"""
    return (
        selectinload(Case.client),
        selectinload(Case.created_by),
        selectinload(Case.assignments).selectinload(CaseAssignment.user),
    )


def task_options():
    return (selectinload(CaseTask.assigned_to), selectinload(CaseTask.created_by))


class CaseService(BaseService):
    """
    Service layer for cases.
    """

    def __init__(self, db, storage: Optional[DocumentStorage] = None):
        super().__init__(db)
        self.storage = storage

    # ========================================================================
    # Case numbers
    # ========================================================================

    @staticmethod
    async def next_case_number(session, year: Optional[int] = None, offset: int = 0) -> str:
        """
        ``LE-<year>-<seq>``: one more than the number of cases already
        carrying this year's prefix, zero padded to three digits.

        Deleted cases leave gaps, so when that number is already in use the
        sequence continues from the highest one taken instead.
        """
        year = year or utcnow().year
        prefix = f"{settings.CASE_NUMBER_PREFIX}-{year}-"
        taken = set((await session.scalars(
            select(Case.case_number).where(Case.case_number.startswith(prefix, autoescape=True))
        )).all())

        candidate = f"{prefix}{len(taken) + 1 + offset:03d}"
        if candidate in taken:
            candidate = f"{prefix}{highest_sequence(taken, prefix) + 1 + offset:03d}"
        return candidate

    # ========================================================================
    # CRUD
    # ========================================================================

    async def create_case(self, payload: CaseCreate, actor: User) -> CaseResponse:
        """
        Insert the case and the creator's "Primary Attorney" assignment in
        one transaction. Generated numbers are retried on a unique-constraint
        clash with a concurrent create.
        """
        attempts = 1 if payload.case_number else max(1, settings.CASE_NUMBER_RETRIES)
        data = payload.model_dump(exclude={"case_number"})

        for attempt in range(attempts):
            try:
                async with self.db.transaction() as session:
                    if await session.get(Client, payload.client_id) is None:
                        raise ClientNotFoundError()

                    if payload.case_number:
                        taken = await session.scalar(
                            select(Case.id).where(Case.case_number == payload.case_number)
                        )
                        if taken is not None:
                            raise BadRequestError("Case number already exists")
                        case_number = payload.case_number
                    else:
                        case_number = await self.next_case_number(session, offset=attempt)

                    case = Case(**data, case_number=case_number, created_by_id=actor.id)
                    session.add(case)
                    await session.flush()
                    session.add(CaseAssignment(case_id=case.id, user_id=actor.id, role=PRIMARY_ATTORNEY_ROLE))
                break
            except IntegrityError:
                if attempt + 1 >= attempts:
                    raise
                logger.warning(f"Case number clash on attempt {attempt + 1}, retrying")

        logger.info(f"Case created: {case.case_number} by {actor.email}")
        return await self.get_case(case.id)

    async def get_case(self, case_id: UUID) -> CaseResponse:
        case = await self.fetch_first(
            select(Case).where(Case.id == case_id).options(*case_response_options())
        )
        if case is None:
            raise CaseNotFoundError()
        return CaseResponse.model_validate(case)

    async def find_all(self, filters: CaseFilter) -> dict:
        conditions = []
        if filters.search:
            term = filters.search
            conditions.append(or_(
                icontains(Case.case_number, term),
                icontains(Case.title, term),
                Case.client.has(or_(icontains(Client.first_name, term), icontains(Client.last_name, term))),
            ))
        if filters.status:
            conditions.append(Case.status == filters.status)
        if filters.case_type:
            conditions.append(Case.case_type == filters.case_type)
        if filters.client_id:
            conditions.append(Case.client_id == filters.client_id)
        if filters.assigned_to:
            conditions.append(Case.assignments.any(CaseAssignment.user_id == filters.assigned_to))

        tasks_count = _child_count(CaseTask)
        documents_count = _child_count(Document)
        providers_count = _child_count(MedicalProvider)

        stmt = (
            select(Case, tasks_count, documents_count, providers_count)
            .where(*conditions)
            .options(
                selectinload(Case.client),
                selectinload(Case.assignments).selectinload(CaseAssignment.user),
            )
            .order_by(Case.created_at.desc(), Case.id)
            .offset(page_offset(filters.page, filters.limit))
            .limit(filters.limit)
        )
        rows, total = await self.gather(
            self.fetch_rows(stmt),
            self.count(Case, *conditions),
        )

        data = [
            CaseListItem.model_validate(case).model_copy(update={
                "counts": CaseCounts(tasks=tasks, documents=documents, medical_providers=providers)
            })
            for case, tasks, documents, providers in rows
        ]
        return {"data": data, "meta": page_meta(total, filters.page, filters.limit)}

    async def _load_detail(self, case_id: UUID) -> Case:
        """Case with full client, creator, assignments, open tasks and latest notes."""
        case = await self.fetch_first(
            select(Case)
            .where(Case.id == case_id)
            .options(
                selectinload(Case.client).selectinload(Client.contacts),
                selectinload(Case.created_by),
                selectinload(Case.assignments).selectinload(CaseAssignment.user),
            )
        )
        if case is None:
            raise CaseNotFoundError()

        open_tasks, recent_notes = await self.gather(
            self.fetch_all(
                select(CaseTask)
                .where(CaseTask.case_id == case_id, CaseTask.status.in_(OPEN_TASK_STATUSES))
                .options(*task_options())
                .order_by(CaseTask.due_date.asc().nulls_last(), CaseTask.created_at)
                .limit(10)
            ),
            self.fetch_all(
                select(CaseNote)
                .where(CaseNote.case_id == case_id)
                .options(selectinload(CaseNote.author))
                .order_by(CaseNote.created_at.desc())
                .limit(5)
            ),
        )
        set_committed_value(case, "tasks", open_tasks)
        set_committed_value(case, "notes", recent_notes)
        return case

    async def find_one(self, case_id: UUID) -> CaseDetail:
        return CaseDetail.model_validate(await self._load_detail(case_id))

    async def update_case(self, case_id: UUID, payload: CaseUpdate) -> CaseResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            case = await session.get(Case, case_id)
            if case is None:
                raise CaseNotFoundError()

            if changes.get("client_id") and changes["client_id"] != case.client_id:
                if await session.get(Client, changes["client_id"]) is None:
                    raise ClientNotFoundError()

            if changes.get("case_number") and changes["case_number"] != case.case_number:
                taken = await session.scalar(select(Case.id).where(Case.case_number == changes["case_number"]))
                if taken is not None:
                    raise BadRequestError("Case number already exists")

            apply_changes(case, changes)

        logger.info(f"Case updated: {case_id} fields={sorted(changes)}")
        return await self.get_case(case_id)

    async def remove_case(self, case_id: UUID) -> dict:
        """
        Hard delete. Dependent rows go with it through ON DELETE CASCADE;
        stored document files are removed once the delete has committed.
        """
        async with self.db.transaction() as session:
            case = await session.get(Case, case_id)
            if case is None:
                raise CaseNotFoundError()
            file_paths = list((await session.scalars(
                select(Document.file_path).where(Document.case_id == case_id)
            )).all())
            await session.delete(case)

        if self.storage is not None:
            for reference in file_paths:
                await self.storage.delete_quietly(reference)

        logger.info(f"Case deleted: {case_id} ({len(file_paths)} stored files removed)")
        return {"message": "Case deleted successfully"}

    # ========================================================================
    # Assignments
    # ========================================================================

    async def assign_user(self, case_id: UUID, payload: AssignmentCreate) -> AssignmentResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            if await session.get(User, payload.user_id) is None:
                raise UserNotFoundError()

            duplicate = await session.scalar(
                select(CaseAssignment.id).where(
                    CaseAssignment.case_id == case_id,
                    CaseAssignment.user_id == payload.user_id,
                    CaseAssignment.role == payload.role,
                )
            )
            if duplicate is not None:
                raise BadRequestError("User already assigned to this role")

            assignment = CaseAssignment(case_id=case_id, user_id=payload.user_id, role=payload.role)
            session.add(assignment)

        logger.info(f"User {payload.user_id} assigned to case {case_id} as {payload.role}")
        assignment = await self.fetch_first(
            select(CaseAssignment)
            .where(CaseAssignment.id == assignment.id)
            .options(selectinload(CaseAssignment.user))
        )
        return AssignmentResponse.model_validate(assignment)

    async def remove_assignment(self, case_id: UUID, user_id: UUID, role: Optional[str] = None) -> dict:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)

            conditions = [CaseAssignment.case_id == case_id, CaseAssignment.user_id == user_id]
            if role:
                conditions.append(CaseAssignment.role == role)
            matches = list((await session.scalars(select(CaseAssignment).where(*conditions))).all())
            if not matches:
                raise NotFoundError("Assignment not found")

            remaining = await session.scalar(
                select(func.count()).select_from(CaseAssignment).where(CaseAssignment.case_id == case_id)
            )
            if remaining - len(matches) < 1:
                raise BadRequestError("A case must keep at least one assignment")

            for assignment in matches:
                await session.delete(assignment)

        logger.info(f"User {user_id} unassigned from case {case_id}")
        return {"message": "Assignment removed successfully"}

    # ========================================================================
    # Related lists
    # ========================================================================

    async def case_tasks(
        self,
        case_id: UUID,
        status: Optional[TaskStatus] = None,
        assigned_to: Optional[UUID] = None,
        limit: int = 20,
    ) -> List[CaseTask]:
        await self.ensure_case(case_id)
        stmt = select(CaseTask).where(CaseTask.case_id == case_id).options(*task_options())
        if status:
            stmt = stmt.where(CaseTask.status == status)
        if assigned_to:
            stmt = stmt.where(CaseTask.assigned_to_id == assigned_to)
        stmt = stmt.order_by(TASK_STATUS_ORDER, CaseTask.due_date.asc().nulls_last()).limit(limit)
        return await self.fetch_all(stmt)

    async def case_documents(
        self,
        case_id: UUID,
        type: Optional[DocumentType] = None,
        category: Optional[str] = None,
        limit: int = 50,
    ) -> List[Document]:
        await self.ensure_case(case_id)
        stmt = (
            select(Document)
            .where(Document.case_id == case_id)
            .options(selectinload(Document.uploaded_by))
        )
        if type:
            stmt = stmt.where(Document.type == type)
        if category:
            stmt = stmt.where(icontains(Document.category, category))
        stmt = stmt.order_by(Document.uploaded_at.desc()).limit(limit)
        return await self.fetch_all(stmt)

    # ========================================================================
    # Aggregations
    # ========================================================================

    async def overview(self, case_id: UUID) -> CaseOverview:
        case = await self._load_detail(case_id)

        total_bills, documents_count, task_rows, policies = await self.gather(
            self.fetch_scalar(
                select(func.coalesce(func.sum(MedicalProvider.total_bills), 0))
                .where(MedicalProvider.case_id == case_id)
            ),
            self.count(Document, Document.case_id == case_id),
            self.fetch_rows(
                select(CaseTask.status, func.count())
                .where(CaseTask.case_id == case_id)
                .group_by(CaseTask.status)
            ),
            self.fetch_all(
                select(InsurancePolicy)
                .where(InsurancePolicy.case_id == case_id)
                .order_by(InsurancePolicy.type)
            ),
        )

        statistics = CaseStatistics(
            total_medical_bills=float(total_bills or 0),
            documents_count=documents_count,
            tasks_stats=tally(task_rows, lower=True),
            insurance_policies=[PolicySummary.model_validate(p) for p in policies],
            case_age=days_between(case.date_of_loss),
        )
        return CaseOverview.model_validate(case).model_copy(update={"statistics": statistics})

    async def timeline(self, case_id: UUID) -> List[TimelineEntry]:
        """
        Latest 10 tasks, 10 notes and 5 documents merged newest first.
        """
        await self.ensure_case(case_id)

        tasks, notes, documents = await self.gather(
            self.fetch_all(
                select(CaseTask)
                .where(CaseTask.case_id == case_id)
                .options(*task_options())
                .order_by(CaseTask.created_at.desc())
                .limit(10)
            ),
            self.fetch_all(
                select(CaseNote)
                .where(CaseNote.case_id == case_id)
                .options(selectinload(CaseNote.author))
                .order_by(CaseNote.created_at.desc())
                .limit(10)
            ),
            self.fetch_all(
                select(Document)
                .where(Document.case_id == case_id)
                .options(selectinload(Document.uploaded_by))
                .order_by(Document.uploaded_at.desc())
                .limit(5)
            ),
        )

        entries = []
        for task in tasks:
            entries.append(TimelineEntry(
                type="task",
                id=task.id,
                title=task.title,
                description=task.description,
                date=task.created_at,
                user=_summary(task.assigned_to or task.created_by),
                status=enum_value(task.status),
            ))
        for note in notes:
            entries.append(TimelineEntry(
                type="note",
                id=note.id,
                title=note.title or "Case Note",
                description=note.content,
                date=note.created_at,
                user=_summary(note.author),
                status="created",
            ))
        for document in documents:
            entries.append(TimelineEntry(
                type="document",
                id=document.id,
                title=document.name,
                description=f"Document uploaded: {enum_value(document.type)}",
                date=document.uploaded_at,
                user=_summary(document.uploaded_by),
                status="uploaded",
            ))

        entries.sort(key=lambda entry: entry.date, reverse=True)
        return entries


def highest_sequence(case_numbers, prefix: str) -> int:
    """Largest numeric suffix among ``case_numbers`` carrying ``prefix``."""
    sequences = [
        int(number[len(prefix):])
        for number in case_numbers
        if number.startswith(prefix) and number[len(prefix):].isdigit()
    ]
    return max(sequences, default=0)


def _child_count(model):
    return (
        select(func.count(model.id))
        .where(model.case_id == Case.id)
        .correlate(Case)
        .scalar_subquery()
    )


def _summary(user: Optional[User]) -> Optional[UserSummary]:
    return UserSummary.model_validate(user) if user is not None else None
