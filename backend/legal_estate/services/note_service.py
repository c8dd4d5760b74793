# legal_estate/services/note_service.py

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import CaseNote, User
from legal_estate.db.schemas import NoteCreate, NoteFilter, NoteResponse, NoteUpdate
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import NotFoundError
from legal_estate.utils.helpers import enum_value, icontains, page_meta, page_offset, tally, truncate_text

NOTE_NOT_FOUND = "Note not found"


class NoteService(BaseService):

    async def find_all(self, case_id: UUID, filters: NoteFilter) -> dict:
        await self.ensure_case(case_id)

        conditions = [CaseNote.case_id == case_id]
        if filters.type:
            conditions.append(CaseNote.type == filters.type)
        if filters.author_id:
            conditions.append(CaseNote.author_id == filters.author_id)
        if filters.search:
            conditions.append(or_(
                icontains(CaseNote.title, filters.search),
                icontains(CaseNote.content, filters.search),
            ))
        if filters.date_from:
            conditions.append(CaseNote.created_at >= filters.date_from)
        if filters.date_to:
            conditions.append(CaseNote.created_at <= filters.date_to)

        notes, total = await self.gather(
            self.fetch_all(
                select(CaseNote)
                .where(*conditions)
                .options(selectinload(CaseNote.author))
                .order_by(CaseNote.created_at.desc(), CaseNote.id)
                .offset(page_offset(filters.page, filters.limit))
                .limit(filters.limit)
            ),
            self.count(CaseNote, *conditions),
        )
        return {
            "data": [NoteResponse.model_validate(n) for n in notes],
            "meta": page_meta(total, filters.page, filters.limit),
        }

    async def _load(self, note_id: UUID) -> CaseNote:
        note = await self.fetch_first(
            select(CaseNote).where(CaseNote.id == note_id).options(selectinload(CaseNote.author))
        )
        if note is None:
            raise NotFoundError(NOTE_NOT_FOUND)
        return note

    async def find_one(self, note_id: UUID) -> NoteResponse:
        return NoteResponse.model_validate(await self._load(note_id))

    async def create(self, case_id: UUID, payload: NoteCreate, actor: User) -> NoteResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            note = CaseNote(**payload.model_dump(), case_id=case_id, author_id=actor.id)
            session.add(note)

        logger.info(f"Note added to case {case_id} by {actor.email}")
        return NoteResponse.model_validate(await self._load(note.id))

    async def update(self, note_id: UUID, payload: NoteUpdate) -> NoteResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            note = await self.get_or_404(session, CaseNote, note_id, NOTE_NOT_FOUND)
            apply_changes(note, changes)
        return NoteResponse.model_validate(await self._load(note_id))

    async def remove(self, note_id: UUID) -> dict:
        async with self.db.transaction() as session:
            note = await self.get_or_404(session, CaseNote, note_id, NOTE_NOT_FOUND)
            await session.delete(note)
        logger.info(f"Note deleted: {note_id}")
        return {"message": "Note deleted successfully"}

    async def summary(self, case_id: UUID) -> dict:
        await self.ensure_case(case_id)

        total, by_type, recent = await self.gather(
            self.count(CaseNote, CaseNote.case_id == case_id),
            self.fetch_rows(
                select(CaseNote.type, func.count())
                .where(CaseNote.case_id == case_id)
                .group_by(CaseNote.type)
            ),
            self.fetch_all(
                select(CaseNote)
                .where(CaseNote.case_id == case_id)
                .options(selectinload(CaseNote.author))
                .order_by(CaseNote.created_at.desc())
                .limit(5)
            ),
        )
        return {
            "total": total,
            "byType": tally(by_type, lower=True),
            "recentNotes": [
                {
                    "id": str(note.id),
                    "title": note.title or "Untitled Note",
                    "content": truncate_text(note.content, 100),
                    "type": enum_value(note.type),
                    "author": note.author.full_name,
                    "createdAt": note.created_at.isoformat(),
                }
                for note in recent
            ],
        }

    async def timeline(self, case_id: UUID) -> list:
        """Every note on the case, newest first, as timeline entries."""
        await self.ensure_case(case_id)
        notes = await self.fetch_all(
            select(CaseNote)
            .where(CaseNote.case_id == case_id)
            .options(selectinload(CaseNote.author))
            .order_by(CaseNote.created_at.desc(), CaseNote.id)
        )
        return [
            {
                "id": str(note.id),
                "type": "note",
                "title": note.title or f"{enum_value(note.type)} Note",
                "content": note.content,
                "author": note.author.full_name,
                "date": note.created_at.isoformat(),
                "noteType": enum_value(note.type),
            }
            for note in notes
        ]
