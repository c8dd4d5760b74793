"""
Case note endpoints
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_current_user, get_note_service
from legal_estate.db.models import NoteType, User
from legal_estate.db.schemas import MessageResponse, NoteCreate, NoteFilter, NoteResponse, NoteUpdate, Paginated
from legal_estate.services.note_service import NoteService
from legal_estate.utils.validators import validate_date_range

router = APIRouter()


@router.get("/cases/{case_id}", response_model=Paginated[NoteResponse])
async def list_notes(
    case_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    note_type: Optional[NoteType] = Query(None, alias="type"),
    search: Optional[str] = Query(None, description="Title or content"),
    author_id: Optional[UUID] = Query(None, alias="authorId"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    notes: NoteService = Depends(get_note_service),
):
    validate_date_range(date_from, date_to)
    filters = NoteFilter(
        page=page,
        limit=limit,
        type=note_type,
        search=search,
        author_id=author_id,
        date_from=date_from,
        date_to=date_to,
    )
    return await notes.find_all(case_id, filters)


@router.post("/cases/{case_id}", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    case_id: UUID,
    payload: NoteCreate,
    current_user: User = Depends(get_current_user),
    notes: NoteService = Depends(get_note_service),
):
    return await notes.create(case_id, payload, current_user)


@router.get("/cases/{case_id}/summary")
async def get_notes_summary(case_id: UUID, notes: NoteService = Depends(get_note_service)):
    return await notes.summary(case_id)


@router.get("/cases/{case_id}/timeline")
async def get_notes_timeline(case_id: UUID, notes: NoteService = Depends(get_note_service)):
    return await notes.timeline(case_id)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(note_id: UUID, notes: NoteService = Depends(get_note_service)):
    return await notes.find_one(note_id)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    notes: NoteService = Depends(get_note_service),
):
    return await notes.update(note_id, payload)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(note_id: UUID, notes: NoteService = Depends(get_note_service)):
    return await notes.remove(note_id)
