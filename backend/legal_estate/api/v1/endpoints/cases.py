"""
Case management endpoints
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_case_service, get_current_user
from legal_estate.db.models import CaseStatus, CaseType, DocumentType, TaskStatus, User
from legal_estate.db.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    CaseCreate,
    CaseDetail,
    CaseFilter,
    CaseListItem,
    CaseOverview,
    CaseResponse,
    CaseUpdate,
    DocumentResponse,
    MessageResponse,
    Paginated,
    TaskResponse,
    TimelineEntry,
)
from legal_estate.services.case_service import CaseService

router = APIRouter()

# ============================================================================
# List & Filter Endpoints
# ============================================================================

@router.get("/", response_model=Paginated[CaseListItem])
async def list_cases(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Case number, title or client name"),
    case_status: Optional[CaseStatus] = Query(None, alias="status"),
    case_type: Optional[CaseType] = Query(None, alias="caseType"),
    client_id: Optional[UUID] = Query(None, alias="clientId"),
    assigned_to: Optional[UUID] = Query(None, alias="assignedTo"),
    cases: CaseService = Depends(get_case_service),
):
    filters = CaseFilter(
        page=page,
        limit=limit,
        search=search,
        status=case_status,
        case_type=case_type,
        client_id=client_id,
        assigned_to=assigned_to,
    )
    return await cases.find_all(filters)

# ============================================================================
# CRUD
# ============================================================================

@router.post("/", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
async def create_case(
    payload: CaseCreate,
    current_user: User = Depends(get_current_user),
    cases: CaseService = Depends(get_case_service),
):
    """
    Open a case. The creator becomes its Primary Attorney; the case number is
    generated when not supplied.
    """
    return await cases.create_case(payload, current_user)


@router.get("/{case_id}", response_model=CaseDetail)
async def get_case(case_id: UUID, cases: CaseService = Depends(get_case_service)):
    return await cases.find_one(case_id)


@router.get("/{case_id}/overview", response_model=CaseOverview)
async def get_case_overview(case_id: UUID, cases: CaseService = Depends(get_case_service)):
    """Case detail plus bills, document, task and policy statistics."""
    return await cases.overview(case_id)


@router.patch("/{case_id}", response_model=CaseResponse)
async def update_case(
    case_id: UUID,
    payload: CaseUpdate,
    cases: CaseService = Depends(get_case_service),
):
    return await cases.update_case(case_id, payload)


@router.delete("/{case_id}", response_model=MessageResponse)
async def delete_case(case_id: UUID, cases: CaseService = Depends(get_case_service)):
    return await cases.remove_case(case_id)

# ============================================================================
# Assignments
# ============================================================================

@router.post("/{case_id}/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def assign_user(
    case_id: UUID,
    payload: AssignmentCreate,
    cases: CaseService = Depends(get_case_service),
):
    return await cases.assign_user(case_id, payload)


@router.delete("/{case_id}/assignments/{user_id}", response_model=MessageResponse)
async def remove_assignment(
    case_id: UUID,
    user_id: UUID,
    role: Optional[str] = Query(None, description="Only remove this role"),
    cases: CaseService = Depends(get_case_service),
):
    return await cases.remove_assignment(case_id, user_id, role)

# ============================================================================
# Related records
# ============================================================================

@router.get("/{case_id}/tasks", response_model=List[TaskResponse])
async def get_case_tasks(
    case_id: UUID,
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    assigned_to: Optional[UUID] = Query(None, alias="assignedTo"),
    limit: int = Query(20, ge=1, le=100),
    cases: CaseService = Depends(get_case_service),
):
    return await cases.case_tasks(case_id, task_status, assigned_to, limit)


@router.get("/{case_id}/documents", response_model=List[DocumentResponse])
async def get_case_documents(
    case_id: UUID,
    document_type: Optional[DocumentType] = Query(None, alias="type"),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    cases: CaseService = Depends(get_case_service),
):
    return await cases.case_documents(case_id, document_type, category, limit)


@router.get("/{case_id}/timeline", response_model=List[TimelineEntry])
async def get_case_timeline(case_id: UUID, cases: CaseService = Depends(get_case_service)):
    """Recent tasks, notes and uploads, newest first."""
    return await cases.timeline(case_id)
