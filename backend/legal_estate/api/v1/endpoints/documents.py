"""
Document endpoints

Uploads arrive as multipart form data; bytes go to the configured storage
backend and the metadata row is written after the file is stored.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from legal_estate.api.v1.deps import get_current_user, get_document_service
from legal_estate.db.models import DocumentType, User
from legal_estate.db.schemas import (
    DocumentFilter,
    DocumentResponse,
    DocumentUpdate,
    DocumentWithCase,
    MessageResponse,
    Paginated,
)
from legal_estate.services.document_service import DocumentService

router = APIRouter()


@router.get("/cases/{case_id}", response_model=Paginated[DocumentResponse])
async def list_documents(
    case_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    document_type: Optional[DocumentType] = Query(None, alias="type"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Name or description"),
    documents: DocumentService = Depends(get_document_service),
):
    filters = DocumentFilter(page=page, limit=limit, type=document_type, category=category, search=search)
    return await documents.find_all(case_id, filters)


@router.post("/cases/{case_id}", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    case_id: UUID,
    document_type: DocumentType = Form(..., alias="type"),
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    documents: DocumentService = Depends(get_document_service),
):
    content = await file.read() if file is not None else b""
    return await documents.upload(
        case_id,
        current_user,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        content=content,
        type=document_type,
        name=name,
        category=category,
        description=description,
    )


@router.get("/cases/{case_id}/categories", response_model=List[str])
async def get_categories(case_id: UUID, documents: DocumentService = Depends(get_document_service)):
    return await documents.categories(case_id)


@router.get("/cases/{case_id}/summary")
async def get_document_summary(case_id: UUID, documents: DocumentService = Depends(get_document_service)):
    return await documents.summary(case_id)


@router.get("/{document_id}", response_model=DocumentWithCase)
async def get_document(document_id: UUID, documents: DocumentService = Depends(get_document_service)):
    return await documents.find_one(document_id)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: UUID,
    payload: DocumentUpdate,
    documents: DocumentService = Depends(get_document_service),
):
    return await documents.update(document_id, payload)


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(document_id: UUID, documents: DocumentService = Depends(get_document_service)):
    """Removes the row and the stored file."""
    return await documents.remove(document_id)
