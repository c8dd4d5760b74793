# legal_estate/services/document_service.py
"""
Case documents: metadata rows in the database, bytes in a DocumentStorage
backend. Files are written before the row and removed again when the
insert does not commit.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from legal_estate.core.config import Settings, settings as default_settings
from legal_estate.core.logger import logger
from legal_estate.db.models import Document, DocumentType, User
from legal_estate.db.schemas import DocumentFilter, DocumentResponse, DocumentUpdate, DocumentWithCase
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.services.storage_service import DocumentStorage
from legal_estate.utils.exceptions import NotFoundError, UploadFailedError
from legal_estate.utils.helpers import icontains, page_meta, page_offset, tally
from legal_estate.utils.validators import validate_upload

DOCUMENT_NOT_FOUND = "Document not found"


class DocumentService(BaseService):

    def __init__(self, db, storage: DocumentStorage, config: Optional[Settings] = None):
        super().__init__(db)
        self.storage = storage
        self.config = config or default_settings

    async def _load(self, document_id: UUID, with_case: bool = False) -> Document:
        options = [selectinload(Document.uploaded_by)]
        if with_case:
            options.append(selectinload(Document.case))
        document = await self.fetch_first(
            select(Document).where(Document.id == document_id).options(*options)
        )
        if document is None:
            raise NotFoundError(DOCUMENT_NOT_FOUND)
        return document

    async def find_all(self, case_id: UUID, filters: DocumentFilter) -> dict:
        await self.ensure_case(case_id)

        conditions = [Document.case_id == case_id]
        if filters.type:
            conditions.append(Document.type == filters.type)
        if filters.category:
            conditions.append(icontains(Document.category, filters.category))
        if filters.search:
            conditions.append(or_(
                icontains(Document.name, filters.search),
                icontains(Document.description, filters.search),
            ))

        documents, total = await self.gather(
            self.fetch_all(
                select(Document)
                .where(*conditions)
                .options(selectinload(Document.uploaded_by))
                .order_by(Document.uploaded_at.desc(), Document.id)
                .offset(page_offset(filters.page, filters.limit))
                .limit(filters.limit)
            ),
            self.count(Document, *conditions),
        )
        return {
            "data": [DocumentResponse.model_validate(d) for d in documents],
            "meta": page_meta(total, filters.page, filters.limit),
        }

    async def upload(
        self,
        case_id: UUID,
        actor: User,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        type: DocumentType,
        name: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> DocumentResponse:
        await self.ensure_case(case_id)
        validate_upload(
            filename,
            content_type,
            len(content),
            self.config.ALLOWED_MIME_TYPES,
            self.config.MAX_UPLOAD_SIZE,
        )

        try:
            stored = await self.storage.save(content, filename, content_type)
        except Exception as e:
            logger.error(f"Storing {filename} for case {case_id} failed: {str(e)}")
            raise UploadFailedError(str(e))

        try:
            async with self.db.transaction() as session:
                await self.ensure_case(case_id, session)
                document = Document(
                    case_id=case_id,
                    name=name or filename,
                    type=type,
                    category=category,
                    description=description,
                    file_path=stored.reference,
                    file_size=stored.size,
                    mime_type=content_type,
                    uploaded_by_id=actor.id,
                )
                session.add(document)
        except Exception:
            await self.storage.delete_quietly(stored.reference)
            raise

        logger.info(f"Document uploaded: {document.name} ({stored.size} bytes) on case {case_id}")
        return DocumentResponse.model_validate(await self._load(document.id))

    async def find_one(self, document_id: UUID) -> DocumentWithCase:
        return DocumentWithCase.model_validate(await self._load(document_id, with_case=True))

    async def update(self, document_id: UUID, payload: DocumentUpdate) -> DocumentResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            document = await self.get_or_404(session, Document, document_id, DOCUMENT_NOT_FOUND)
            apply_changes(document, changes)

        logger.info(f"Document updated: {document_id} fields={sorted(changes)}")
        return DocumentResponse.model_validate(await self._load(document_id))

    async def remove(self, document_id: UUID) -> dict:
        async with self.db.transaction() as session:
            document = await self.get_or_404(session, Document, document_id, DOCUMENT_NOT_FOUND)
            reference = document.file_path
            await session.delete(document)

        await self.storage.delete_quietly(reference)
        logger.info(f"Document deleted: {document_id}")
        return {"message": "Document deleted successfully"}

    async def categories(self, case_id: UUID) -> List[str]:
        await self.ensure_case(case_id)
        return await self.fetch_all(
            select(Document.category)
            .where(Document.case_id == case_id, Document.category.is_not(None))
            .distinct()
            .order_by(Document.category)
        )

    async def summary(self, case_id: UUID) -> dict:
        await self.ensure_case(case_id)

        total, total_size, by_type, by_category = await self.gather(
            self.count(Document, Document.case_id == case_id),
            self.fetch_scalar(
                select(func.coalesce(func.sum(Document.file_size), 0)).where(Document.case_id == case_id)
            ),
            self.fetch_rows(
                select(Document.type, func.count())
                .where(Document.case_id == case_id)
                .group_by(Document.type)
            ),
            self.fetch_rows(
                select(Document.category, func.count())
                .where(Document.case_id == case_id)
                .group_by(Document.category)
            ),
        )
        return {
            "total": total,
            "totalSize": int(total_size or 0),
            "byType": tally(by_type),
            "byCategory": tally(by_category),
        }
