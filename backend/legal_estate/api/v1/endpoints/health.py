"""
Health and readiness checks: database connectivity and document storage.
"""
import asyncio

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from legal_estate.api.v1.deps import get_db, get_storage
from legal_estate.core.config import settings
from legal_estate.core.logger import logger
from legal_estate.db.database import Database
from legal_estate.services.storage_service import DocumentStorage, LocalDocumentStorage, S3DocumentStorage

router = APIRouter()


async def _check_database(db: Database) -> tuple:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        await db.ping()
        return "ok", "Database reachable"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {str(e)}")
        return "error", f"Database: {str(e)}"


async def _check_storage(storage: DocumentStorage) -> tuple:
    if isinstance(storage, LocalDocumentStorage):
        writable = (storage.root / "documents").is_dir()
        return ("ok", f"Upload directory {storage.root}") if writable else ("error", "Upload directory missing")
    if isinstance(storage, S3DocumentStorage):
        try:
            await asyncio.to_thread(storage.s3.s3_client.head_bucket, Bucket=storage.s3.bucket)
            return "ok", f"Bucket '{storage.s3.bucket}' accessible"
        except (ClientError, BotoCoreError) as e:
            return "error", f"S3: {str(e)}"
    return "ok", type(storage).__name__


@router.get("/")
async def health():
    return {"status": "healthy", "version": settings.APP_VERSION}


@router.get("/ready")
async def readiness(db: Database = Depends(get_db), storage: DocumentStorage = Depends(get_storage)):
    """
    Check that the database answers and document storage is usable.
    """
    (db_status, db_detail), (storage_status, storage_detail) = await asyncio.gather(
        _check_database(db), _check_storage(storage)
    )
    healthy = db_status == "ok" and storage_status == "ok"
    return {
        "status": "healthy" if healthy else "degraded",
        "database": {"status": db_status, "detail": db_detail},
        "storage": {"status": storage_status, "detail": storage_detail},
    }
