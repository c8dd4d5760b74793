# legal_estate/services/storage_service.py
"""
Document storage backends.

Services only see ``save(content, filename, content_type) -> StoredFile`` and
``delete(reference)``; the reference is whatever the backend needs to find the
bytes again and is what gets persisted as ``Document.file_path``.
"""
import asyncio
import os
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from legal_estate.core.config import Settings
from legal_estate.core.logger import logger
from legal_estate.services.s3_service import S3Service


@dataclass(frozen=True)
class StoredFile:
    reference: str
    size: int


def generate_file_name(original_name: str) -> str:
    """``<epoch-ms>-<random><ext>``, keeping the original extension."""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


class DocumentStorage(ABC):

    @abstractmethod
    async def save(self, content: bytes, filename: str, content_type: str) -> StoredFile:
        ...

    @abstractmethod
    async def delete(self, reference: str) -> None:
        ...

    async def delete_quietly(self, reference: str) -> None:
        """Best-effort removal used for cleanup after a failed or finished write."""
        try:
            await self.delete(reference)
        except Exception as e:
            logger.warning(f"Could not remove stored file {reference}: {str(e)}")


class LocalDocumentStorage(DocumentStorage):
    """Files under ``<root>/documents``, served from ``<url_prefix>/documents``."""

    def __init__(self, root_dir: str, url_prefix: str = "/uploads"):
        self.root = Path(root_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        (self.root / "documents").mkdir(parents=True, exist_ok=True)

    def _path_for(self, reference: str) -> Path:
        if not reference.startswith(self.url_prefix + "/"):
            raise ValueError(f"Not a local document reference: {reference}")
        relative = reference[len(self.url_prefix) + 1:]
        path = (self.root / relative).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Reference escapes the upload directory: {reference}")
        return path

    async def save(self, content: bytes, filename: str, content_type: str) -> StoredFile:
        name = generate_file_name(filename)
        path = self.root / "documents" / name
        await asyncio.to_thread(path.write_bytes, content)
        logger.info(f"Stored document {name} ({len(content)} bytes)")
        return StoredFile(reference=f"{self.url_prefix}/documents/{name}", size=len(content))

    async def delete(self, reference: str) -> None:
        path = self._path_for(reference)
        await asyncio.to_thread(path.unlink, True)
        logger.info(f"Removed document file {path.name}")


class S3DocumentStorage(DocumentStorage):
    """Objects under ``s3://<bucket>/<prefix>/``."""

    def __init__(self, s3: S3Service, prefix: str = "documents"):
        self.s3 = s3
        self.prefix = prefix.strip("/")

    def _key_for(self, reference: str) -> str:
        marker = f"s3://{self.s3.bucket}/"
        if not reference.startswith(marker):
            raise ValueError(f"Not an S3 document reference: {reference}")
        return reference[len(marker):]

    async def save(self, content: bytes, filename: str, content_type: str) -> StoredFile:
        key = f"{self.prefix}/{generate_file_name(filename)}"
        await asyncio.to_thread(self.s3.upload_bytes, key, content, content_type)
        return StoredFile(reference=f"s3://{self.s3.bucket}/{key}", size=len(content))

    async def delete(self, reference: str) -> None:
        await asyncio.to_thread(self.s3.delete_object, self._key_for(reference))


def build_storage(config: Settings) -> DocumentStorage:
    if config.STORAGE_BACKEND == "s3":
        logger.info(f"Document storage: s3://{config.S3_BUCKET_NAME}/{config.S3_PREFIX}")
        return S3DocumentStorage(S3Service(bucket=config.S3_BUCKET_NAME), prefix=config.S3_PREFIX)
    logger.info(f"Document storage: local directory {config.UPLOAD_DIR}")
    return LocalDocumentStorage(config.UPLOAD_DIR, config.UPLOAD_URL_PREFIX)
