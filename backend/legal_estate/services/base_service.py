# legal_estate/services/base_service.py

import asyncio
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic.alias_generators import to_camel

from legal_estate.db.database import Database
from legal_estate.db.models import Case
from legal_estate.utils.exceptions import BadRequestError, CaseNotFoundError, NotFoundError


class BaseService:
    """
    Shared plumbing for entity services.

    Every ``fetch_*`` helper opens its own session so that independent reads
    can be awaited together with ``asyncio.gather``.
    """

    def __init__(self, db: Database):
        self.db = db

    async def fetch_all(self, stmt) -> List[Any]:
        async with self.db.session() as session:
            return list((await session.scalars(stmt)).all())

    async def fetch_first(self, stmt) -> Optional[Any]:
        async with self.db.session() as session:
            return (await session.scalars(stmt)).first()

    async def fetch_scalar(self, stmt) -> Any:
        async with self.db.session() as session:
            return await session.scalar(stmt)

    async def fetch_rows(self, stmt) -> List[Any]:
        async with self.db.session() as session:
            return list((await session.execute(stmt)).all())

    async def count(self, model, *conditions) -> int:
        stmt = select(func.count()).select_from(model).where(*conditions)
        return int(await self.fetch_scalar(stmt) or 0)

    @staticmethod
    async def gather(*aws):
        """Fire all, await all; the first failure fails the whole call."""
        return await asyncio.gather(*aws)

    # ------------------------------------------------------------------------
    # Existence checks
    # ------------------------------------------------------------------------

    async def ensure_case(self, case_id, session: Optional[AsyncSession] = None) -> None:
        stmt = select(Case.id).where(Case.id == case_id)
        if session is not None:
            found = await session.scalar(stmt)
        else:
            found = await self.fetch_scalar(stmt)
        if found is None:
            raise CaseNotFoundError()

    @staticmethod
    async def get_or_404(session: AsyncSession, model: Type, entity_id, message: str):
        instance = await session.get(model, entity_id)
        if instance is None:
            raise NotFoundError(message)
        return instance


def apply_changes(instance, changes: Dict[str, Any]) -> None:
    """
    Copy a partial update onto an ORM instance.

    Only keys present in ``changes`` are touched; an explicit null on a
    NOT NULL column is rejected instead of reaching the database.
    """
    column_attrs = sa_inspect(type(instance)).column_attrs
    for field, value in changes.items():
        attr = column_attrs.get(field)
        if attr is None:
            raise BadRequestError(f"{to_camel(field)} cannot be updated")
        if value is None and not attr.columns[0].nullable:
            raise BadRequestError(f"{to_camel(field)} cannot be null")
        setattr(instance, field, value)
