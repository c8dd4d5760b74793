# legal_estate/services/medical_service.py
"""
Medical providers, records and injuries.

``MedicalProvider.total_bills`` is derived data: every record write
recomputes it for the affected provider(s) inside the same transaction.
"""
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import Injury, MedicalProvider, MedicalRecord
from legal_estate.db.schemas import (
    InjuryCreate,
    InjuryResponse,
    InjuryUpdate,
    ProviderCreate,
    ProviderResponse,
    ProviderUpdate,
    ProviderWithRecords,
    RecordCreate,
    RecordFilter,
    RecordResponse,
    RecordUpdate,
)
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import NotFoundError
from legal_estate.utils.helpers import enum_value

PROVIDER_NOT_FOUND = "Medical provider not found"


async def recompute_total_bills(session: AsyncSession, provider_ids: Iterable[Optional[UUID]]) -> None:
    """Set each provider's total_bills to the sum of its current record costs."""
    for provider_id in {pid for pid in provider_ids if pid is not None}:
        total = await session.scalar(
            select(func.coalesce(func.sum(MedicalRecord.cost), 0))
            .where(MedicalRecord.provider_id == provider_id)
        )
        await session.execute(
            update(MedicalProvider)
            .where(MedicalProvider.id == provider_id)
            .values(total_bills=float(total or 0))
            .execution_options(synchronize_session=False)
        )


class MedicalService(BaseService):

    # ========================================================================
    # Providers
    # ========================================================================

    async def get_providers(self, case_id: UUID) -> List[ProviderWithRecords]:
        await self.ensure_case(case_id)
        providers = await self.fetch_all(
            select(MedicalProvider)
            .where(MedicalProvider.case_id == case_id)
            .options(selectinload(MedicalProvider.medical_records))
            .order_by(MedicalProvider.date_first_seen.asc().nulls_last(), MedicalProvider.created_at)
        )
        result = []
        for provider in providers:
            provider.medical_records.sort(key=lambda r: r.date, reverse=True)
            result.append(
                ProviderWithRecords.model_validate(provider).model_copy(
                    update={"record_count": len(provider.medical_records)}
                )
            )
        return result

    async def create_provider(self, case_id: UUID, payload: ProviderCreate) -> ProviderResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            provider = MedicalProvider(**payload.model_dump(), case_id=case_id, total_bills=0)
            session.add(provider)
        logger.info(f"Medical provider created: {provider.name} on case {case_id}")
        return ProviderResponse.model_validate(provider)

    async def update_provider(self, provider_id: UUID, payload: ProviderUpdate) -> ProviderResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            provider = await self.get_or_404(session, MedicalProvider, provider_id, PROVIDER_NOT_FOUND)
            apply_changes(provider, changes)
        logger.info(f"Medical provider updated: {provider_id}")
        return ProviderResponse.model_validate(provider)

    async def delete_provider(self, provider_id: UUID) -> dict:
        """Records survive with their provider link cleared."""
        async with self.db.transaction() as session:
            provider = await self.get_or_404(session, MedicalProvider, provider_id, PROVIDER_NOT_FOUND)
            await session.delete(provider)
        logger.info(f"Medical provider deleted: {provider_id}")
        return {"message": "Medical provider deleted successfully"}

    # ========================================================================
    # Records
    # ========================================================================

    async def get_records(self, case_id: UUID, filters: RecordFilter) -> List[MedicalRecord]:
        await self.ensure_case(case_id)
        stmt = (
            select(MedicalRecord)
            .where(MedicalRecord.case_id == case_id)
            .options(selectinload(MedicalRecord.provider))
        )
        if filters.provider_id:
            stmt = stmt.where(MedicalRecord.provider_id == filters.provider_id)
        if filters.type:
            stmt = stmt.where(MedicalRecord.type == filters.type)
        if filters.bill_received is not None:
            stmt = stmt.where(MedicalRecord.bill_received.is_(filters.bill_received))
        if filters.records_received is not None:
            stmt = stmt.where(MedicalRecord.records_received.is_(filters.records_received))
        return await self.fetch_all(stmt.order_by(MedicalRecord.date.desc(), MedicalRecord.created_at.desc()))

    @staticmethod
    async def _check_provider(session: AsyncSession, provider_id: Optional[UUID], case_id: UUID) -> None:
        if provider_id is None:
            return
        owner = await session.scalar(select(MedicalProvider.case_id).where(MedicalProvider.id == provider_id))
        if owner is None or owner != case_id:
            raise NotFoundError(PROVIDER_NOT_FOUND)

    async def _record_response(self, record_id: UUID) -> RecordResponse:
        record = await self.fetch_first(
            select(MedicalRecord)
            .where(MedicalRecord.id == record_id)
            .options(selectinload(MedicalRecord.provider))
        )
        return RecordResponse.model_validate(record)

    async def create_record(self, case_id: UUID, payload: RecordCreate) -> RecordResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            await self._check_provider(session, payload.provider_id, case_id)
            record = MedicalRecord(**payload.model_dump(), case_id=case_id)
            session.add(record)
            await session.flush()
            await recompute_total_bills(session, [record.provider_id])

        logger.info(f"Medical record created: {record.id} cost={record.cost}")
        return await self._record_response(record.id)

    async def update_record(self, record_id: UUID, payload: RecordUpdate) -> RecordResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            record = await self.get_or_404(session, MedicalRecord, record_id, "Medical record not found")
            previous_provider = record.provider_id
            if "provider_id" in changes:
                await self._check_provider(session, changes["provider_id"], record.case_id)
            apply_changes(record, changes)
            await session.flush()
            if "cost" in changes or "provider_id" in changes:
                await recompute_total_bills(session, [previous_provider, record.provider_id])

        logger.info(f"Medical record updated: {record_id} fields={sorted(changes)}")
        return await self._record_response(record_id)

    async def delete_record(self, record_id: UUID) -> dict:
        async with self.db.transaction() as session:
            record = await self.get_or_404(session, MedicalRecord, record_id, "Medical record not found")
            provider_id = record.provider_id
            await session.delete(record)
            await session.flush()
            await recompute_total_bills(session, [provider_id])

        logger.info(f"Medical record deleted: {record_id}")
        return {"message": "Medical record deleted successfully"}

    # ========================================================================
    # Injuries
    # ========================================================================

    async def get_injuries(self, case_id: UUID) -> List[Injury]:
        await self.ensure_case(case_id)
        return await self.fetch_all(
            select(Injury)
            .where(Injury.case_id == case_id)
            .order_by(Injury.date_reported.asc().nulls_last(), Injury.created_at)
        )

    async def create_injury(self, case_id: UUID, payload: InjuryCreate) -> InjuryResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            injury = Injury(**payload.model_dump(), case_id=case_id)
            session.add(injury)
        logger.info(f"Injury recorded: {injury.body_part} ({enum_value(injury.severity)}) on case {case_id}")
        return InjuryResponse.model_validate(injury)

    async def update_injury(self, injury_id: UUID, payload: InjuryUpdate) -> InjuryResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            injury = await self.get_or_404(session, Injury, injury_id, "Injury not found")
            apply_changes(injury, changes)
        return InjuryResponse.model_validate(injury)

    async def delete_injury(self, injury_id: UUID) -> dict:
        async with self.db.transaction() as session:
            injury = await self.get_or_404(session, Injury, injury_id, "Injury not found")
            await session.delete(injury)
        logger.info(f"Injury deleted: {injury_id}")
        return {"message": "Injury deleted successfully"}

    # ========================================================================
    # Summary
    # ========================================================================

    async def summary(self, case_id: UUID) -> dict:
        await self.ensure_case(case_id)

        provider_count, record_count, injury_rows, total_bills = await self.gather(
            self.count(MedicalProvider, MedicalProvider.case_id == case_id),
            self.count(MedicalRecord, MedicalRecord.case_id == case_id),
            self.fetch_rows(
                select(Injury.severity, Injury.resolved, func.count())
                .where(Injury.case_id == case_id)
                .group_by(Injury.severity, Injury.resolved)
            ),
            self.fetch_scalar(
                select(func.coalesce(func.sum(MedicalProvider.total_bills), 0))
                .where(MedicalProvider.case_id == case_id)
            ),
        )

        by_severity = {}
        resolved_total = 0
        for severity, resolved, count in injury_rows:
            bucket = by_severity.setdefault(enum_value(severity), {"total": 0, "resolved": 0, "active": 0})
            bucket["total"] += count
            bucket["resolved" if resolved else "active"] += count
            if resolved:
                resolved_total += count
        injury_total = sum(bucket["total"] for bucket in by_severity.values())

        return {
            "providers": {"total": provider_count},
            "records": {"total": record_count},
            "injuries": {
                "total": injury_total,
                "resolved": resolved_total,
                "active": injury_total - resolved_total,
                "bySeverity": by_severity,
            },
            "financials": {"totalMedicalBills": float(total_bills or 0)},
        }
