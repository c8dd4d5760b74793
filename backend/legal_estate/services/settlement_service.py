# legal_estate/services/settlement_service.py
"""
Settlements and liens on a case, plus the recovery analysis and the
rule-of-thumb settlement estimate built on top of them.
"""
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import InsuranceClaim, InsurancePolicy, Lien, MedicalProvider, Settlement
from legal_estate.db.schemas import (
    EstimatedValue,
    ExpenseTotals,
    LienCreate,
    LienFilter,
    LienResponse,
    LienTotals,
    LienUpdate,
    SettlementAnalysis,
    SettlementCalculation,
    SettlementCreate,
    SettlementDeductions,
    SettlementDetail,
    SettlementFilter,
    SettlementResponse,
    SettlementTotals,
    SettlementUpdate,
)
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import BadRequestError, NotFoundError
from legal_estate.utils.helpers import utcnow

SETTLEMENT_NOT_FOUND = "Settlement not found"
LIEN_NOT_FOUND = "Lien not found"

PAIN_AND_SUFFERING_MULTIPLIER = 3
ATTORNEY_FEE_RATE = 0.3333
COST_RATE = 0.05

# (upper bound on total damages, recommendation); the last entry has no bound
RECOMMENDATIONS = (
    (10000, "Consider small claims court or direct negotiation with insurance"),
    (50000, "Good candidate for settlement negotiation with insurance company"),
    (100000, "Consider formal demand letter and mediation if initial offer is low"),
    (None, "High-value case - consider litigation if settlement offers are inadequate"),
)


def settlement_recommendation(total_damages: float) -> str:
    for bound, text in RECOMMENDATIONS:
        if bound is None or total_damages < bound:
            return text


class SettlementService(BaseService):

    # ========================================================================
    # Settlements
    # ========================================================================

    async def get_settlements(self, case_id: UUID, filters: SettlementFilter) -> List[SettlementResponse]:
        await self.ensure_case(case_id)
        return await self._settlements(case_id, filters)

    async def _settlements(self, case_id: UUID, filters: SettlementFilter) -> List[SettlementResponse]:
        stmt = select(Settlement).where(Settlement.case_id == case_id)
        if filters.type:
            stmt = stmt.where(Settlement.type == filters.type)
        if filters.status:
            stmt = stmt.where(Settlement.status == filters.status)
        settlements = await self.fetch_all(
            stmt.order_by(Settlement.date.desc().nulls_last(), Settlement.created_at.desc())
        )
        return [SettlementResponse.model_validate(s) for s in settlements]

    async def get_settlement(self, settlement_id: UUID) -> SettlementDetail:
        settlement = await self.fetch_first(
            select(Settlement)
            .where(Settlement.id == settlement_id)
            .options(selectinload(Settlement.case))
        )
        if settlement is None:
            raise NotFoundError(SETTLEMENT_NOT_FOUND)
        return SettlementDetail.model_validate(settlement)

    async def create_settlement(self, case_id: UUID, payload: SettlementCreate) -> SettlementResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            settlement = Settlement(**payload.model_dump(), case_id=case_id)
            session.add(settlement)

        logger.info(f"Settlement {settlement.type.value} of {settlement.amount} recorded on case {case_id}")
        return SettlementResponse.model_validate(settlement)

    async def update_settlement(self, settlement_id: UUID, payload: SettlementUpdate) -> SettlementResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            settlement = await self.get_or_404(session, Settlement, settlement_id, SETTLEMENT_NOT_FOUND)
            apply_changes(settlement, changes)

        logger.info(f"Settlement updated: {settlement_id} fields={sorted(changes)}")
        return SettlementResponse.model_validate(settlement)

    async def delete_settlement(self, settlement_id: UUID) -> dict:
        async with self.db.transaction() as session:
            settlement = await self.get_or_404(session, Settlement, settlement_id, SETTLEMENT_NOT_FOUND)
            await session.delete(settlement)
        logger.info(f"Settlement deleted: {settlement_id}")
        return {"message": "Settlement deleted successfully"}

    # ========================================================================
    # Liens
    # ========================================================================

    async def get_liens(self, case_id: UUID, filters: LienFilter) -> List[LienResponse]:
        await self.ensure_case(case_id)
        return await self._liens(case_id, filters)

    async def _liens(self, case_id: UUID, filters: LienFilter) -> List[LienResponse]:
        stmt = select(Lien).where(Lien.case_id == case_id)
        if filters.type:
            stmt = stmt.where(Lien.type == filters.type)
        if filters.resolved is not None:
            stmt = stmt.where(Lien.resolved == filters.resolved)
        # Open liens first, largest first
        liens = await self.fetch_all(stmt.order_by(Lien.resolved.asc(), Lien.amount.desc()))
        return [LienResponse.model_validate(lien) for lien in liens]

    async def create_lien(self, case_id: UUID, payload: LienCreate) -> LienResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            lien = Lien(**payload.model_dump(), case_id=case_id)
            if lien.resolved:
                lien.resolved_at = utcnow()
            session.add(lien)

        logger.info(f"Lien from {lien.creditor} ({lien.amount}) recorded on case {case_id}")
        return LienResponse.model_validate(lien)

    async def update_lien(self, lien_id: UUID, payload: LienUpdate) -> LienResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            lien = await self.get_or_404(session, Lien, lien_id, LIEN_NOT_FOUND)
            was_resolved = lien.resolved
            apply_changes(lien, changes)
            if lien.resolved and not was_resolved:
                lien.resolved_at = utcnow()
            elif not lien.resolved:
                lien.resolved_at = None

        logger.info(f"Lien updated: {lien_id} fields={sorted(changes)}")
        return LienResponse.model_validate(lien)

    async def resolve_lien(self, lien_id: UUID) -> LienResponse:
        async with self.db.transaction() as session:
            lien = await self.get_or_404(session, Lien, lien_id, LIEN_NOT_FOUND)
            if lien.resolved:
                raise BadRequestError("Lien is already resolved")
            lien.resolved = True
            lien.resolved_at = utcnow()

        logger.info(f"Lien resolved: {lien_id}")
        return LienResponse.model_validate(lien)

    async def delete_lien(self, lien_id: UUID) -> dict:
        async with self.db.transaction() as session:
            lien = await self.get_or_404(session, Lien, lien_id, LIEN_NOT_FOUND)
            await session.delete(lien)
        logger.info(f"Lien deleted: {lien_id}")
        return {"message": "Lien deleted successfully"}

    # ========================================================================
    # Analysis
    # ========================================================================

    async def analysis(self, case_id: UUID) -> SettlementAnalysis:
        await self.ensure_case(case_id)

        settlements, liens, medical_bills, claimed = await self.gather(
            self._settlements(case_id, SettlementFilter()),
            self._liens(case_id, LienFilter()),
            self.fetch_scalar(
                select(func.coalesce(func.sum(MedicalProvider.total_bills), 0))
                .where(MedicalProvider.case_id == case_id)
            ),
            self.fetch_scalar(
                select(func.coalesce(func.sum(InsuranceClaim.amount), 0))
                .join(InsuranceClaim.policy)
                .where(InsurancePolicy.case_id == case_id)
            ),
        )

        unresolved = [lien for lien in liens if not lien.resolved]
        net_to_client = sum(s.net_to_client for s in settlements)
        medical_bills = float(medical_bills or 0)
        claimed = float(claimed or 0)

        return SettlementAnalysis(
            settlements=SettlementTotals(
                total=len(settlements),
                total_amount=sum(s.amount for s in settlements),
                total_attorney_fees=sum(s.attorney_fees for s in settlements),
                total_costs=sum(s.costs for s in settlements),
                total_net_to_client=net_to_client,
            ),
            liens=LienTotals(
                total=len(liens),
                unresolved=len(unresolved),
                total_amount=sum(lien.amount for lien in liens),
                unresolved_amount=sum(lien.amount for lien in unresolved),
            ),
            expenses=ExpenseTotals(
                total_medical_bills=medical_bills,
                total_insurance_claims=claimed,
                total_expenses=medical_bills + claimed,
            ),
            net_recovery=net_to_client,
        )

    async def calculate(self, case_id: UUID) -> SettlementCalculation:
        """
        Estimate: medical bills as economic damages, three times that for
        pain and suffering, less a one-third fee, 5% costs and all liens.
        """
        analysis = await self.analysis(case_id)

        economic = analysis.expenses.total_medical_bills
        pain_and_suffering = economic * PAIN_AND_SUFFERING_MULTIPLIER
        total_damages = economic + pain_and_suffering

        attorney_fees = total_damages * ATTORNEY_FEE_RATE
        estimated_costs = total_damages * COST_RATE
        liens = analysis.liens.total_amount
        net_to_client = total_damages - attorney_fees - estimated_costs - liens

        return SettlementCalculation(
            estimated_value=EstimatedValue(
                economic_damages=economic,
                pain_and_suffering=pain_and_suffering,
                total_damages=total_damages,
            ),
            deductions=SettlementDeductions(
                attorney_fees=attorney_fees,
                estimated_costs=estimated_costs,
                liens=liens,
                total_deductions=attorney_fees + estimated_costs + liens,
            ),
            net_to_client=max(0.0, net_to_client),
            recommendation=settlement_recommendation(total_damages),
        )
