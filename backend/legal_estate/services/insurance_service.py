# legal_estate/services/insurance_service.py

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import ClaimStatus, InsuranceClaim, InsurancePolicy, InsuranceType
from legal_estate.db.schemas import (
    ClaimCreate,
    ClaimFilter,
    ClaimUpdate,
    ClaimWithPolicy,
    CoverageAnalysis,
    CoverageBucket,
    LiabilityCoverage,
    PolicyCreate,
    PolicyDetail,
    PolicyFilter,
    PolicyResponse,
    PolicyUpdate,
)
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import NotFoundError
from legal_estate.utils.helpers import enum_value, icontains

POLICY_NOT_FOUND = "Insurance policy not found"
CLAIM_NOT_FOUND = "Insurance claim not found"

ACTIVE_CLAIM_STATUSES = (ClaimStatus.OPEN, ClaimStatus.PENDING)

# (bucket, policy type) pairs walked by the coverage analysis
COVERAGE_BUCKETS = (
    ("auto_insurance", InsuranceType.AUTO),
    ("health_insurance", InsuranceType.HEALTH),
    ("liability_insurance", InsuranceType.LIABILITY),
    ("umbrella_insurance", InsuranceType.UMBRELLA),
)


def _policy_limit_total(policy: PolicyResponse) -> float:
    """Sum of the numeric entries of a policy's coverage limits."""
    total = 0.0
    for value in (policy.coverage_limits or {}).values():
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            total += value
    return total


class InsuranceService(BaseService):

    # ========================================================================
    # Policies
    # ========================================================================

    async def get_policies(self, case_id: UUID, filters: Optional[PolicyFilter] = None) -> List[PolicyResponse]:
        await self.ensure_case(case_id)
        return await self._policies(case_id, filters or PolicyFilter())

    async def _policies(self, case_id: UUID, filters: PolicyFilter) -> List[PolicyResponse]:
        stmt = (
            select(InsurancePolicy)
            .where(InsurancePolicy.case_id == case_id)
            .options(selectinload(InsurancePolicy.claims))
        )
        if filters.type:
            stmt = stmt.where(InsurancePolicy.type == filters.type)
        if filters.status:
            stmt = stmt.where(InsurancePolicy.status == filters.status)
        if filters.company:
            stmt = stmt.where(icontains(InsurancePolicy.company, filters.company))

        policies = await self.fetch_all(
            stmt.order_by(InsurancePolicy.type.asc(), InsurancePolicy.effective_date.desc().nulls_last())
        )
        for policy in policies:
            policy.claims.sort(key=lambda c: c.date_reported, reverse=True)
        return [PolicyResponse.model_validate(p) for p in policies]

    async def _load_policy(self, policy_id: UUID) -> Optional[InsurancePolicy]:
        return await self.fetch_first(
            select(InsurancePolicy)
            .where(InsurancePolicy.id == policy_id)
            .options(selectinload(InsurancePolicy.claims), selectinload(InsurancePolicy.case))
        )

    async def get_policy(self, policy_id: UUID) -> PolicyDetail:
        policy = await self._load_policy(policy_id)
        if policy is None:
            raise NotFoundError(POLICY_NOT_FOUND)
        policy.claims.sort(key=lambda c: c.date_reported, reverse=True)
        return PolicyDetail.model_validate(policy)

    async def create_policy(self, case_id: UUID, payload: PolicyCreate) -> PolicyResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            policy = InsurancePolicy(**payload.model_dump(), case_id=case_id)
            session.add(policy)

        logger.info(f"Insurance policy created: {policy.company} {policy.policy_number} on case {case_id}")
        return PolicyResponse.model_validate(await self._load_policy(policy.id))

    async def update_policy(self, policy_id: UUID, payload: PolicyUpdate) -> PolicyResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            policy = await self.get_or_404(session, InsurancePolicy, policy_id, POLICY_NOT_FOUND)
            apply_changes(policy, changes)

        logger.info(f"Insurance policy updated: {policy_id} fields={sorted(changes)}")
        return PolicyResponse.model_validate(await self._load_policy(policy_id))

    async def delete_policy(self, policy_id: UUID) -> dict:
        async with self.db.transaction() as session:
            policy = await self.get_or_404(session, InsurancePolicy, policy_id, POLICY_NOT_FOUND)
            await session.delete(policy)
        logger.info(f"Insurance policy deleted: {policy_id}")
        return {"message": "Insurance policy deleted successfully"}

    # ========================================================================
    # Claims
    # ========================================================================

    async def get_claims(self, case_id: UUID, filters: ClaimFilter) -> List[ClaimWithPolicy]:
        await self.ensure_case(case_id)
        stmt = (
            select(InsuranceClaim)
            .join(InsuranceClaim.policy)
            .where(InsurancePolicy.case_id == case_id)
            .options(selectinload(InsuranceClaim.policy))
        )
        if filters.status:
            stmt = stmt.where(InsuranceClaim.status == filters.status)
        if filters.type:
            stmt = stmt.where(InsurancePolicy.type == filters.type)
        if filters.min_amount is not None:
            stmt = stmt.where(InsuranceClaim.amount >= filters.min_amount)
        if filters.max_amount is not None:
            stmt = stmt.where(InsuranceClaim.amount <= filters.max_amount)

        claims = await self.fetch_all(stmt.order_by(InsuranceClaim.date_reported.desc()))
        return [ClaimWithPolicy.model_validate(c) for c in claims]

    async def _claim_response(self, claim_id: UUID) -> ClaimWithPolicy:
        claim = await self.fetch_first(
            select(InsuranceClaim)
            .where(InsuranceClaim.id == claim_id)
            .options(selectinload(InsuranceClaim.policy))
        )
        return ClaimWithPolicy.model_validate(claim)

    async def create_claim(self, policy_id: UUID, payload: ClaimCreate) -> ClaimWithPolicy:
        async with self.db.transaction() as session:
            await self.get_or_404(session, InsurancePolicy, policy_id, POLICY_NOT_FOUND)
            claim = InsuranceClaim(**payload.model_dump(), policy_id=policy_id)
            session.add(claim)

        logger.info(f"Insurance claim created: {claim.claim_number} on policy {policy_id}")
        return await self._claim_response(claim.id)

    async def update_claim(self, claim_id: UUID, payload: ClaimUpdate) -> ClaimWithPolicy:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            claim = await self.get_or_404(session, InsuranceClaim, claim_id, CLAIM_NOT_FOUND)
            apply_changes(claim, changes)
        return await self._claim_response(claim_id)

    async def delete_claim(self, claim_id: UUID) -> dict:
        async with self.db.transaction() as session:
            claim = await self.get_or_404(session, InsuranceClaim, claim_id, CLAIM_NOT_FOUND)
            await session.delete(claim)
        logger.info(f"Insurance claim deleted: {claim_id}")
        return {"message": "Insurance claim deleted successfully"}

    # ========================================================================
    # Summary and analysis
    # ========================================================================

    async def summary(self, case_id: UUID) -> dict:
        await self.ensure_case(case_id)

        case_claim = InsuranceClaim.policy.has(InsurancePolicy.case_id == case_id)
        policy_count, claim_count, totals, by_status, by_type = await self.gather(
            self.count(InsurancePolicy, InsurancePolicy.case_id == case_id),
            self.count(InsuranceClaim, case_claim),
            self.fetch_rows(
                select(func.sum(InsuranceClaim.amount), func.avg(InsuranceClaim.amount)).where(case_claim)
            ),
            self.fetch_rows(
                select(InsuranceClaim.status, func.count(), func.sum(InsuranceClaim.amount))
                .where(case_claim)
                .group_by(InsuranceClaim.status)
            ),
            self.fetch_rows(
                select(InsurancePolicy.type, func.count(), func.sum(InsurancePolicy.premium))
                .where(InsurancePolicy.case_id == case_id)
                .group_by(InsurancePolicy.type)
            ),
        )

        total_amount, average_amount = totals[0] if totals else (None, None)
        return {
            "summary": {
                "totalPolicies": policy_count,
                "totalClaims": claim_count,
                "totalClaimAmount": float(total_amount or 0),
                "averageClaimAmount": float(average_amount or 0),
            },
            "claimsByStatus": {
                enum_value(status).lower(): {"count": count, "totalAmount": float(amount or 0)}
                for status, count, amount in by_status
            },
            "policiesByType": {
                enum_value(policy_type).lower(): {"count": count, "totalPremium": float(premium or 0)}
                for policy_type, count, premium in by_type
            },
        }

    async def coverage_analysis(self, case_id: UUID) -> CoverageAnalysis:
        """
        Sort the case's policies into auto / health / liability / umbrella
        buckets and list the missing coverage.
        """
        policies = await self.get_policies(case_id)

        buckets = {}
        for name, policy_type in COVERAGE_BUCKETS:
            matching = [p for p in policies if p.type == policy_type]
            buckets[name] = CoverageBucket(
                present=bool(matching),
                policies=matching,
                total_coverage=sum(_policy_limit_total(p) for p in matching),
                active_claims=sum(
                    1 for p in matching for claim in p.claims if claim.status in ACTIVE_CLAIM_STATUSES
                ),
            )

        gaps, recommendations = [], []
        if not buckets["auto_insurance"].present:
            gaps.append("No auto insurance policy found")
            recommendations.append("Add auto insurance policy information")
        if not buckets["health_insurance"].present:
            gaps.append("No health insurance policy found")
            recommendations.append("Add health insurance policy information")
        if not buckets["liability_insurance"].present and not buckets["umbrella_insurance"].present:
            gaps.append("No liability or umbrella insurance found")
            recommendations.append("Check for additional liability coverage")

        return CoverageAnalysis(**buckets, gaps=gaps, recommendations=recommendations)

    async def auto_insurance(self, case_id: UUID) -> List[PolicyResponse]:
        return await self.get_policies(case_id, PolicyFilter(type=InsuranceType.AUTO))

    async def health_insurance(self, case_id: UUID) -> List[PolicyResponse]:
        return await self.get_policies(case_id, PolicyFilter(type=InsuranceType.HEALTH))

    async def liability_insurance(self, case_id: UUID) -> LiabilityCoverage:
        await self.ensure_case(case_id)
        liability, umbrella = await self.gather(
            self._policies(case_id, PolicyFilter(type=InsuranceType.LIABILITY)),
            self._policies(case_id, PolicyFilter(type=InsuranceType.UMBRELLA)),
        )
        return LiabilityCoverage(liability=liability, umbrella=umbrella, combined=liability + umbrella)
