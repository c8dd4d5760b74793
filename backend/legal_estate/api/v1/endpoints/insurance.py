"""
Insurance policies, claims and coverage analysis
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_insurance_service
from legal_estate.db.models import ClaimStatus, InsuranceType, PolicyStatus
from legal_estate.db.schemas import (
    ClaimCreate,
    ClaimFilter,
    ClaimUpdate,
    ClaimWithPolicy,
    CoverageAnalysis,
    LiabilityCoverage,
    MessageResponse,
    PolicyCreate,
    PolicyDetail,
    PolicyFilter,
    PolicyResponse,
    PolicyUpdate,
)
from legal_estate.services.insurance_service import InsuranceService

router = APIRouter()

# ============================================================================
# Policies
# ============================================================================

@router.get("/cases/{case_id}/policies", response_model=List[PolicyResponse])
async def get_policies(
    case_id: UUID,
    policy_type: Optional[InsuranceType] = Query(None, alias="type"),
    policy_status: Optional[PolicyStatus] = Query(None, alias="status"),
    company: Optional[str] = Query(None, description="Company name contains"),
    insurance: InsuranceService = Depends(get_insurance_service),
):
    filters = PolicyFilter(type=policy_type, status=policy_status, company=company)
    return await insurance.get_policies(case_id, filters)


@router.post("/cases/{case_id}/policies", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
async def create_policy(
    case_id: UUID,
    payload: PolicyCreate,
    insurance: InsuranceService = Depends(get_insurance_service),
):
    return await insurance.create_policy(case_id, payload)


@router.get("/policies/{policy_id}", response_model=PolicyDetail)
async def get_policy(policy_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.get_policy(policy_id)


@router.patch("/policies/{policy_id}", response_model=PolicyResponse)
async def update_policy(
    policy_id: UUID,
    payload: PolicyUpdate,
    insurance: InsuranceService = Depends(get_insurance_service),
):
    return await insurance.update_policy(policy_id, payload)


@router.delete("/policies/{policy_id}", response_model=MessageResponse)
async def delete_policy(policy_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    """Deletes the policy and its claims."""
    return await insurance.delete_policy(policy_id)

# ============================================================================
# Claims
# ============================================================================

@router.get("/cases/{case_id}/claims", response_model=List[ClaimWithPolicy])
async def get_claims(
    case_id: UUID,
    claim_status: Optional[ClaimStatus] = Query(None, alias="status"),
    policy_type: Optional[InsuranceType] = Query(None, alias="type"),
    min_amount: Optional[float] = Query(None, alias="minAmount", ge=0),
    max_amount: Optional[float] = Query(None, alias="maxAmount", ge=0),
    insurance: InsuranceService = Depends(get_insurance_service),
):
    filters = ClaimFilter(status=claim_status, type=policy_type, min_amount=min_amount, max_amount=max_amount)
    return await insurance.get_claims(case_id, filters)


@router.post("/policies/{policy_id}/claims", response_model=ClaimWithPolicy, status_code=status.HTTP_201_CREATED)
async def create_claim(
    policy_id: UUID,
    payload: ClaimCreate,
    insurance: InsuranceService = Depends(get_insurance_service),
):
    return await insurance.create_claim(policy_id, payload)


@router.patch("/claims/{claim_id}", response_model=ClaimWithPolicy)
async def update_claim(
    claim_id: UUID,
    payload: ClaimUpdate,
    insurance: InsuranceService = Depends(get_insurance_service),
):
    return await insurance.update_claim(claim_id, payload)


@router.delete("/claims/{claim_id}", response_model=MessageResponse)
async def delete_claim(claim_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.delete_claim(claim_id)

# ============================================================================
# Analytics
# ============================================================================

@router.get("/cases/{case_id}/summary")
async def get_insurance_summary(case_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.summary(case_id)


@router.get("/cases/{case_id}/coverage-analysis", response_model=CoverageAnalysis)
async def get_coverage_analysis(case_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    """Auto / health / liability / umbrella coverage with gaps and recommendations."""
    return await insurance.coverage_analysis(case_id)


@router.get("/cases/{case_id}/auto-insurance", response_model=List[PolicyResponse])
async def get_auto_insurance(case_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.auto_insurance(case_id)


@router.get("/cases/{case_id}/health-insurance", response_model=List[PolicyResponse])
async def get_health_insurance(case_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.health_insurance(case_id)


@router.get("/cases/{case_id}/liability-insurance", response_model=LiabilityCoverage)
async def get_liability_insurance(case_id: UUID, insurance: InsuranceService = Depends(get_insurance_service)):
    return await insurance.liability_insurance(case_id)
