"""
Settlements, liens and recovery analysis
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_settlement_service
from legal_estate.db.models import LienType, SettlementStatus, SettlementType
from legal_estate.db.schemas import (
    LienCreate,
    LienFilter,
    LienResponse,
    LienUpdate,
    MessageResponse,
    SettlementAnalysis,
    SettlementCalculation,
    SettlementCreate,
    SettlementDetail,
    SettlementFilter,
    SettlementResponse,
    SettlementUpdate,
)
from legal_estate.services.settlement_service import SettlementService

router = APIRouter()

# ============================================================================
# Settlements
# ============================================================================

@router.get("/cases/{case_id}", response_model=List[SettlementResponse])
async def get_settlements(
    case_id: UUID,
    settlement_type: Optional[SettlementType] = Query(None, alias="type"),
    settlement_status: Optional[SettlementStatus] = Query(None, alias="status"),
    settlements: SettlementService = Depends(get_settlement_service),
):
    filters = SettlementFilter(type=settlement_type, status=settlement_status)
    return await settlements.get_settlements(case_id, filters)


@router.post("/cases/{case_id}", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(
    case_id: UUID,
    payload: SettlementCreate,
    settlements: SettlementService = Depends(get_settlement_service),
):
    return await settlements.create_settlement(case_id, payload)


@router.get("/settlements/{settlement_id}", response_model=SettlementDetail)
async def get_settlement(settlement_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    return await settlements.get_settlement(settlement_id)


@router.patch("/settlements/{settlement_id}", response_model=SettlementResponse)
async def update_settlement(
    settlement_id: UUID,
    payload: SettlementUpdate,
    settlements: SettlementService = Depends(get_settlement_service),
):
    return await settlements.update_settlement(settlement_id, payload)


@router.delete("/settlements/{settlement_id}", response_model=MessageResponse)
async def delete_settlement(settlement_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    return await settlements.delete_settlement(settlement_id)

# ============================================================================
# Liens
# ============================================================================

@router.get("/cases/{case_id}/liens", response_model=List[LienResponse])
async def get_liens(
    case_id: UUID,
    lien_type: Optional[LienType] = Query(None, alias="type"),
    resolved: Optional[bool] = Query(None),
    settlements: SettlementService = Depends(get_settlement_service),
):
    return await settlements.get_liens(case_id, LienFilter(type=lien_type, resolved=resolved))


@router.post("/cases/{case_id}/liens", response_model=LienResponse, status_code=status.HTTP_201_CREATED)
async def create_lien(
    case_id: UUID,
    payload: LienCreate,
    settlements: SettlementService = Depends(get_settlement_service),
):
    return await settlements.create_lien(case_id, payload)


@router.patch("/liens/{lien_id}/resolve", response_model=LienResponse)
async def resolve_lien(lien_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    return await settlements.resolve_lien(lien_id)


@router.patch("/liens/{lien_id}", response_model=LienResponse)
async def update_lien(
    lien_id: UUID,
    payload: LienUpdate,
    settlements: SettlementService = Depends(get_settlement_service),
):
    return await settlements.update_lien(lien_id, payload)


@router.delete("/liens/{lien_id}", response_model=MessageResponse)
async def delete_lien(lien_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    return await settlements.delete_lien(lien_id)

# ============================================================================
# Analysis
# ============================================================================

@router.get("/cases/{case_id}/analysis", response_model=SettlementAnalysis)
async def get_settlement_analysis(case_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    return await settlements.analysis(case_id)


@router.get("/cases/{case_id}/calculation", response_model=SettlementCalculation)
async def calculate_settlement(case_id: UUID, settlements: SettlementService = Depends(get_settlement_service)):
    """Rule-of-thumb estimate from medical bills, fees, costs and liens."""
    return await settlements.calculate(case_id)
