"""
Medical providers, records and injuries
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_medical_service
from legal_estate.db.schemas import (
    InjuryCreate,
    InjuryResponse,
    InjuryUpdate,
    MessageResponse,
    ProviderCreate,
    ProviderResponse,
    ProviderUpdate,
    ProviderWithRecords,
    RecordCreate,
    RecordFilter,
    RecordResponse,
    RecordUpdate,
)
from legal_estate.services.medical_service import MedicalService

router = APIRouter()

# ============================================================================
# Providers
# ============================================================================

@router.get("/cases/{case_id}/providers", response_model=List[ProviderWithRecords])
async def get_providers(case_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    return await medical.get_providers(case_id)


@router.post("/cases/{case_id}/providers", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    case_id: UUID,
    payload: ProviderCreate,
    medical: MedicalService = Depends(get_medical_service),
):
    return await medical.create_provider(case_id, payload)


@router.patch("/providers/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: UUID,
    payload: ProviderUpdate,
    medical: MedicalService = Depends(get_medical_service),
):
    return await medical.update_provider(provider_id, payload)


@router.delete("/providers/{provider_id}", response_model=MessageResponse)
async def delete_provider(provider_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    return await medical.delete_provider(provider_id)

# ============================================================================
# Records
# ============================================================================

@router.get("/cases/{case_id}/records", response_model=List[RecordResponse])
async def get_records(
    case_id: UUID,
    provider_id: Optional[UUID] = Query(None, alias="providerId"),
    record_type: Optional[str] = Query(None, alias="type"),
    bill_received: Optional[bool] = Query(None, alias="billReceived"),
    records_received: Optional[bool] = Query(None, alias="recordsReceived"),
    medical: MedicalService = Depends(get_medical_service),
):
    filters = RecordFilter(
        provider_id=provider_id,
        type=record_type,
        bill_received=bill_received,
        records_received=records_received,
    )
    return await medical.get_records(case_id, filters)


@router.post("/cases/{case_id}/records", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    case_id: UUID,
    payload: RecordCreate,
    medical: MedicalService = Depends(get_medical_service),
):
    """Add a record; the provider's total bills are recomputed with it."""
    return await medical.create_record(case_id, payload)


@router.patch("/records/{record_id}", response_model=RecordResponse)
async def update_record(
    record_id: UUID,
    payload: RecordUpdate,
    medical: MedicalService = Depends(get_medical_service),
):
    return await medical.update_record(record_id, payload)


@router.delete("/records/{record_id}", response_model=MessageResponse)
async def delete_record(record_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    return await medical.delete_record(record_id)

# ============================================================================
# Injuries
# ============================================================================

@router.get("/cases/{case_id}/injuries", response_model=List[InjuryResponse])
async def get_injuries(case_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    return await medical.get_injuries(case_id)


@router.post("/cases/{case_id}/injuries", response_model=InjuryResponse, status_code=status.HTTP_201_CREATED)
async def create_injury(
    case_id: UUID,
    payload: InjuryCreate,
    medical: MedicalService = Depends(get_medical_service),
):
    return await medical.create_injury(case_id, payload)


@router.patch("/injuries/{injury_id}", response_model=InjuryResponse)
async def update_injury(
    injury_id: UUID,
    payload: InjuryUpdate,
    medical: MedicalService = Depends(get_medical_service),
):
    return await medical.update_injury(injury_id, payload)


@router.delete("/injuries/{injury_id}", response_model=MessageResponse)
async def delete_injury(injury_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    return await medical.delete_injury(injury_id)

# ============================================================================
# Summary
# ============================================================================

@router.get("/cases/{case_id}/summary")
async def get_medical_summary(case_id: UUID, medical: MedicalService = Depends(get_medical_service)):
    """Provider and record counts, injuries by severity and total bills."""
    return await medical.summary(case_id)
