"""
Incident, vehicles, witnesses, evidence and police report
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_incident_service
from legal_estate.db.models import EvidenceStatus, EvidenceType
from legal_estate.db.schemas import (
    CitationCreate,
    CitationResponse,
    CompleteIncident,
    EvidenceCreate,
    EvidenceFilter,
    EvidenceResponse,
    EvidenceUpdate,
    IncidentCreate,
    IncidentResponse,
    IncidentUpdate,
    MessageResponse,
    PoliceReportCreate,
    PoliceReportResponse,
    PoliceReportUpdate,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
    WitnessCreate,
    WitnessResponse,
    WitnessUpdate,
)
from legal_estate.services.incident_service import IncidentService

router = APIRouter()

# ============================================================================
# Incident
# ============================================================================

@router.get("/cases/{case_id}", response_model=Optional[IncidentResponse])
async def get_incident(case_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    """The case's incident, or null when none has been recorded."""
    return await incidents.get_incident(case_id)


@router.post("/cases/{case_id}", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
async def create_incident(
    case_id: UUID,
    payload: IncidentCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.create_incident(case_id, payload)


@router.patch("/{incident_id}", response_model=IncidentResponse)
async def update_incident(
    incident_id: UUID,
    payload: IncidentUpdate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.update_incident(incident_id, payload)


@router.get("/cases/{case_id}/complete", response_model=CompleteIncident)
async def get_complete_incident(case_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.get_complete(case_id)

# ============================================================================
# Vehicles
# ============================================================================

@router.get("/cases/{case_id}/vehicles", response_model=List[VehicleResponse])
async def get_vehicles(case_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.get_vehicles(case_id)


@router.post("/cases/{case_id}/vehicles", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def add_vehicle(
    case_id: UUID,
    payload: VehicleCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.add_vehicle(case_id, payload)


@router.patch("/vehicles/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: UUID,
    payload: VehicleUpdate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.update_vehicle(vehicle_id, payload)


@router.delete("/vehicles/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(vehicle_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.delete_vehicle(vehicle_id)

# ============================================================================
# Witnesses
# ============================================================================

@router.get("/cases/{case_id}/witnesses", response_model=List[WitnessResponse])
async def get_witnesses(case_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.get_witnesses(case_id)


@router.post("/cases/{case_id}/witnesses", response_model=WitnessResponse, status_code=status.HTTP_201_CREATED)
async def add_witness(
    case_id: UUID,
    payload: WitnessCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.add_witness(case_id, payload)


@router.patch("/witnesses/{witness_id}", response_model=WitnessResponse)
async def update_witness(
    witness_id: UUID,
    payload: WitnessUpdate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.update_witness(witness_id, payload)


@router.delete("/witnesses/{witness_id}", response_model=MessageResponse)
async def delete_witness(witness_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.delete_witness(witness_id)

# ============================================================================
# Evidence
# ============================================================================

@router.get("/cases/{case_id}/evidence", response_model=List[EvidenceResponse])
async def get_evidence(
    case_id: UUID,
    evidence_type: Optional[EvidenceType] = Query(None, alias="type"),
    evidence_status: Optional[EvidenceStatus] = Query(None, alias="status"),
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.get_evidence(case_id, EvidenceFilter(type=evidence_type, status=evidence_status))


@router.post("/cases/{case_id}/evidence", response_model=EvidenceResponse, status_code=status.HTTP_201_CREATED)
async def add_evidence(
    case_id: UUID,
    payload: EvidenceCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.add_evidence(case_id, payload)


@router.patch("/evidence/{evidence_id}", response_model=EvidenceResponse)
async def update_evidence(
    evidence_id: UUID,
    payload: EvidenceUpdate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.update_evidence(evidence_id, payload)


@router.delete("/evidence/{evidence_id}", response_model=MessageResponse)
async def delete_evidence(evidence_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.delete_evidence(evidence_id)

# ============================================================================
# Police report
# ============================================================================

@router.get("/cases/{case_id}/police-report", response_model=Optional[PoliceReportResponse])
async def get_police_report(case_id: UUID, incidents: IncidentService = Depends(get_incident_service)):
    return await incidents.get_police_report(case_id)


@router.post(
    "/cases/{case_id}/police-report",
    response_model=PoliceReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_police_report(
    case_id: UUID,
    payload: PoliceReportCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    """Requires the case's incident to exist first."""
    return await incidents.create_police_report(case_id, payload)


@router.patch("/police-reports/{report_id}", response_model=PoliceReportResponse)
async def update_police_report(
    report_id: UUID,
    payload: PoliceReportUpdate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.update_police_report(report_id, payload)


@router.post(
    "/police-reports/{report_id}/citations",
    response_model=CitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_citation(
    report_id: UUID,
    payload: CitationCreate,
    incidents: IncidentService = Depends(get_incident_service),
):
    return await incidents.add_citation(report_id, payload)
