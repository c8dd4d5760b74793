"""
Client endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from legal_estate.api.v1.deps import get_client_service
from legal_estate.db.models import CaseStatus, CaseType
from legal_estate.db.schemas import (
    AddressCreate,
    AddressResponse,
    ClientCreate,
    ClientDetail,
    ClientDetailed,
    ClientFilter,
    ClientListItem,
    ClientResponse,
    ClientUpdate,
    CommunicationPreferenceResponse,
    CommunicationPreferenceUpsert,
    ContactInfoCreate,
    ContactInfoResponse,
    EmergencyContactCreate,
    EmergencyContactResponse,
    EmploymentResponse,
    EmploymentUpsert,
    FamilyMemberCreate,
    FamilyMemberResponse,
    MessageResponse,
    Paginated,
)
from legal_estate.services.client_service import ClientService

router = APIRouter()

# ============================================================================
# Clients
# ============================================================================

@router.post("/", response_model=ClientDetail, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientCreate, clients: ClientService = Depends(get_client_service)):
    return await clients.create_client(payload)


@router.get("/", response_model=Paginated[ClientListItem])
async def list_clients(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Name or contact value"),
    case_status: Optional[CaseStatus] = Query(None, alias="status"),
    case_type: Optional[CaseType] = Query(None, alias="caseType"),
    clients: ClientService = Depends(get_client_service),
):
    """Active clients, newest first."""
    filters = ClientFilter(page=page, limit=limit, search=search, status=case_status, case_type=case_type)
    return await clients.find_all(filters)


@router.get("/{client_id}", response_model=ClientDetail)
async def get_client(client_id: UUID, clients: ClientService = Depends(get_client_service)):
    return await clients.find_one(client_id)


@router.get("/{client_id}/detailed", response_model=ClientDetailed)
async def get_client_detailed(client_id: UUID, clients: ClientService = Depends(get_client_service)):
    """Client with every case expanded: team, open tasks, providers, policies, incident."""
    return await clients.find_detailed(client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: UUID,
    payload: ClientUpdate,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.update_client(client_id, payload)


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(client_id: UUID, clients: ClientService = Depends(get_client_service)):
    """Soft delete: the client is deactivated, its cases are untouched."""
    return await clients.remove_client(client_id)

# ============================================================================
# Contact details
# ============================================================================

@router.post("/{client_id}/contacts", response_model=ContactInfoResponse, status_code=status.HTTP_201_CREATED)
async def add_contact(
    client_id: UUID,
    payload: ContactInfoCreate,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.add_contact(client_id, payload)


@router.post("/{client_id}/addresses", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def add_address(
    client_id: UUID,
    payload: AddressCreate,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.add_address(client_id, payload)


@router.post(
    "/{client_id}/emergency-contacts",
    response_model=EmergencyContactResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_emergency_contact(
    client_id: UUID,
    payload: EmergencyContactCreate,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.add_emergency_contact(client_id, payload)


@router.post("/{client_id}/family-members", response_model=FamilyMemberResponse, status_code=status.HTTP_201_CREATED)
async def add_family_member(
    client_id: UUID,
    payload: FamilyMemberCreate,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.add_family_member(client_id, payload)


@router.put("/{client_id}/employment", response_model=EmploymentResponse)
async def upsert_employment(
    client_id: UUID,
    payload: EmploymentUpsert,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.upsert_employment(client_id, payload)


@router.put("/{client_id}/communication-preferences", response_model=CommunicationPreferenceResponse)
async def upsert_communication_preferences(
    client_id: UUID,
    payload: CommunicationPreferenceUpsert,
    clients: ClientService = Depends(get_client_service),
):
    return await clients.upsert_communication_prefs(client_id, payload)
