"""
Pydantic validation schemas

Request bodies reject unknown fields; every model speaks camelCase on the
wire and accepts snake_case names as well.
"""
from datetime import date, datetime
from datetime import date as date_type
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from legal_estate.db.models import (
    AddressType,
    CaseStatus,
    CaseType,
    ClaimStatus,
    CommunicationMethod,
    ContactType,
    DocumentType,
    EvidenceStatus,
    EvidenceType,
    Gender,
    InjurySeverity,
    InsuranceType,
    LienType,
    MaritalStatus,
    NoteType,
    PolicyStatus,
    ProviderStatus,
    SettlementStatus,
    SettlementType,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from legal_estate.utils.validators import validate_case_number

T = TypeVar("T")


class APIModel(BaseModel):
    """Response shape, read straight from ORM objects"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class APIInput(BaseModel):
    """Request shape; unknown fields are a validation error"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class Paginated(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


class MessageResponse(BaseModel):
    message: str


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value.strip() if value is not None else value


def _case_number_format(value: Optional[str]) -> Optional[str]:
    if value is not None and not validate_case_number(value):
        raise ValueError("must look like LE-2024-001")
    return value

# ============================================================================
# User Schemas
# ============================================================================

class UserLogin(APIInput):
    """Login schema"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(APIModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole


class UserResponse(UserSummary):
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserFilter(APIInput):
    role: Optional[UserRole] = None

# ============================================================================
# Client Schemas
# ============================================================================

class ContactInfoCreate(APIInput):
    type: ContactType
    value: str = Field(..., min_length=1, max_length=255)
    label: Optional[str] = Field(None, max_length=100)
    primary: bool = False


class ContactInfoResponse(APIModel):
    id: UUID
    type: ContactType
    value: str
    label: Optional[str] = None
    primary: bool


class AddressCreate(APIInput):
    type: AddressType = AddressType.HOME
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = "United States"
    primary: bool = False


class AddressResponse(APIModel):
    id: UUID
    type: AddressType
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    primary: bool


class EmergencyContactCreate(APIInput):
    name: str = Field(..., min_length=1, max_length=200)
    relationship_to_client: str = Field(..., alias="relationship", min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    primary: bool = False


class EmergencyContactResponse(APIModel):
    id: UUID
    name: str
    relationship_to_client: str = Field(..., alias="relationship")
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    primary: bool


class FamilyMemberCreate(APIInput):
    name: str = Field(..., min_length=1, max_length=200)
    relationship_to_client: str = Field(..., alias="relationship", min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    dependent: bool = False


class FamilyMemberResponse(APIModel):
    id: UUID
    name: str
    relationship_to_client: str = Field(..., alias="relationship")
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    dependent: bool


class EmploymentUpsert(APIInput):
    employer: Optional[str] = None
    position: Optional[str] = None
    employer_phone: Optional[str] = None
    employer_address: Optional[str] = None
    supervisor_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    hours_per_week: Optional[float] = Field(None, ge=0, le=168)
    annual_salary: Optional[float] = Field(None, ge=0)
    missed_work_days: Optional[int] = Field(None, ge=0)


class EmploymentResponse(APIModel):
    id: UUID
    employer: Optional[str] = None
    position: Optional[str] = None
    employer_phone: Optional[str] = None
    employer_address: Optional[str] = None
    supervisor_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    hourly_rate: Optional[float] = None
    hours_per_week: Optional[float] = None
    annual_salary: Optional[float] = None
    missed_work_days: int


class CommunicationPreferenceUpsert(APIInput):
    preferred_method: Optional[CommunicationMethod] = None
    best_time_to_contact: Optional[str] = None
    preferred_language: Optional[str] = None
    allow_text: Optional[bool] = None
    allow_email: Optional[bool] = None
    notes: Optional[str] = None


class CommunicationPreferenceResponse(APIModel):
    id: UUID
    preferred_method: CommunicationMethod
    best_time_to_contact: Optional[str] = None
    preferred_language: Optional[str] = None
    allow_text: bool
    allow_email: bool
    notes: Optional[str] = None


class ClientBase(APIInput):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    date_of_birth: Optional[date] = None
    ssn: Optional[str] = Field(None, pattern=r"^\d{3}-?\d{2}-?\d{4}$")
    gender: Optional[Gender] = None
    marital_status: Optional[MaritalStatus] = None
    citizenship: Optional[str] = None
    languages: List[str] = []
    photo: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        return _not_blank(v)


class ClientCreate(ClientBase):
    contacts: List[ContactInfoCreate] = []
    addresses: List[AddressCreate] = []


class ClientUpdate(APIInput):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    date_of_birth: Optional[date] = None
    ssn: Optional[str] = Field(None, pattern=r"^\d{3}-?\d{2}-?\d{4}$")
    gender: Optional[Gender] = None
    marital_status: Optional[MaritalStatus] = None
    citizenship: Optional[str] = None
    languages: Optional[List[str]] = None
    photo: Optional[str] = None
    active: Optional[bool] = None


class ClientFilter(APIInput):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[CaseStatus] = None
    case_type: Optional[CaseType] = None


class ClientSummary(APIModel):
    id: UUID
    first_name: str
    last_name: str
    active: bool


class ClientResponse(APIModel):
    id: UUID
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    ssn: Optional[str] = None
    gender: Optional[Gender] = None
    marital_status: Optional[MaritalStatus] = None
    citizenship: Optional[str] = None
    languages: List[str] = []
    photo: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class ClientWithContacts(ClientResponse):
    contacts: List[ContactInfoResponse] = []

# ============================================================================
# Case Schemas
# ============================================================================

class CaseSummary(APIModel):
    id: UUID
    case_number: str
    title: str
    case_type: CaseType
    status: CaseStatus
    date_of_loss: Optional[date] = None
    created_at: datetime


class AssignmentResponse(APIModel):
    id: UUID
    user_id: UUID
    role: str
    assigned_at: datetime
    user: UserSummary


class AssignmentCreate(APIInput):
    user_id: UUID
    role: str = Field(..., min_length=1, max_length=100)

    @field_validator("role")
    @classmethod
    def strip_role(cls, v):
        return _not_blank(v)


class CaseCreate(APIInput):
    case_number: Optional[str] = Field(None, min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=500)
    case_type: CaseType
    status: CaseStatus = CaseStatus.ACTIVE
    date_of_loss: Optional[date] = None
    statute_of_limitations: Optional[date] = None
    description: Optional[str] = None
    referral_source: Optional[str] = None
    referred_by: Optional[str] = None
    client_id: UUID

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _not_blank(v)

    @field_validator("case_number")
    @classmethod
    def check_case_number(cls, v):
        return _case_number_format(v)


class CaseUpdate(APIInput):
    case_number: Optional[str] = Field(None, min_length=1, max_length=50)
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    case_type: Optional[CaseType] = None
    status: Optional[CaseStatus] = None
    date_of_loss: Optional[date] = None
    statute_of_limitations: Optional[date] = None
    description: Optional[str] = None
    referral_source: Optional[str] = None
    referred_by: Optional[str] = None
    client_id: Optional[UUID] = None

    @field_validator("case_number")
    @classmethod
    def check_case_number(cls, v):
        return _case_number_format(v)


class CaseFilter(APIInput):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    search: Optional[str] = None
    status: Optional[CaseStatus] = None
    case_type: Optional[CaseType] = None
    client_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = None


class CaseCounts(APIModel):
    tasks: int = 0
    documents: int = 0
    medical_providers: int = 0


class CaseResponse(CaseSummary):
    statute_of_limitations: Optional[date] = None
    description: Optional[str] = None
    referral_source: Optional[str] = None
    referred_by: Optional[str] = None
    client_id: UUID
    created_by_id: UUID
    updated_at: datetime
    client: ClientSummary
    created_by: UserSummary
    assignments: List[AssignmentResponse] = []


class CaseListItem(CaseSummary):
    description: Optional[str] = None
    client_id: UUID
    updated_at: datetime
    client: ClientSummary
    assignments: List[AssignmentResponse] = []
    counts: CaseCounts = CaseCounts()


class ClientListItem(ClientResponse):
    contacts: List[ContactInfoResponse] = []
    latest_case: Optional[CaseSummary] = None
    case_count: int = 0


class ClientDetail(ClientResponse):
    contacts: List[ContactInfoResponse] = []
    addresses: List[AddressResponse] = []
    emergency_contacts: List[EmergencyContactResponse] = []
    family_members: List[FamilyMemberResponse] = []
    employment: Optional[EmploymentResponse] = None
    communication_prefs: Optional[CommunicationPreferenceResponse] = None
    cases: List[CaseSummary] = []

# ============================================================================
# Task Schemas
# ============================================================================

class TaskCreate(APIInput):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    assigned_to_id: Optional[UUID] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        return _not_blank(v)


class TaskUpdate(APIInput):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    assigned_to_id: Optional[UUID] = None


class TaskAssign(APIInput):
    user_id: UUID


class TaskFilter(APIInput):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[UUID] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None


class TaskResponse(APIModel):
    id: UUID
    case_id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to_id: Optional[UUID] = None
    created_by_id: UUID
    created_at: datetime
    updated_at: datetime
    assigned_to: Optional[UserSummary] = None
    created_by: Optional[UserSummary] = None


class TaskWithCase(TaskResponse):
    case: CaseSummary

# ============================================================================
# Note Schemas
# ============================================================================

class NoteCreate(APIInput):
    title: Optional[str] = Field(None, max_length=500)
    content: str = Field(..., min_length=1)
    type: NoteType = NoteType.GENERAL

    @field_validator("content")
    @classmethod
    def strip_content(cls, v):
        return _not_blank(v)


class NoteUpdate(APIInput):
    title: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[NoteType] = None


class NoteFilter(APIInput):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    type: Optional[NoteType] = None
    search: Optional[str] = None
    author_id: Optional[UUID] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class NoteResponse(APIModel):
    id: UUID
    case_id: UUID
    title: Optional[str] = None
    content: str
    type: NoteType
    author_id: UUID
    created_at: datetime
    updated_at: datetime
    author: UserSummary


class CaseDetail(CaseResponse):
    client: ClientWithContacts
    tasks: List[TaskResponse] = []
    notes: List[NoteResponse] = []


class TimelineEntry(BaseModel):
    type: str
    id: UUID
    title: str
    description: Optional[str] = None
    date: datetime
    user: Optional[UserSummary] = None
    status: str

# ============================================================================
# Document Schemas
# ============================================================================

class DocumentUpdate(APIInput):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[DocumentType] = None
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class DocumentFilter(APIInput):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    type: Optional[DocumentType] = None
    category: Optional[str] = None
    search: Optional[str] = None


class DocumentResponse(APIModel):
    id: UUID
    case_id: UUID
    name: str
    type: DocumentType
    category: Optional[str] = None
    description: Optional[str] = None
    file_path: str
    file_size: int
    mime_type: str
    uploaded_by_id: UUID
    uploaded_at: datetime
    updated_at: datetime
    uploaded_by: UserSummary


class DocumentWithCase(DocumentResponse):
    case: CaseSummary

# ============================================================================
# Medical Schemas
# ============================================================================

class ProviderCreate(APIInput):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    date_first_seen: Optional[date] = None
    date_last_seen: Optional[date] = None
    status: ProviderStatus = ProviderStatus.ACTIVE


class ProviderUpdate(APIInput):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    date_first_seen: Optional[date] = None
    date_last_seen: Optional[date] = None
    status: Optional[ProviderStatus] = None


class ProviderRef(APIModel):
    id: UUID
    name: str
    type: str


class RecordSummary(APIModel):
    id: UUID
    date: date_type
    type: str
    cost: float
    bill_received: bool
    records_received: bool


class ProviderResponse(APIModel):
    id: UUID
    case_id: UUID
    name: str
    type: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    date_first_seen: Optional[date] = None
    date_last_seen: Optional[date] = None
    total_bills: float
    status: ProviderStatus
    created_at: datetime
    updated_at: datetime


class ProviderWithRecords(ProviderResponse):
    medical_records: List[RecordSummary] = []
    record_count: int = 0


class RecordCreate(APIInput):
    date: date_type
    type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    cost: float = Field(0, ge=0)
    bill_received: bool = False
    records_received: bool = False
    provider_id: Optional[UUID] = None


class RecordUpdate(APIInput):
    date: Optional[date_type] = None
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    bill_received: Optional[bool] = None
    records_received: Optional[bool] = None
    provider_id: Optional[UUID] = None


class RecordFilter(APIInput):
    provider_id: Optional[UUID] = None
    type: Optional[str] = None
    bill_received: Optional[bool] = None
    records_received: Optional[bool] = None


class RecordResponse(APIModel):
    id: UUID
    case_id: UUID
    provider_id: Optional[UUID] = None
    date: date_type
    type: str
    description: Optional[str] = None
    category: Optional[str] = None
    cost: float
    bill_received: bool
    records_received: bool
    created_at: datetime
    updated_at: datetime
    provider: Optional[ProviderRef] = None


class InjuryCreate(APIInput):
    body_part: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    severity: InjurySeverity
    date_reported: Optional[date] = None
    current_status: Optional[str] = None
    resolved: bool = False


class InjuryUpdate(APIInput):
    body_part: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    severity: Optional[InjurySeverity] = None
    date_reported: Optional[date] = None
    current_status: Optional[str] = None
    resolved: Optional[bool] = None


class InjuryResponse(APIModel):
    id: UUID
    case_id: UUID
    body_part: str
    description: str
    severity: InjurySeverity
    date_reported: Optional[date] = None
    current_status: Optional[str] = None
    resolved: bool
    created_at: datetime
    updated_at: datetime

# ============================================================================
# Incident Schemas
# ============================================================================

class IncidentCreate(APIInput):
    date_of_loss: date
    time_of_incident: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    coordinates: Optional[str] = None
    weather: Optional[str] = None
    lighting_conditions: Optional[str] = None
    road_conditions: Optional[str] = None
    incident_type: str = Field(..., min_length=1, max_length=100)
    sub_type: Optional[str] = None
    severity: Optional[InjurySeverity] = None
    description: Optional[str] = None
    cause_factors: List[str] = []


class IncidentUpdate(APIInput):
    date_of_loss: Optional[date] = None
    time_of_incident: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    coordinates: Optional[str] = None
    weather: Optional[str] = None
    lighting_conditions: Optional[str] = None
    road_conditions: Optional[str] = None
    incident_type: Optional[str] = Field(None, min_length=1, max_length=100)
    sub_type: Optional[str] = None
    severity: Optional[InjurySeverity] = None
    description: Optional[str] = None
    cause_factors: Optional[List[str]] = None


class CitationCreate(APIInput):
    issued_to: str = Field(..., min_length=1, max_length=200)
    violation: str = Field(..., min_length=1, max_length=500)
    code_section: Optional[str] = None


class CitationResponse(APIModel):
    id: UUID
    issued_to: str
    violation: str
    code_section: Optional[str] = None


class PoliceReportCreate(APIInput):
    report_filed: bool = False
    report_number: Optional[str] = None
    responding_officer: Optional[str] = None
    police_station: Optional[str] = None
    report_date: Optional[date] = None


class PoliceReportUpdate(APIInput):
    report_filed: Optional[bool] = None
    report_number: Optional[str] = None
    responding_officer: Optional[str] = None
    police_station: Optional[str] = None
    report_date: Optional[date] = None


class PoliceReportResponse(APIModel):
    id: UUID
    incident_id: UUID
    report_filed: bool
    report_number: Optional[str] = None
    responding_officer: Optional[str] = None
    police_station: Optional[str] = None
    report_date: Optional[date] = None
    citations: List[CitationResponse] = []


class IncidentResponse(APIModel):
    id: UUID
    case_id: UUID
    date_of_loss: date
    time_of_incident: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    coordinates: Optional[str] = None
    weather: Optional[str] = None
    lighting_conditions: Optional[str] = None
    road_conditions: Optional[str] = None
    incident_type: str
    sub_type: Optional[str] = None
    severity: Optional[InjurySeverity] = None
    description: Optional[str] = None
    cause_factors: List[str] = []
    created_at: datetime
    updated_at: datetime
    police_report: Optional[PoliceReportResponse] = None


class VehicleCreate(APIInput):
    year: Optional[int] = Field(None, ge=1900, le=2100)
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = Field(None, max_length=50)
    owner: Optional[str] = None
    driver: Optional[str] = None
    passengers: List[str] = []
    insurance_company: Optional[str] = None
    policy_number: Optional[str] = None
    damages: Optional[str] = None
    towed_to: Optional[str] = None
    is_client_vehicle: bool = False


class VehicleUpdate(APIInput):
    year: Optional[int] = Field(None, ge=1900, le=2100)
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = Field(None, max_length=50)
    owner: Optional[str] = None
    driver: Optional[str] = None
    passengers: Optional[List[str]] = None
    insurance_company: Optional[str] = None
    policy_number: Optional[str] = None
    damages: Optional[str] = None
    towed_to: Optional[str] = None
    is_client_vehicle: Optional[bool] = None


class VehicleResponse(APIModel):
    id: UUID
    case_id: UUID
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    vin: Optional[str] = None
    owner: Optional[str] = None
    driver: Optional[str] = None
    passengers: List[str] = []
    insurance_company: Optional[str] = None
    policy_number: Optional[str] = None
    damages: Optional[str] = None
    towed_to: Optional[str] = None
    is_client_vehicle: bool
    created_at: datetime


class WitnessCreate(APIInput):
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    relationship_to_client: Optional[str] = Field(None, alias="relationship")
    statement: Optional[str] = None


class WitnessUpdate(APIInput):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    relationship_to_client: Optional[str] = Field(None, alias="relationship")
    statement: Optional[str] = None


class WitnessResponse(APIModel):
    id: UUID
    case_id: UUID
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    relationship_to_client: Optional[str] = Field(None, alias="relationship")
    statement: Optional[str] = None
    created_at: datetime


class EvidenceCreate(APIInput):
    type: EvidenceType
    description: str = Field(..., min_length=1)
    location: Optional[str] = None
    collected_by: Optional[str] = None
    date_collected: Optional[date] = None
    status: EvidenceStatus = EvidenceStatus.COLLECTED
    file_path: Optional[str] = None


class EvidenceUpdate(APIInput):
    type: Optional[EvidenceType] = None
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    collected_by: Optional[str] = None
    date_collected: Optional[date] = None
    status: Optional[EvidenceStatus] = None
    file_path: Optional[str] = None


class EvidenceFilter(APIInput):
    type: Optional[EvidenceType] = None
    status: Optional[EvidenceStatus] = None


class EvidenceResponse(APIModel):
    id: UUID
    case_id: UUID
    type: EvidenceType
    description: str
    location: Optional[str] = None
    collected_by: Optional[str] = None
    date_collected: Optional[date] = None
    status: EvidenceStatus
    file_path: Optional[str] = None
    created_at: datetime


class IncidentSummaryCounts(BaseModel):
    vehicleCount: int
    witnessCount: int
    evidenceCount: int
    hasPoliceReport: bool


class CompleteIncident(APIModel):
    incident: Optional[IncidentResponse] = None
    vehicles: List[VehicleResponse] = []
    witnesses: List[WitnessResponse] = []
    evidence: List[EvidenceResponse] = []
    police_report: Optional[PoliceReportResponse] = None
    summary: IncidentSummaryCounts

# ============================================================================
# Insurance Schemas
# ============================================================================

class PolicyCreate(APIInput):
    type: InsuranceType
    company: str = Field(..., min_length=1, max_length=255)
    policy_number: str = Field(..., min_length=1, max_length=100)
    policy_holder: str = Field(..., min_length=1, max_length=200)
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    premium: Optional[float] = Field(None, ge=0)
    deductible: float = Field(0, ge=0)
    coverage_limits: Dict[str, Any] = {}
    status: PolicyStatus = PolicyStatus.ACTIVE
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    agent_email: Optional[EmailStr] = None


class PolicyUpdate(APIInput):
    type: Optional[InsuranceType] = None
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    policy_number: Optional[str] = Field(None, min_length=1, max_length=100)
    policy_holder: Optional[str] = Field(None, min_length=1, max_length=200)
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    premium: Optional[float] = Field(None, ge=0)
    deductible: Optional[float] = Field(None, ge=0)
    coverage_limits: Optional[Dict[str, Any]] = None
    status: Optional[PolicyStatus] = None
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    agent_email: Optional[EmailStr] = None


class PolicyFilter(APIInput):
    type: Optional[InsuranceType] = None
    status: Optional[PolicyStatus] = None
    company: Optional[str] = None


class ClaimCreate(APIInput):
    claim_number: str = Field(..., min_length=1, max_length=100)
    date_reported: date
    status: ClaimStatus = ClaimStatus.OPEN
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    adjuster_name: Optional[str] = None
    adjuster_phone: Optional[str] = None


class ClaimUpdate(APIInput):
    claim_number: Optional[str] = Field(None, min_length=1, max_length=100)
    date_reported: Optional[date] = None
    status: Optional[ClaimStatus] = None
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    adjuster_name: Optional[str] = None
    adjuster_phone: Optional[str] = None


class ClaimFilter(APIInput):
    status: Optional[ClaimStatus] = None
    type: Optional[InsuranceType] = None
    min_amount: Optional[float] = Field(None, ge=0)
    max_amount: Optional[float] = Field(None, ge=0)


class PolicySummary(APIModel):
    id: UUID
    type: InsuranceType
    company: str
    policy_number: str
    status: PolicyStatus
    premium: Optional[float] = None


class ClaimResponse(APIModel):
    id: UUID
    policy_id: UUID
    claim_number: str
    date_reported: date
    status: ClaimStatus
    amount: Optional[float] = None
    description: Optional[str] = None
    adjuster_name: Optional[str] = None
    adjuster_phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ClaimWithPolicy(ClaimResponse):
    policy: PolicySummary


class PolicyResponse(APIModel):
    id: UUID
    case_id: UUID
    type: InsuranceType
    company: str
    policy_number: str
    policy_holder: str
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    premium: Optional[float] = None
    deductible: float
    coverage_limits: Dict[str, Any] = {}
    status: PolicyStatus
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    agent_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    claims: List[ClaimResponse] = []


class PolicyDetail(PolicyResponse):
    case: CaseSummary


class CoverageBucket(APIModel):
    present: bool = False
    policies: List[PolicyResponse] = []
    total_coverage: float = 0
    active_claims: int = 0


class CoverageAnalysis(APIModel):
    auto_insurance: CoverageBucket
    health_insurance: CoverageBucket
    liability_insurance: CoverageBucket
    umbrella_insurance: CoverageBucket
    gaps: List[str] = []
    recommendations: List[str] = []


class LiabilityCoverage(APIModel):
    liability: List[PolicyResponse] = []
    umbrella: List[PolicyResponse] = []
    combined: List[PolicyResponse] = []

# ============================================================================
# Settlement Schemas
# ============================================================================

class SettlementCreate(APIInput):
    type: SettlementType
    amount: float = Field(..., ge=0)
    status: SettlementStatus = SettlementStatus.NEGOTIATING
    description: Optional[str] = None
    attorney_fees: float = Field(0, ge=0)
    costs: float = Field(0, ge=0)
    net_to_client: float = Field(0, ge=0)
    date: Optional[date_type] = None


class SettlementUpdate(APIInput):
    type: Optional[SettlementType] = None
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[SettlementStatus] = None
    description: Optional[str] = None
    attorney_fees: Optional[float] = Field(None, ge=0)
    costs: Optional[float] = Field(None, ge=0)
    net_to_client: Optional[float] = Field(None, ge=0)
    date: Optional[date_type] = None


class SettlementFilter(APIInput):
    type: Optional[SettlementType] = None
    status: Optional[SettlementStatus] = None


class SettlementResponse(APIModel):
    id: UUID
    case_id: UUID
    type: SettlementType
    status: SettlementStatus
    amount: float
    description: Optional[str] = None
    attorney_fees: float
    costs: float
    net_to_client: float
    created_at: datetime
    updated_at: datetime
    date: Optional[date_type] = None


class SettlementDetail(SettlementResponse):
    case: CaseSummary


class LienCreate(APIInput):
    type: LienType
    creditor: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., ge=0)
    description: Optional[str] = None
    resolved: bool = False

    @field_validator("creditor")
    @classmethod
    def strip_creditor(cls, v):
        return _not_blank(v)


class LienUpdate(APIInput):
    type: Optional[LienType] = None
    creditor: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    resolved: Optional[bool] = None


class LienFilter(APIInput):
    type: Optional[LienType] = None
    resolved: Optional[bool] = None


class LienResponse(APIModel):
    id: UUID
    case_id: UUID
    type: LienType
    creditor: str
    amount: float
    description: Optional[str] = None
    resolved: bool
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SettlementTotals(APIModel):
    total: int = 0
    total_amount: float = 0
    total_attorney_fees: float = 0
    total_costs: float = 0
    total_net_to_client: float = 0


class LienTotals(APIModel):
    total: int = 0
    unresolved: int = 0
    total_amount: float = 0
    unresolved_amount: float = 0


class ExpenseTotals(APIModel):
    total_medical_bills: float = 0
    total_insurance_claims: float = 0
    total_expenses: float = 0


class SettlementAnalysis(APIModel):
    settlements: SettlementTotals
    liens: LienTotals
    expenses: ExpenseTotals
    net_recovery: float = 0


class EstimatedValue(APIModel):
    economic_damages: float
    pain_and_suffering: float
    total_damages: float


class SettlementDeductions(APIModel):
    attorney_fees: float
    estimated_costs: float
    liens: float
    total_deductions: float


class SettlementCalculation(APIModel):
    estimated_value: EstimatedValue
    deductions: SettlementDeductions
    net_to_client: float
    recommendation: str

# ============================================================================
# Case Overview
# ============================================================================

class CaseStatistics(APIModel):
    total_medical_bills: float = 0
    documents_count: int = 0
    tasks_stats: Dict[str, int] = {}
    insurance_policies: List[PolicySummary] = []
    case_age: int = 0


class CaseOverview(CaseDetail):
    statistics: CaseStatistics = CaseStatistics()


class ClientCaseDetail(CaseSummary):
    assignments: List[AssignmentResponse] = []
    tasks: List[TaskResponse] = []
    medical_providers: List[ProviderResponse] = []
    insurance_policies: List[PolicySummary] = []
    incident: Optional[IncidentResponse] = None


class ClientDetailed(ClientDetail):
    cases: List[ClientCaseDetail] = []
