"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from legal_estate.db.database import Base
from legal_estate.utils.helpers import utcnow

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# ============================================================================
# Enums
# ============================================================================

class UserRole(str, enum.Enum):
    """Staff roles"""
    ADMIN = "ADMIN"
    ATTORNEY = "ATTORNEY"
    PARALEGAL = "PARALEGAL"
    ASSISTANT = "ASSISTANT"
    INVESTIGATOR = "INVESTIGATOR"
    CASE_MANAGER = "CASE_MANAGER"

class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"

class MaritalStatus(str, enum.Enum):
    SINGLE = "SINGLE"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    WIDOWED = "WIDOWED"
    SEPARATED = "SEPARATED"

class ContactType(str, enum.Enum):
    PHONE = "PHONE"
    MOBILE = "MOBILE"
    EMAIL = "EMAIL"
    FAX = "FAX"
    WORK = "WORK"

class AddressType(str, enum.Enum):
    HOME = "HOME"
    WORK = "WORK"
    MAILING = "MAILING"
    OTHER = "OTHER"

class CommunicationMethod(str, enum.Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    TEXT = "TEXT"
    MAIL = "MAIL"

class CaseType(str, enum.Enum):
    """Personal-injury matter types"""
    AUTO_ACCIDENT = "AUTO_ACCIDENT"
    SLIP_AND_FALL = "SLIP_AND_FALL"
    MEDICAL_MALPRACTICE = "MEDICAL_MALPRACTICE"
    PRODUCT_LIABILITY = "PRODUCT_LIABILITY"
    WORKERS_COMPENSATION = "WORKERS_COMPENSATION"
    WRONGFUL_DEATH = "WRONGFUL_DEATH"
    PREMISES_LIABILITY = "PREMISES_LIABILITY"
    DOG_BITE = "DOG_BITE"
    OTHER = "OTHER"

class CaseStatus(str, enum.Enum):
    """Case status enum"""
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    ON_HOLD = "ON_HOLD"
    SETTLED = "SETTLED"
    CLOSED = "CLOSED"

class InjurySeverity(str, enum.Enum):
    MINOR = "MINOR"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"
    CRITICAL = "CRITICAL"

class ProviderStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"

class InsuranceType(str, enum.Enum):
    AUTO = "AUTO"
    HEALTH = "HEALTH"
    LIABILITY = "LIABILITY"
    UMBRELLA = "UMBRELLA"
    WORKERS_COMP = "WORKERS_COMP"
    PROPERTY = "PROPERTY"
    OTHER = "OTHER"

class PolicyStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    PENDING = "PENDING"

class ClaimStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    PENDING = "PENDING"
    DENIED = "DENIED"

class DocumentType(str, enum.Enum):
    MEDICAL_RECORD = "MEDICAL_RECORD"
    MEDICAL_BILL = "MEDICAL_BILL"
    POLICE_REPORT = "POLICE_REPORT"
    INSURANCE = "INSURANCE"
    CORRESPONDENCE = "CORRESPONDENCE"
    PHOTO = "PHOTO"
    VIDEO = "VIDEO"
    LEGAL = "LEGAL"
    OTHER = "OTHER"

class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

class NoteType(str, enum.Enum):
    GENERAL = "GENERAL"
    PHONE_CALL = "PHONE_CALL"
    MEETING = "MEETING"
    EMAIL = "EMAIL"
    COURT = "COURT"
    INTERNAL = "INTERNAL"

class EvidenceType(str, enum.Enum):
    PHOTO = "PHOTO"
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    PHYSICAL = "PHYSICAL"
    TESTIMONY = "TESTIMONY"
    OTHER = "OTHER"

class EvidenceStatus(str, enum.Enum):
    COLLECTED = "COLLECTED"
    PROCESSING = "PROCESSING"
    ANALYZED = "ANALYZED"
    STORED = "STORED"

class SettlementType(str, enum.Enum):
    DEMAND = "DEMAND"
    OFFER = "OFFER"
    COUNTER_OFFER = "COUNTER_OFFER"
    FINAL = "FINAL"

class SettlementStatus(str, enum.Enum):
    NEGOTIATING = "NEGOTIATING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    PAID = "PAID"

class LienType(str, enum.Enum):
    MEDICAL = "MEDICAL"
    HEALTH_INSURANCE = "HEALTH_INSURANCE"
    MEDICARE = "MEDICARE"
    MEDICAID = "MEDICAID"
    ATTORNEY = "ATTORNEY"
    OTHER = "OTHER"


def _case_fk():
    return Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)


def _client_fk():
    return Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)


# Case-owned collections: deleted with the case, by the database
CASE_CHILD = dict(cascade="all, delete-orphan", passive_deletes=True)

# ============================================================================
# Users
# ============================================================================

class User(Base):
    """Firm staff member"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.ATTORNEY)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)
    last_login_at = Column(TIMESTAMP, nullable=True)

    # Relationships
    assignments = relationship("CaseAssignment", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

# ============================================================================
# Clients
# ============================================================================

class Client(Base):
    """Person represented by the firm"""
    __tablename__ = "clients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    ssn = Column(String(20), nullable=True)
    gender = Column(SQLEnum(Gender, name="gender"), nullable=True)
    marital_status = Column(SQLEnum(MaritalStatus, name="marital_status"), nullable=True)
    citizenship = Column(String(100), nullable=True)
    languages = Column(JSONType, nullable=False, default=list)
    photo = Column(String(500), nullable=True)

    # Soft delete flag
    active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    contacts = relationship("ContactInfo", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    addresses = relationship("Address", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    emergency_contacts = relationship("EmergencyContact", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    family_members = relationship("FamilyMember", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    employment = relationship("Employment", back_populates="client", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    communication_prefs = relationship("CommunicationPreference", back_populates="client", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    cases = relationship("Case", back_populates="client")


class ContactInfo(Base):
    __tablename__ = "contact_info"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = _client_fk()
    type = Column(SQLEnum(ContactType, name="contact_type"), nullable=False)
    value = Column(String(255), nullable=False)
    label = Column(String(100), nullable=True)
    primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    client = relationship("Client", back_populates="contacts")


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = _client_fk()
    type = Column(SQLEnum(AddressType, name="address_type"), nullable=False, default=AddressType.HOME)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="United States")
    primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    client = relationship("Client", back_populates="addresses")


class EmergencyContact(Base):
    __tablename__ = "emergency_contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = _client_fk()
    name = Column(String(200), nullable=False)
    relationship_to_client = Column("relationship", String(100), nullable=False)
    phone = Column(String(30), nullable=False)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    client = relationship("Client", back_populates="emergency_contacts")


class FamilyMember(Base):
    __tablename__ = "family_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = _client_fk()
    name = Column(String(200), nullable=False)
    relationship_to_client = Column("relationship", String(100), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    phone = Column(String(30), nullable=True)
    dependent = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    client = relationship("Client", back_populates="family_members")


class Employment(Base):
    __tablename__ = "employment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, unique=True)
    employer = Column(String(255), nullable=True)
    position = Column(String(255), nullable=True)
    employer_phone = Column(String(30), nullable=True)
    employer_address = Column(String(500), nullable=True)
    supervisor_name = Column(String(200), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    hours_per_week = Column(Float, nullable=True)
    annual_salary = Column(Float, nullable=True)
    missed_work_days = Column(Integer, nullable=False, default=0)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    client = relationship("Client", back_populates="employment")


class CommunicationPreference(Base):
    __tablename__ = "communication_preferences"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, unique=True)
    preferred_method = Column(SQLEnum(CommunicationMethod, name="communication_method"), nullable=False, default=CommunicationMethod.PHONE)
    best_time_to_contact = Column(String(100), nullable=True)
    preferred_language = Column(String(50), nullable=True)
    allow_text = Column(Boolean, nullable=False, default=True)
    allow_email = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    client = relationship("Client", back_populates="communication_prefs")

# ============================================================================
# Cases
# ============================================================================

class Case(Base):
    """Legal matter"""
    __tablename__ = "cases"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    case_number = Column(String(50), unique=True, nullable=False, index=True)
    title = Column(String(500), nullable=False)
    case_type = Column(SQLEnum(CaseType, name="case_type"), nullable=False)
    status = Column(SQLEnum(CaseStatus, name="case_status"), nullable=False, default=CaseStatus.ACTIVE)
    date_of_loss = Column(Date, nullable=True)
    statute_of_limitations = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    referral_source = Column(String(255), nullable=True)
    referred_by = Column(String(255), nullable=True)

    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    client = relationship("Client", back_populates="cases")
    created_by = relationship("User", foreign_keys=[created_by_id])
    assignments = relationship("CaseAssignment", back_populates="case", **CASE_CHILD)
    tasks = relationship("CaseTask", back_populates="case", **CASE_CHILD)
    notes = relationship("CaseNote", back_populates="case", **CASE_CHILD)
    documents = relationship("Document", back_populates="case", **CASE_CHILD)
    medical_providers = relationship("MedicalProvider", back_populates="case", **CASE_CHILD)
    medical_records = relationship("MedicalRecord", back_populates="case", **CASE_CHILD)
    injuries = relationship("Injury", back_populates="case", **CASE_CHILD)
    insurance_policies = relationship("InsurancePolicy", back_populates="case", **CASE_CHILD)
    incident = relationship("Incident", back_populates="case", uselist=False, **CASE_CHILD)
    vehicles = relationship("Vehicle", back_populates="case", **CASE_CHILD)
    witnesses = relationship("Witness", back_populates="case", **CASE_CHILD)
    evidence = relationship("Evidence", back_populates="case", **CASE_CHILD)
    settlements = relationship("Settlement", back_populates="case", **CASE_CHILD)
    liens = relationship("Lien", back_populates="case", **CASE_CHILD)

    __table_args__ = (
        Index("idx_cases_status_type", "status", "case_type"),
    )


class CaseAssignment(Base):
    """Named role linking a staff user to a case"""
    __tablename__ = "case_assignments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(100), nullable=False)
    assigned_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    case = relationship("Case", back_populates="assignments")
    user = relationship("User", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("case_id", "user_id", "role", name="uq_case_assignment_role"),
    )


class CaseTask(Base):
    __tablename__ = "case_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(TaskStatus, name="task_status"), nullable=False, default=TaskStatus.PENDING)
    priority = Column(SQLEnum(TaskPriority, name="task_priority"), nullable=False, default=TaskPriority.MEDIUM)
    due_date = Column(TIMESTAMP, nullable=True)
    completed_at = Column(TIMESTAMP, nullable=True)

    assigned_to_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="tasks")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    created_by = relationship("User", foreign_keys=[created_by_id])


class CaseNote(Base):
    __tablename__ = "case_notes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    title = Column(String(500), nullable=True)
    content = Column(Text, nullable=False)
    type = Column(SQLEnum(NoteType, name="note_type"), nullable=False, default=NoteType.GENERAL)
    author_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="notes")
    author = relationship("User")

# ============================================================================
# Incident
# ============================================================================

class Incident(Base):
    """Event underlying the case (one per case)"""
    __tablename__ = "incidents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, unique=True)

    date_of_loss = Column(Date, nullable=False)
    time_of_incident = Column(String(20), nullable=True)
    location = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(20), nullable=True)
    coordinates = Column(String(100), nullable=True)
    weather = Column(String(100), nullable=True)
    lighting_conditions = Column(String(100), nullable=True)
    road_conditions = Column(String(100), nullable=True)
    incident_type = Column(String(100), nullable=False)
    sub_type = Column(String(100), nullable=True)
    severity = Column(SQLEnum(InjurySeverity, name="injury_severity"), nullable=True)
    description = Column(Text, nullable=True)
    cause_factors = Column(JSONType, nullable=False, default=list)

    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="incident")
    police_report = relationship("PoliceReport", back_populates="incident", uselist=False, cascade="all, delete-orphan", passive_deletes=True)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    year = Column(Integer, nullable=True)
    make = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    color = Column(String(50), nullable=True)
    license_plate = Column(String(20), nullable=True)
    vin = Column(String(50), nullable=True)
    owner = Column(String(200), nullable=True)
    driver = Column(String(200), nullable=True)
    passengers = Column(JSONType, nullable=False, default=list)
    insurance_company = Column(String(200), nullable=True)
    policy_number = Column(String(100), nullable=True)
    damages = Column(Text, nullable=True)
    towed_to = Column(String(255), nullable=True)
    is_client_vehicle = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    case = relationship("Case", back_populates="vehicles")


class Witness(Base):
    __tablename__ = "witnesses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    relationship_to_client = Column("relationship", String(100), nullable=True)
    statement = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    case = relationship("Case", back_populates="witnesses")


class Evidence(Base):
    __tablename__ = "evidence"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    type = Column(SQLEnum(EvidenceType, name="evidence_type"), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=True)
    collected_by = Column(String(200), nullable=True)
    date_collected = Column(Date, nullable=True)
    status = Column(SQLEnum(EvidenceStatus, name="evidence_status"), nullable=False, default=EvidenceStatus.COLLECTED)
    file_path = Column(String(500), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    case = relationship("Case", back_populates="evidence")


class PoliceReport(Base):
    __tablename__ = "police_reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    incident_id = Column(Uuid, ForeignKey("incidents.id", ondelete="CASCADE"), nullable=False, unique=True)
    report_filed = Column(Boolean, nullable=False, default=False)
    report_number = Column(String(100), nullable=True)
    responding_officer = Column(String(200), nullable=True)
    police_station = Column(String(200), nullable=True)
    report_date = Column(Date, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    incident = relationship("Incident", back_populates="police_report")
    citations = relationship("Citation", back_populates="police_report", cascade="all, delete-orphan", passive_deletes=True)


class Citation(Base):
    __tablename__ = "citations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    police_report_id = Column(Uuid, ForeignKey("police_reports.id", ondelete="CASCADE"), nullable=False, index=True)
    issued_to = Column(String(200), nullable=False)
    violation = Column(String(500), nullable=False)
    code_section = Column(String(100), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    police_report = relationship("PoliceReport", back_populates="citations")

# ============================================================================
# Medical
# ============================================================================

class MedicalProvider(Base):
    """Treating entity; total_bills mirrors the sum of its record costs"""
    __tablename__ = "medical_providers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    date_first_seen = Column(Date, nullable=True)
    date_last_seen = Column(Date, nullable=True)
    total_bills = Column(Float, nullable=False, default=0)
    status = Column(SQLEnum(ProviderStatus, name="provider_status"), nullable=False, default=ProviderStatus.ACTIVE)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="medical_providers")
    medical_records = relationship("MedicalRecord", back_populates="provider", passive_deletes=True)


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    provider_id = Column(Uuid, ForeignKey("medical_providers.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(Date, nullable=False)
    type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    cost = Column(Float, nullable=False, default=0)
    bill_received = Column(Boolean, nullable=False, default=False)
    records_received = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="medical_records")
    provider = relationship("MedicalProvider", back_populates="medical_records")


class Injury(Base):
    __tablename__ = "injuries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    body_part = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    severity = Column(SQLEnum(InjurySeverity, name="injury_severity"), nullable=False)
    date_reported = Column(Date, nullable=True)
    current_status = Column(String(255), nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="injuries")

# ============================================================================
# Insurance
# ============================================================================

class InsurancePolicy(Base):
    __tablename__ = "insurance_policies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    type = Column(SQLEnum(InsuranceType, name="insurance_type"), nullable=False)
    company = Column(String(255), nullable=False)
    policy_number = Column(String(100), nullable=False)
    policy_holder = Column(String(200), nullable=False)
    effective_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    premium = Column(Float, nullable=True)
    deductible = Column(Float, nullable=False, default=0)
    coverage_limits = Column(JSONType, nullable=False, default=dict)
    status = Column(SQLEnum(PolicyStatus, name="policy_status"), nullable=False, default=PolicyStatus.ACTIVE)
    agent_name = Column(String(200), nullable=True)
    agent_phone = Column(String(30), nullable=True)
    agent_email = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="insurance_policies")
    claims = relationship("InsuranceClaim", back_populates="policy", cascade="all, delete-orphan", passive_deletes=True)


class InsuranceClaim(Base):
    __tablename__ = "insurance_claims"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    policy_id = Column(Uuid, ForeignKey("insurance_policies.id", ondelete="CASCADE"), nullable=False, index=True)
    claim_number = Column(String(100), nullable=False)
    date_reported = Column(Date, nullable=False)
    status = Column(SQLEnum(ClaimStatus, name="claim_status"), nullable=False, default=ClaimStatus.OPEN)
    amount = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    adjuster_name = Column(String(200), nullable=True)
    adjuster_phone = Column(String(30), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    policy = relationship("InsurancePolicy", back_populates="claims")

# ============================================================================
# Settlements
# ============================================================================

class Settlement(Base):
    """Demand, offer or agreed settlement amount with its fee split"""
    __tablename__ = "settlements"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    type = Column(SQLEnum(SettlementType, name="settlement_type"), nullable=False)
    status = Column(SQLEnum(SettlementStatus, name="settlement_status"), nullable=False, default=SettlementStatus.NEGOTIATING)
    amount = Column(Float, nullable=False)
    date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    attorney_fees = Column(Float, nullable=False, default=0)
    costs = Column(Float, nullable=False, default=0)
    net_to_client = Column(Float, nullable=False, default=0)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="settlements")


class Lien(Base):
    """Third-party claim to be paid out of a recovery"""
    __tablename__ = "liens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    type = Column(SQLEnum(LienType, name="lien_type"), nullable=False)
    creditor = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)
    resolved_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="liens")

# ============================================================================
# Documents
# ============================================================================

class Document(Base):
    """Uploaded file metadata; the bytes live in document storage"""
    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = _case_fk()
    name = Column(String(255), nullable=False)
    type = Column(SQLEnum(DocumentType, name="document_type"), nullable=False)
    category = Column(String(100), nullable=True, index=True)
    description = Column(Text, nullable=True)

    # Storage
    file_path = Column(String(1024), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)

    uploaded_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    uploaded_at = Column(TIMESTAMP, nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=utcnow, onupdate=utcnow)

    case = relationship("Case", back_populates="documents")
    uploaded_by = relationship("User")
