# legal_estate/db/seed.py

"""
Database Seeding Script

Creates staff accounts and one fully populated sample case for development.

    python -m legal_estate.db.seed
"""

import asyncio
from datetime import date

from sqlalchemy import select

from legal_estate.core.config import settings
from legal_estate.core.logger import logger
from legal_estate.core.security import get_password_hash
from legal_estate.db.database import Database
from legal_estate.db.models import (
    Address,
    AddressType,
    Case,
    CaseAssignment,
    CaseStatus,
    CaseType,
    Client,
    CommunicationMethod,
    CommunicationPreference,
    ContactInfo,
    ContactType,
    EmergencyContact,
    Employment,
    FamilyMember,
    Gender,
    Incident,
    Injury,
    InjurySeverity,
    InsuranceClaim,
    InsurancePolicy,
    InsuranceType,
    Lien,
    LienType,
    MaritalStatus,
    MedicalProvider,
    MedicalRecord,
    PoliceReport,
    ProviderStatus,
    Settlement,
    SettlementType,
    User,
    UserRole,
)

DEFAULT_PASSWORD = "password123"

STAFF = [
    ("admin@legal-estate.com", "System", "Administrator", UserRole.ADMIN),
    ("john.smith@legal-estate.com", "John", "Smith", UserRole.ATTORNEY),
    ("sarah.johnson@legal-estate.com", "Sarah", "Johnson", UserRole.ATTORNEY),
    ("alexis.camacho@legal-estate.com", "Alexis", "Camacho", UserRole.PARALEGAL),
]

# ============================================================================
# Seed Data
# ============================================================================

async def seed_users(session) -> dict:
    users = {}
    for email, first_name, last_name, role in STAFF:
        user = await session.scalar(select(User).where(User.email == email))
        if user is None:
            user = User(
                email=email,
                password_hash=get_password_hash(DEFAULT_PASSWORD),
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
            session.add(user)
        users[email] = user
    await session.flush()
    return users


def sample_client() -> Client:
    client = Client(
        first_name="Patricia",
        last_name="Thowerd",
        middle_name="Anne",
        date_of_birth=date(1974, 3, 5),
        ssn="123-45-8723",
        gender=Gender.FEMALE,
        marital_status=MaritalStatus.MARRIED,
        citizenship="US Citizen",
        languages=["English", "Spanish (Conversational)"],
    )
    client.contacts = [
        ContactInfo(type=ContactType.PHONE, value="(714) 721-6882", label="Primary", primary=True),
        ContactInfo(type=ContactType.MOBILE, value="(714) 555-0123", label="Mobile"),
        ContactInfo(type=ContactType.EMAIL, value="patricia.thowerd@email.com", label="Personal", primary=True),
    ]
    client.addresses = [
        Address(
            type=AddressType.HOME,
            street="3821 Campus Drive, B-1",
            city="Newport Beach",
            state="CA",
            zip_code="92660",
            primary=True,
        ),
    ]
    client.emergency_contacts = [
        EmergencyContact(
            name="Michael Thowerd",
            relationship_to_client="Spouse",
            phone="(714) 555-0789",
            email="michael.thowerd@email.com",
            address="3821 Campus Drive, B-1, Newport Beach, CA 92660",
            primary=True,
        ),
        EmergencyContact(
            name="Sarah Johnson",
            relationship_to_client="Sister",
            phone="(949) 555-0123",
            email="sarah.johnson@email.com",
        ),
    ]
    client.family_members = [
        FamilyMember(name="Michael James Thowerd", relationship_to_client="Spouse", date_of_birth=date(1972, 8, 12)),
        FamilyMember(name="Emma Thowerd", relationship_to_client="Daughter", date_of_birth=date(2005, 6, 18), dependent=True),
        FamilyMember(name="Jacob Thowerd", relationship_to_client="Son", date_of_birth=date(2008, 11, 22), dependent=True),
    ]
    client.employment = Employment(
        employer="Newport Financial Group",
        position="Senior Financial Analyst",
        employer_phone="(714) 555-0456",
        employer_address="1200 Newport Center Dr, Newport Beach, CA 92660",
        supervisor_name="Janet Martinez",
        start_date=date(2018, 1, 15),
        annual_salary=85000,
        hours_per_week=40,
    )
    client.communication_prefs = CommunicationPreference(
        preferred_method=CommunicationMethod.EMAIL,
        best_time_to_contact="Weekdays 9 AM - 5 PM",
        preferred_language="English",
        notes="Please avoid calling after 7 PM. Email is preferred for non-urgent matters.",
    )
    return client


def sample_case(client: Client, attorney: User, paralegal: User) -> Case:
    case = Case(
        case_number=f"{settings.CASE_NUMBER_PREFIX}-2015-001",
        title="Thowerd v. Martinez - Auto Accident",
        case_type=CaseType.AUTO_ACCIDENT,
        status=CaseStatus.ACTIVE,
        date_of_loss=date(2015, 9, 20),
        description="T-bone collision at controlled intersection. Client proceeding through "
                    "green light when defendant ran red light.",
        referral_source="Referral from Friend",
        client=client,
        created_by_id=attorney.id,
    )
    case.assignments = [
        CaseAssignment(user_id=attorney.id, role="Primary Attorney"),
        CaseAssignment(user_id=paralegal.id, role="Case Assistant"),
    ]

    incident = Incident(
        date_of_loss=date(2015, 9, 20),
        time_of_incident="3:45 PM",
        location="1200 Newport Center Dr",
        city="Newport Beach",
        state="CA",
        zip_code="92660",
        weather="Clear",
        lighting_conditions="Daylight",
        road_conditions="Dry",
        incident_type="Motor Vehicle Accident",
        sub_type="Intersection Collision",
        severity=InjurySeverity.SEVERE,
        description="Defendant ran a red light and struck the driver side of the client's vehicle.",
        cause_factors=["Running Red Light", "Failure to Yield", "Speeding"],
    )
    incident.police_report = PoliceReport(
        report_filed=True,
        report_number="NPB-2015-09-4578",
        responding_officer="Officer James Wilson",
        police_station="Newport Beach Police Department",
        report_date=date(2015, 9, 20),
    )
    case.incident = incident

    # totals match the records below
    emergency = MedicalProvider(
        name="Newport Beach Medical Center",
        type="Emergency Room",
        phone="(714) 760-5555",
        address="1100 Newport Center Dr, Newport Beach, CA 92660",
        date_first_seen=date(2015, 9, 20),
        date_last_seen=date(2015, 9, 20),
        total_bills=15420.00,
        status=ProviderStatus.COMPLETED,
    )
    surgeon = MedicalProvider(
        name="Dr. Sarah Chen - Orthopedic Surgery",
        type="Orthopedic Surgeon",
        phone="(714) 555-0123",
        address="3800 Chapman Ave, Orange, CA 92868",
        date_first_seen=date(2015, 9, 25),
        date_last_seen=date(2016, 3, 15),
        total_bills=28750.00,
        status=ProviderStatus.COMPLETED,
    )
    case.medical_providers = [emergency, surgeon]
    case.medical_records = [
        MedicalRecord(provider=emergency, date=date(2015, 9, 20), type="Emergency Visit",
                      cost=15420.00, bill_received=True, records_received=True),
        MedicalRecord(provider=surgeon, date=date(2015, 10, 12), type="ACL Reconstruction",
                      cost=28750.00, bill_received=True, records_received=False),
    ]
    case.injuries = [
        Injury(body_part="Right Knee", description="Torn ACL and meniscus damage",
               severity=InjurySeverity.SEVERE, date_reported=date(2015, 9, 20),
               current_status="Surgically repaired, ongoing PT"),
        Injury(body_part="Lower Back", description="Lumbar strain and muscle spasms",
               severity=InjurySeverity.MODERATE, date_reported=date(2015, 9, 21),
               current_status="Improved with physical therapy"),
    ]

    policy = InsurancePolicy(
        type=InsuranceType.AUTO,
        company="State Farm",
        policy_number="SF-789456123",
        policy_holder="Patricia Thowerd",
        effective_date=date(2015, 1, 15),
        expiration_date=date(2016, 1, 15),
        premium=1200,
        deductible=500,
        coverage_limits={
            "bodilyInjury": "$100,000/$300,000",
            "propertyDamage": "$50,000",
            "uninsuredMotorist": "$100,000/$300,000",
            "medicalPayments": "$5,000",
        },
        agent_name="Sarah Martinez",
        agent_phone="(714) 555-0123",
        agent_email="smartinez@statefarm.com",
    )
    policy.claims = [
        InsuranceClaim(
            claim_number="SF-2015-09-456123",
            date_reported=date(2015, 9, 20),
            amount=25000,
            description="Auto accident claim for vehicle damage and medical expenses",
        ),
    ]
    case.insurance_policies = [policy]
    case.settlements = [
        Settlement(
            type=SettlementType.DEMAND,
            amount=175000,
            date=date(2016, 6, 1),
            description="Policy-limits demand based on medical expenses and pain and suffering",
        ),
    ]
    case.liens = [
        Lien(type=LienType.MEDICAL, creditor="Newport Beach Medical Center", amount=15420.00,
             description="Emergency room treatment and diagnostic imaging"),
    ]
    return case


async def seed(database: Database) -> None:
    await database.create_all()
    async with database.transaction() as session:
        users = await seed_users(session)
        exists = await session.scalar(
            select(Case.id).where(Case.case_number == f"{settings.CASE_NUMBER_PREFIX}-2015-001")
        )
        if exists is not None:
            logger.info("Sample case already present, skipping")
            return
        case = sample_case(
            sample_client(),
            users["john.smith@legal-estate.com"],
            users["alexis.camacho@legal-estate.com"],
        )
        session.add(case)

    logger.info(f"Seeded {len(STAFF)} users and case {case.case_number} ({case.title})")


async def main() -> None:
    database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        await seed(database)
    finally:
        await database.dispose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
