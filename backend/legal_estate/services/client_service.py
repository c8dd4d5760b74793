# legal_estate/services/client_service.py

from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import (
    Address,
    Case,
    CaseAssignment,
    CaseTask,
    Client,
    CommunicationPreference,
    ContactInfo,
    EmergencyContact,
    Employment,
    FamilyMember,
    Incident,
    PoliceReport,
    TaskStatus,
)
from legal_estate.db.schemas import (
    AddressCreate,
    AddressResponse,
    CaseSummary,
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
)
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import ClientNotFoundError
from legal_estate.utils.helpers import icontains, page_meta, page_offset


def client_detail_options():
    return (
        selectinload(Client.contacts),
        selectinload(Client.addresses),
        selectinload(Client.emergency_contacts),
        selectinload(Client.family_members),
        selectinload(Client.employment),
        selectinload(Client.communication_prefs),
    )


class ClientService(BaseService):
    """
    Service layer for clients. Removing a client only deactivates it.
    """

    async def create_client(self, payload: ClientCreate) -> ClientDetail:
        data = payload.model_dump(exclude={"contacts", "addresses"})
        async with self.db.transaction() as session:
            client = Client(**data)
            client.contacts = [ContactInfo(**c.model_dump()) for c in payload.contacts]
            client.addresses = [Address(**a.model_dump()) for a in payload.addresses]
            session.add(client)

        logger.info(f"Client created: {client.id} ({client.last_name}, {client.first_name})")
        return await self.find_one(client.id)

    async def find_all(self, filters: ClientFilter) -> dict:
        conditions = [Client.active.is_(True)]
        if filters.search:
            term = filters.search
            conditions.append(or_(
                icontains(Client.first_name, term),
                icontains(Client.last_name, term),
                Client.contacts.any(icontains(ContactInfo.value, term)),
            ))
        case_conditions = []
        if filters.status:
            case_conditions.append(Case.status == filters.status)
        if filters.case_type:
            case_conditions.append(Case.case_type == filters.case_type)
        if case_conditions:
            conditions.append(Client.cases.any(*case_conditions))

        case_count = (
            select(func.count(Case.id))
            .where(Case.client_id == Client.id)
            .correlate(Client)
            .scalar_subquery()
        )
        stmt = (
            select(Client, case_count)
            .where(*conditions)
            .options(selectinload(Client.contacts), selectinload(Client.cases))
            .order_by(Client.created_at.desc(), Client.id)
            .offset(page_offset(filters.page, filters.limit))
            .limit(filters.limit)
        )
        rows, total = await self.gather(
            self.fetch_rows(stmt),
            self.count(Client, *conditions),
        )

        data = []
        for client, cases in rows:
            primary_contacts = sorted(client.contacts, key=lambda c: not c.primary)[:2]
            latest = max(client.cases, key=lambda c: c.created_at, default=None)
            item = ClientListItem.model_validate(client).model_copy(update={
                "contacts": [ContactInfoResponse.model_validate(c) for c in primary_contacts],
                "latest_case": CaseSummary.model_validate(latest) if latest else None,
                "case_count": cases,
            })
            data.append(item)
        return {"data": data, "meta": page_meta(total, filters.page, filters.limit)}

    async def find_one(self, client_id: UUID) -> ClientDetail:
        """
        Returned regardless of the active flag.
        """
        client = await self.fetch_first(
            select(Client)
            .where(Client.id == client_id)
            .options(*client_detail_options(), selectinload(Client.cases))
        )
        if client is None:
            raise ClientNotFoundError()
        client.cases.sort(key=lambda c: c.created_at, reverse=True)
        return ClientDetail.model_validate(client)

    async def find_detailed(self, client_id: UUID) -> ClientDetailed:
        open_tasks = Case.tasks.and_(CaseTask.status.in_((TaskStatus.PENDING, TaskStatus.IN_PROGRESS)))
        client = await self.fetch_first(
            select(Client)
            .where(Client.id == client_id)
            .options(
                *client_detail_options(),
                selectinload(Client.cases).options(
                    selectinload(Case.assignments).selectinload(CaseAssignment.user),
                    selectinload(open_tasks).options(
                        selectinload(CaseTask.assigned_to),
                        selectinload(CaseTask.created_by),
                    ),
                    selectinload(Case.medical_providers),
                    selectinload(Case.insurance_policies),
                    selectinload(Case.incident)
                    .selectinload(Incident.police_report)
                    .selectinload(PoliceReport.citations),
                ),
            )
        )
        if client is None:
            raise ClientNotFoundError()
        client.cases.sort(key=lambda c: c.created_at, reverse=True)
        return ClientDetailed.model_validate(client)

    async def update_client(self, client_id: UUID, payload: ClientUpdate) -> ClientResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            client = await session.get(Client, client_id)
            if client is None:
                raise ClientNotFoundError()
            apply_changes(client, changes)

        logger.info(f"Client updated: {client_id} fields={sorted(changes)}")
        return ClientResponse.model_validate(client)

    async def remove_client(self, client_id: UUID) -> dict:
        async with self.db.transaction() as session:
            client = await session.get(Client, client_id)
            if client is None:
                raise ClientNotFoundError()
            client.active = False

        logger.info(f"Client deactivated: {client_id}")
        return {"message": "Client deactivated successfully"}

    # ========================================================================
    # Child records
    # ========================================================================

    async def _add_child(self, client_id: UUID, child):
        async with self.db.transaction() as session:
            if await session.get(Client, client_id) is None:
                raise ClientNotFoundError()
            child.client_id = client_id
            session.add(child)
        logger.info(f"{type(child).__name__} added to client {client_id}")
        return child

    async def add_contact(self, client_id: UUID, payload: ContactInfoCreate) -> ContactInfoResponse:
        contact = await self._add_child(client_id, ContactInfo(**payload.model_dump()))
        return ContactInfoResponse.model_validate(contact)

    async def add_address(self, client_id: UUID, payload: AddressCreate) -> AddressResponse:
        address = await self._add_child(client_id, Address(**payload.model_dump()))
        return AddressResponse.model_validate(address)

    async def add_emergency_contact(self, client_id: UUID, payload: EmergencyContactCreate) -> EmergencyContactResponse:
        contact = await self._add_child(client_id, EmergencyContact(**payload.model_dump()))
        return EmergencyContactResponse.model_validate(contact)

    async def add_family_member(self, client_id: UUID, payload: FamilyMemberCreate) -> FamilyMemberResponse:
        member = await self._add_child(client_id, FamilyMember(**payload.model_dump()))
        return FamilyMemberResponse.model_validate(member)

    async def _upsert_one_to_one(self, client_id: UUID, model, changes: dict):
        async with self.db.transaction() as session:
            if await session.get(Client, client_id) is None:
                raise ClientNotFoundError()
            record: Optional[object] = await session.scalar(select(model).where(model.client_id == client_id))
            if record is None:
                record = model(client_id=client_id)
                session.add(record)
            apply_changes(record, changes)
        logger.info(f"{model.__name__} saved for client {client_id}")
        return record

    async def upsert_employment(self, client_id: UUID, payload: EmploymentUpsert) -> EmploymentResponse:
        record = await self._upsert_one_to_one(client_id, Employment, payload.model_dump(exclude_unset=True))
        return EmploymentResponse.model_validate(record)

    async def upsert_communication_prefs(
        self, client_id: UUID, payload: CommunicationPreferenceUpsert
    ) -> CommunicationPreferenceResponse:
        record = await self._upsert_one_to_one(
            client_id, CommunicationPreference, payload.model_dump(exclude_unset=True)
        )
        return CommunicationPreferenceResponse.model_validate(record)
