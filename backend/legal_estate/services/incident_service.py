# legal_estate/services/incident_service.py

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from legal_estate.core.logger import logger
from legal_estate.db.models import Citation, Evidence, Incident, PoliceReport, Vehicle, Witness
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
    IncidentSummaryCounts,
    IncidentUpdate,
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
from legal_estate.services.base_service import BaseService, apply_changes
from legal_estate.utils.exceptions import BadRequestError

INCIDENT_NOT_FOUND = "Incident not found"
POLICE_REPORT_NOT_FOUND = "Police report not found"


def incident_options():
    return (selectinload(Incident.police_report).selectinload(PoliceReport.citations),)


class IncidentService(BaseService):
    """
    Incident details for a case plus the vehicles, witnesses, evidence and
    police report attached to it. A case has at most one incident and an
    incident at most one police report.
    """

    # ========================================================================
    # Incident
    # ========================================================================

    async def get_incident(self, case_id: UUID) -> Optional[IncidentResponse]:
        await self.ensure_case(case_id)
        incident = await self._load_incident(case_id)
        return IncidentResponse.model_validate(incident) if incident else None

    async def _load_incident(self, case_id: UUID) -> Optional[Incident]:
        return await self.fetch_first(
            select(Incident).where(Incident.case_id == case_id).options(*incident_options())
        )

    async def create_incident(self, case_id: UUID, payload: IncidentCreate) -> IncidentResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            existing = await session.scalar(select(Incident.id).where(Incident.case_id == case_id))
            if existing is not None:
                raise BadRequestError("Incident already exists for this case")
            incident = Incident(**payload.model_dump(), case_id=case_id)
            session.add(incident)

        logger.info(f"Incident created for case {case_id}: {incident.incident_type}")
        return IncidentResponse.model_validate(await self._load_incident(case_id))

    async def update_incident(self, incident_id: UUID, payload: IncidentUpdate) -> IncidentResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            incident = await self.get_or_404(session, Incident, incident_id, INCIDENT_NOT_FOUND)
            apply_changes(incident, changes)
            case_id = incident.case_id

        logger.info(f"Incident updated: {incident_id} fields={sorted(changes)}")
        return IncidentResponse.model_validate(await self._load_incident(case_id))

    # ========================================================================
    # Vehicles, witnesses, evidence
    # ========================================================================

    async def _add_case_child(self, case_id: UUID, child):
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            child.case_id = case_id
            session.add(child)
        logger.info(f"{type(child).__name__} added to case {case_id}")
        return child

    async def _update_child(self, model, child_id: UUID, changes: dict, message: str):
        async with self.db.transaction() as session:
            child = await self.get_or_404(session, model, child_id, message)
            apply_changes(child, changes)
        return child

    async def _delete_child(self, model, child_id: UUID, message: str) -> None:
        async with self.db.transaction() as session:
            child = await self.get_or_404(session, model, child_id, message)
            await session.delete(child)
        logger.info(f"{model.__name__} deleted: {child_id}")

    async def get_vehicles(self, case_id: UUID) -> List[Vehicle]:
        await self.ensure_case(case_id)
        return await self.fetch_all(
            select(Vehicle)
            .where(Vehicle.case_id == case_id)
            .order_by(Vehicle.is_client_vehicle.desc(), Vehicle.created_at)
        )

    async def add_vehicle(self, case_id: UUID, payload: VehicleCreate) -> VehicleResponse:
        vehicle = await self._add_case_child(case_id, Vehicle(**payload.model_dump()))
        return VehicleResponse.model_validate(vehicle)

    async def update_vehicle(self, vehicle_id: UUID, payload: VehicleUpdate) -> VehicleResponse:
        vehicle = await self._update_child(
            Vehicle, vehicle_id, payload.model_dump(exclude_unset=True), "Vehicle not found"
        )
        return VehicleResponse.model_validate(vehicle)

    async def delete_vehicle(self, vehicle_id: UUID) -> dict:
        await self._delete_child(Vehicle, vehicle_id, "Vehicle not found")
        return {"message": "Vehicle deleted successfully"}

    async def get_witnesses(self, case_id: UUID) -> List[Witness]:
        await self.ensure_case(case_id)
        return await self.fetch_all(
            select(Witness).where(Witness.case_id == case_id).order_by(Witness.name)
        )

    async def add_witness(self, case_id: UUID, payload: WitnessCreate) -> WitnessResponse:
        witness = await self._add_case_child(case_id, Witness(**payload.model_dump()))
        return WitnessResponse.model_validate(witness)

    async def update_witness(self, witness_id: UUID, payload: WitnessUpdate) -> WitnessResponse:
        witness = await self._update_child(
            Witness, witness_id, payload.model_dump(exclude_unset=True), "Witness not found"
        )
        return WitnessResponse.model_validate(witness)

    async def delete_witness(self, witness_id: UUID) -> dict:
        await self._delete_child(Witness, witness_id, "Witness not found")
        return {"message": "Witness deleted successfully"}

    async def get_evidence(self, case_id: UUID, filters: Optional[EvidenceFilter] = None) -> List[Evidence]:
        await self.ensure_case(case_id)
        stmt = select(Evidence).where(Evidence.case_id == case_id)
        if filters and filters.type:
            stmt = stmt.where(Evidence.type == filters.type)
        if filters and filters.status:
            stmt = stmt.where(Evidence.status == filters.status)
        return await self.fetch_all(
            stmt.order_by(Evidence.date_collected.desc().nulls_last(), Evidence.created_at.desc())
        )

    async def add_evidence(self, case_id: UUID, payload: EvidenceCreate) -> EvidenceResponse:
        evidence = await self._add_case_child(case_id, Evidence(**payload.model_dump()))
        return EvidenceResponse.model_validate(evidence)

    async def update_evidence(self, evidence_id: UUID, payload: EvidenceUpdate) -> EvidenceResponse:
        evidence = await self._update_child(
            Evidence, evidence_id, payload.model_dump(exclude_unset=True), "Evidence not found"
        )
        return EvidenceResponse.model_validate(evidence)

    async def delete_evidence(self, evidence_id: UUID) -> dict:
        await self._delete_child(Evidence, evidence_id, "Evidence not found")
        return {"message": "Evidence deleted successfully"}

    # ========================================================================
    # Police report
    # ========================================================================

    async def _load_report(self, *conditions) -> Optional[PoliceReport]:
        return await self.fetch_first(
            select(PoliceReport).where(*conditions).options(selectinload(PoliceReport.citations))
        )

    async def get_police_report(self, case_id: UUID) -> Optional[PoliceReportResponse]:
        await self.ensure_case(case_id)
        report = await self._load_report(
            PoliceReport.incident_id == select(Incident.id).where(Incident.case_id == case_id).scalar_subquery()
        )
        return PoliceReportResponse.model_validate(report) if report else None

    async def create_police_report(self, case_id: UUID, payload: PoliceReportCreate) -> PoliceReportResponse:
        async with self.db.transaction() as session:
            await self.ensure_case(case_id, session)
            incident_id = await session.scalar(select(Incident.id).where(Incident.case_id == case_id))
            if incident_id is None:
                raise BadRequestError("Incident not found for this case")
            existing = await session.scalar(
                select(PoliceReport.id).where(PoliceReport.incident_id == incident_id)
            )
            if existing is not None:
                raise BadRequestError("Police report already exists")
            report = PoliceReport(**payload.model_dump(), incident_id=incident_id)
            session.add(report)

        logger.info(f"Police report created for case {case_id}")
        return PoliceReportResponse.model_validate(await self._load_report(PoliceReport.id == report.id))

    async def update_police_report(self, report_id: UUID, payload: PoliceReportUpdate) -> PoliceReportResponse:
        changes = payload.model_dump(exclude_unset=True)
        async with self.db.transaction() as session:
            report = await self.get_or_404(session, PoliceReport, report_id, POLICE_REPORT_NOT_FOUND)
            apply_changes(report, changes)
        return PoliceReportResponse.model_validate(await self._load_report(PoliceReport.id == report_id))

    async def add_citation(self, report_id: UUID, payload: CitationCreate) -> CitationResponse:
        async with self.db.transaction() as session:
            await self.get_or_404(session, PoliceReport, report_id, POLICE_REPORT_NOT_FOUND)
            citation = Citation(**payload.model_dump(), police_report_id=report_id)
            session.add(citation)
        logger.info(f"Citation added to police report {report_id}")
        return CitationResponse.model_validate(citation)

    # ========================================================================
    # Aggregate view
    # ========================================================================

    async def get_complete(self, case_id: UUID) -> CompleteIncident:
        await self.ensure_case(case_id)

        incident, vehicles, witnesses, evidence = await self.gather(
            self._load_incident(case_id),
            self.get_vehicles(case_id),
            self.get_witnesses(case_id),
            self.get_evidence(case_id),
        )
        report = incident.police_report if incident else None

        return CompleteIncident(
            incident=IncidentResponse.model_validate(incident) if incident else None,
            vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
            witnesses=[WitnessResponse.model_validate(w) for w in witnesses],
            evidence=[EvidenceResponse.model_validate(e) for e in evidence],
            police_report=PoliceReportResponse.model_validate(report) if report else None,
            summary=IncidentSummaryCounts(
                vehicleCount=len(vehicles),
                witnessCount=len(witnesses),
                evidenceCount=len(evidence),
                hasPoliceReport=report is not None,
            ),
        )
