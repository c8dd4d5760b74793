"""
Legal Estate - Incident API Tests
Incident, vehicles, witnesses, evidence and the police report.
"""

import pytest
from httpx import AsyncClient

INCIDENT = {
    "dateOfLoss": "2015-09-20",
    "timeOfIncident": "3:45 PM",
    "location": "1200 Newport Center Dr",
    "city": "Newport Beach",
    "state": "CA",
    "incidentType": "Motor Vehicle Accident",
    "causeFactors": ["Running Red Light"],
}


# =============================================================================
# Incident
# =============================================================================

@pytest.mark.asyncio
async def test_case_without_incident_returns_null(auth_client: AsyncClient, sample_case):
    response = await auth_client.get(f"/api/v1/incident/cases/{sample_case['id']}")
    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_one_incident_per_case(auth_client: AsyncClient, sample_case):
    url = f"/api/v1/incident/cases/{sample_case['id']}"
    first = await auth_client.post(url, json=INCIDENT)
    assert first.status_code == 201
    assert first.json()["causeFactors"] == ["Running Red Light"]
    assert first.json()["policeReport"] is None

    second = await auth_client.post(url, json=INCIDENT)
    assert second.status_code == 400
    assert second.json()["message"] == "Incident already exists for this case"


@pytest.mark.asyncio
async def test_update_incident(auth_client: AsyncClient, sample_case):
    incident = (await auth_client.post(f"/api/v1/incident/cases/{sample_case['id']}", json=INCIDENT)).json()

    response = await auth_client.patch(
        f"/api/v1/incident/{incident['id']}",
        json={"weather": "Clear", "severity": "SEVERE"},
    )
    assert response.status_code == 200
    assert response.json()["weather"] == "Clear"
    assert response.json()["location"] == "1200 Newport Center Dr"


# =============================================================================
# Police Report
# =============================================================================

@pytest.mark.asyncio
async def test_police_report_requires_incident(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(
        f"/api/v1/incident/cases/{sample_case['id']}/police-report",
        json={"reportFiled": True, "reportNumber": "NPB-2015-09-4578"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Incident not found for this case"


@pytest.mark.asyncio
async def test_police_report_with_citation(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/incident/cases/{case_id}", json=INCIDENT)

    response = await auth_client.post(
        f"/api/v1/incident/cases/{case_id}/police-report",
        json={"reportFiled": True, "reportNumber": "NPB-2015-09-4578"},
    )
    assert response.status_code == 201
    report = response.json()

    again = await auth_client.post(f"/api/v1/incident/cases/{case_id}/police-report", json={})
    assert again.status_code == 400
    assert again.json()["message"] == "Police report already exists"

    citation = await auth_client.post(
        f"/api/v1/incident/police-reports/{report['id']}/citations",
        json={"issuedTo": "Robert Martinez", "violation": "Running red light", "codeSection": "CVC 21453(a)"},
    )
    assert citation.status_code == 201

    fetched = (await auth_client.get(f"/api/v1/incident/cases/{case_id}/police-report")).json()
    assert fetched["reportNumber"] == "NPB-2015-09-4578"
    assert fetched["citations"][0]["issuedTo"] == "Robert Martinez"


# =============================================================================
# Vehicles / Witnesses / Evidence
# =============================================================================

@pytest.mark.asyncio
async def test_client_vehicle_listed_first(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/incident/cases/{case_id}/vehicles", json={"make": "Ford", "model": "F-150"})
    await auth_client.post(
        f"/api/v1/incident/cases/{case_id}/vehicles",
        json={"make": "Honda", "model": "Accord", "isClientVehicle": True, "passengers": ["Emma"]},
    )

    vehicles = (await auth_client.get(f"/api/v1/incident/cases/{case_id}/vehicles")).json()
    assert [v["make"] for v in vehicles] == ["Honda", "Ford"]
    assert vehicles[0]["passengers"] == ["Emma"]


@pytest.mark.asyncio
async def test_witness_update_and_delete(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    witness = (await auth_client.post(
        f"/api/v1/incident/cases/{case_id}/witnesses",
        json={"name": "Jennifer Adams", "relationship": "Bystander"},
    )).json()
    assert witness["relationship"] == "Bystander"

    response = await auth_client.patch(
        f"/api/v1/incident/witnesses/{witness['id']}",
        json={"statement": "Saw the truck run the light"},
    )
    assert response.json()["statement"] == "Saw the truck run the light"

    response = await auth_client.delete(f"/api/v1/incident/witnesses/{witness['id']}")
    assert response.json()["message"] == "Witness deleted successfully"

    response = await auth_client.delete(f"/api/v1/incident/witnesses/{witness['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_evidence_filter(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(
        f"/api/v1/incident/cases/{case_id}/evidence",
        json={"type": "PHOTO", "description": "Intersection photos", "dateCollected": "2015-09-21"},
    )
    await auth_client.post(
        f"/api/v1/incident/cases/{case_id}/evidence",
        json={"type": "VIDEO", "description": "Dashcam footage", "status": "ANALYZED"},
    )

    photos = (await auth_client.get(f"/api/v1/incident/cases/{case_id}/evidence?type=PHOTO")).json()
    assert [e["description"] for e in photos] == ["Intersection photos"]
    assert photos[0]["status"] == "COLLECTED"


@pytest.mark.asyncio
async def test_complete_incident(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/incident/cases/{case_id}", json=INCIDENT)
    await auth_client.post(f"/api/v1/incident/cases/{case_id}/police-report", json={"reportFiled": True})
    await auth_client.post(f"/api/v1/incident/cases/{case_id}/vehicles", json={"make": "Honda"})
    await auth_client.post(f"/api/v1/incident/cases/{case_id}/witnesses", json={"name": "Jennifer Adams"})

    response = await auth_client.get(f"/api/v1/incident/cases/{case_id}/complete")
    assert response.status_code == 200
    data = response.json()
    assert data["incident"]["incidentType"] == "Motor Vehicle Accident"
    assert data["policeReport"]["reportFiled"] is True
    assert data["summary"] == {
        "vehicleCount": 1,
        "witnessCount": 1,
        "evidenceCount": 0,
        "hasPoliceReport": True,
    }
