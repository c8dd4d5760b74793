"""
Legal Estate - Medical API Tests
Providers, records (with provider bill totals), injuries and the summary.
"""

import pytest
from httpx import AsyncClient


async def add_provider(ac, case_id, name="Newport Beach Medical Center", **extra):
    payload = {"name": name, "type": "Emergency Room", **extra}
    response = await ac.post(f"/api/v1/medical/cases/{case_id}/providers", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def add_record(ac, case_id, provider_id, cost, date="2015-09-20", **extra):
    payload = {"date": date, "type": "Office Visit", "cost": cost, "providerId": provider_id, **extra}
    response = await ac.post(f"/api/v1/medical/cases/{case_id}/records", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def provider_totals(ac, case_id) -> dict:
    response = await ac.get(f"/api/v1/medical/cases/{case_id}/providers")
    return {p["id"]: p["totalBills"] for p in response.json()}


# =============================================================================
# Providers
# =============================================================================

@pytest.mark.asyncio
async def test_create_provider_starts_with_no_bills(auth_client: AsyncClient, sample_case):
    provider = await add_provider(auth_client, sample_case["id"], dateFirstSeen="2015-09-20")
    assert provider["totalBills"] == 0
    assert provider["status"] == "ACTIVE"


@pytest.mark.asyncio
async def test_provider_total_bills_is_not_writable(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(
        f"/api/v1/medical/cases/{sample_case['id']}/providers",
        json={"name": "Dr. Chen", "type": "Orthopedic Surgeon", "totalBills": 1000},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_providers_ordered_by_first_visit(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_provider(auth_client, case_id, name="Unknown Start")
    await add_provider(auth_client, case_id, name="Later", dateFirstSeen="2015-10-01")
    await add_provider(auth_client, case_id, name="Earlier", dateFirstSeen="2015-09-20")

    response = await auth_client.get(f"/api/v1/medical/cases/{case_id}/providers")
    assert [p["name"] for p in response.json()] == ["Earlier", "Later", "Unknown Start"]


@pytest.mark.asyncio
async def test_delete_provider_keeps_records(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    provider = await add_provider(auth_client, case_id)
    record = await add_record(auth_client, case_id, provider["id"], 250)

    response = await auth_client.delete(f"/api/v1/medical/providers/{provider['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Medical provider deleted successfully"

    records = (await auth_client.get(f"/api/v1/medical/cases/{case_id}/records")).json()
    assert [r["id"] for r in records] == [record["id"]]
    assert records[0]["providerId"] is None


# =============================================================================
# Records / Bill Totals
# =============================================================================

@pytest.mark.asyncio
async def test_total_bills_follow_record_writes(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    er = await add_provider(auth_client, case_id, name="ER")
    surgeon = await add_provider(auth_client, case_id, name="Surgeon")

    first = await add_record(auth_client, case_id, er["id"], 15420)
    await add_record(auth_client, case_id, er["id"], 580.5, date="2015-09-21")
    assert (await provider_totals(auth_client, case_id))[er["id"]] == 16000.5

    # Move a record to another provider: both totals change
    response = await auth_client.patch(
        f"/api/v1/medical/records/{first['id']}",
        json={"providerId": surgeon["id"], "cost": 28750},
    )
    assert response.status_code == 200
    assert response.json()["provider"]["name"] == "Surgeon"
    totals = await provider_totals(auth_client, case_id)
    assert totals[er["id"]] == 580.5
    assert totals[surgeon["id"]] == 28750

    response = await auth_client.delete(f"/api/v1/medical/records/{first['id']}")
    assert response.status_code == 200
    totals = await provider_totals(auth_client, case_id)
    assert totals[surgeon["id"]] == 0
    assert totals[er["id"]] == 580.5


@pytest.mark.asyncio
async def test_record_with_provider_from_other_case(auth_client: AsyncClient, new_case, sample_client, sample_case):
    other_case = await new_case(sample_client["id"], title="Second Matter")
    foreign = await add_provider(auth_client, other_case["id"])

    response = await auth_client.post(
        f"/api/v1/medical/cases/{sample_case['id']}/records",
        json={"date": "2015-09-20", "type": "X-Ray", "cost": 300, "providerId": foreign["id"]},
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Medical provider not found"
    assert (await provider_totals(auth_client, other_case["id"]))[foreign["id"]] == 0


@pytest.mark.asyncio
async def test_records_filter_and_order(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    provider = await add_provider(auth_client, case_id)
    await add_record(auth_client, case_id, provider["id"], 100, date="2015-09-20", billReceived=True)
    await add_record(auth_client, case_id, provider["id"], 200, date="2015-10-05")

    records = (await auth_client.get(f"/api/v1/medical/cases/{case_id}/records")).json()
    assert [r["date"] for r in records] == ["2015-10-05", "2015-09-20"]

    billed = (await auth_client.get(f"/api/v1/medical/cases/{case_id}/records?billReceived=true")).json()
    assert [r["cost"] for r in billed] == [100]


@pytest.mark.asyncio
async def test_record_cost_cannot_be_negative(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(
        f"/api/v1/medical/cases/{sample_case['id']}/records",
        json={"date": "2015-09-20", "type": "Visit", "cost": -5},
    )
    assert response.status_code == 400


# =============================================================================
# Injuries / Summary
# =============================================================================

@pytest.mark.asyncio
async def test_injury_lifecycle(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    response = await auth_client.post(
        f"/api/v1/medical/cases/{case_id}/injuries",
        json={"bodyPart": "Right Knee", "description": "Torn ACL", "severity": "SEVERE"},
    )
    assert response.status_code == 201
    injury = response.json()
    assert injury["resolved"] is False

    response = await auth_client.patch(f"/api/v1/medical/injuries/{injury['id']}", json={"resolved": True})
    assert response.json()["resolved"] is True

    response = await auth_client.delete(f"/api/v1/medical/injuries/{injury['id']}")
    assert response.json()["message"] == "Injury deleted successfully"
    assert (await auth_client.get(f"/api/v1/medical/cases/{case_id}/injuries")).json() == []


@pytest.mark.asyncio
async def test_medical_summary(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    provider = await add_provider(auth_client, case_id)
    await add_record(auth_client, case_id, provider["id"], 1200)
    for body_part, severity, resolved in (
        ("Right Knee", "SEVERE", False),
        ("Lower Back", "MODERATE", True),
        ("Neck", "MODERATE", False),
    ):
        await auth_client.post(
            f"/api/v1/medical/cases/{case_id}/injuries",
            json={"bodyPart": body_part, "description": "Injury", "severity": severity, "resolved": resolved},
        )

    response = await auth_client.get(f"/api/v1/medical/cases/{case_id}/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["providers"] == {"total": 1}
    assert data["records"] == {"total": 1}
    assert data["injuries"]["total"] == 3
    assert data["injuries"]["resolved"] == 1
    assert data["injuries"]["active"] == 2
    assert data["injuries"]["bySeverity"]["MODERATE"] == {"total": 2, "resolved": 1, "active": 1}
    assert data["financials"]["totalMedicalBills"] == 1200
