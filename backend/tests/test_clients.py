"""
Legal Estate - Client API Tests
Creation, listing, soft delete and the child-record endpoints.
"""

import uuid

import pytest
from httpx import AsyncClient


# =============================================================================
# CRUD
# =============================================================================

@pytest.mark.asyncio
async def test_create_client_with_contacts(auth_client: AsyncClient):
    payload = {
        "firstName": "Patricia",
        "lastName": "Thowerd",
        "dateOfBirth": "1974-03-05",
        "languages": ["English"],
        "contacts": [
            {"type": "PHONE", "value": "(714) 721-6882", "label": "Primary", "primary": True},
            {"type": "EMAIL", "value": "patricia.thowerd@email.com"},
        ],
        "addresses": [
            {"street": "3821 Campus Drive", "city": "Newport Beach", "state": "CA", "zipCode": "92660"},
        ],
    }
    response = await auth_client.post("/api/v1/clients/", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["firstName"] == "Patricia"
    assert data["active"] is True
    assert len(data["contacts"]) == 2
    assert data["addresses"][0]["country"] == "United States"
    assert data["cases"] == []


@pytest.mark.asyncio
async def test_create_client_rejects_unknown_fields(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/clients/",
        json={"firstName": "Patricia", "lastName": "Thowerd", "favouriteColour": "blue"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert body["statusCode"] == 400
    assert body["path"] == "/api/v1/clients/"
    assert body["errors"]


@pytest.mark.asyncio
async def test_create_client_requires_names(auth_client: AsyncClient):
    response = await auth_client.post("/api/v1/clients/", json={"firstName": "Patricia"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_unknown_client(auth_client: AsyncClient):
    response = await auth_client.get(f"/api/v1/clients/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["message"] == "Client not found"


@pytest.mark.asyncio
async def test_update_client(auth_client: AsyncClient, sample_client):
    response = await auth_client.patch(
        f"/api/v1/clients/{sample_client['id']}",
        json={"middleName": "Anne", "maritalStatus": "MARRIED"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["middleName"] == "Anne"
    assert data["maritalStatus"] == "MARRIED"
    assert data["lastName"] == "Thowerd"


@pytest.mark.asyncio
async def test_update_client_null_required_field(auth_client: AsyncClient, sample_client):
    response = await auth_client.patch(f"/api/v1/clients/{sample_client['id']}", json={"firstName": None})
    assert response.status_code == 400
    assert response.json()["message"] == "firstName cannot be null"


# =============================================================================
# Listing / Soft delete
# =============================================================================

@pytest.mark.asyncio
async def test_list_clients_paginates(auth_client: AsyncClient, new_client):
    for i in range(3):
        await new_client(first_name=f"Client{i}", last_name="Example")

    response = await auth_client.get("/api/v1/clients/?page=1&limit=2")
    assert response.status_code == 200
    data = response.json()
    assert len(data["data"]) == 2
    assert data["meta"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}


@pytest.mark.asyncio
async def test_list_clients_search(auth_client: AsyncClient, new_client):
    await new_client(first_name="Patricia", last_name="Thowerd")
    await new_client(first_name="Michael", last_name="Brown")

    response = await auth_client.get("/api/v1/clients/?search=thow")
    data = response.json()
    assert [c["lastName"] for c in data["data"]] == ["Thowerd"]


@pytest.mark.asyncio
async def test_list_clients_reports_latest_case(auth_client: AsyncClient, sample_case, sample_client):
    response = await auth_client.get("/api/v1/clients/")
    item = response.json()["data"][0]
    assert item["caseCount"] == 1
    assert item["latestCase"]["caseNumber"] == sample_case["caseNumber"]


@pytest.mark.asyncio
async def test_delete_client_is_soft(auth_client: AsyncClient, sample_client):
    client_id = sample_client["id"]

    response = await auth_client.delete(f"/api/v1/clients/{client_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Client deactivated successfully"

    listing = await auth_client.get("/api/v1/clients/")
    assert listing.json()["meta"]["total"] == 0

    detail = await auth_client.get(f"/api/v1/clients/{client_id}")
    assert detail.status_code == 200
    assert detail.json()["active"] is False


# =============================================================================
# Child Records
# =============================================================================

@pytest.mark.asyncio
async def test_add_child_records(auth_client: AsyncClient, sample_client):
    client_id = sample_client["id"]

    contact = await auth_client.post(
        f"/api/v1/clients/{client_id}/contacts",
        json={"type": "MOBILE", "value": "(714) 555-0123"},
    )
    assert contact.status_code == 201

    address = await auth_client.post(
        f"/api/v1/clients/{client_id}/addresses",
        json={"type": "MAILING", "street": "PO Box 12", "city": "Irvine", "state": "CA", "zipCode": "92612"},
    )
    assert address.status_code == 201

    emergency = await auth_client.post(
        f"/api/v1/clients/{client_id}/emergency-contacts",
        json={"name": "Michael Thowerd", "relationship": "Spouse", "phone": "(714) 555-0789"},
    )
    assert emergency.status_code == 201
    assert emergency.json()["relationship"] == "Spouse"

    family = await auth_client.post(
        f"/api/v1/clients/{client_id}/family-members",
        json={"name": "Emma Thowerd", "relationship": "Daughter", "dependent": True},
    )
    assert family.status_code == 201

    detail = (await auth_client.get(f"/api/v1/clients/{client_id}")).json()
    assert len(detail["contacts"]) == 1
    assert len(detail["addresses"]) == 1
    assert detail["emergencyContacts"][0]["name"] == "Michael Thowerd"
    assert detail["familyMembers"][0]["dependent"] is True


@pytest.mark.asyncio
async def test_add_contact_to_unknown_client(auth_client: AsyncClient):
    response = await auth_client.post(
        f"/api/v1/clients/{uuid.uuid4()}/contacts",
        json={"type": "PHONE", "value": "555-0100"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_employment_upsert_keeps_one_record(auth_client: AsyncClient, sample_client):
    client_id = sample_client["id"]

    first = await auth_client.put(
        f"/api/v1/clients/{client_id}/employment",
        json={"employer": "Newport Financial Group", "annualSalary": 85000},
    )
    assert first.status_code == 200

    second = await auth_client.put(f"/api/v1/clients/{client_id}/employment", json={"missedWorkDays": 12})
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["employer"] == "Newport Financial Group"
    assert second.json()["missedWorkDays"] == 12


@pytest.mark.asyncio
async def test_communication_preferences_upsert(auth_client: AsyncClient, sample_client):
    response = await auth_client.put(
        f"/api/v1/clients/{sample_client['id']}/communication-preferences",
        json={"preferredMethod": "TEXT", "bestTimeToContact": "Evenings"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["preferredMethod"] == "TEXT"
    assert data["allowEmail"] is True


@pytest.mark.asyncio
async def test_detailed_client_includes_case_children(auth_client: AsyncClient, sample_client, sample_case):
    await auth_client.post(
        f"/api/v1/tasks/cases/{sample_case['id']}",
        json={"title": "Request police report"},
    )
    response = await auth_client.get(f"/api/v1/clients/{sample_client['id']}/detailed")
    assert response.status_code == 200
    case = response.json()["cases"][0]
    assert case["id"] == sample_case["id"]
    assert case["assignments"][0]["role"] == "Primary Attorney"
    assert [t["title"] for t in case["tasks"]] == ["Request police report"]
    assert case["incident"] is None
