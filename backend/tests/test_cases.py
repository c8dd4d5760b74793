"""
Legal Estate - Case API Tests
Case numbering, assignments, overview statistics, timeline and delete.
"""

import uuid
from io import BytesIO

import pytest
from httpx import AsyncClient

from legal_estate.utils.helpers import utcnow


# =============================================================================
# Create
# =============================================================================

@pytest.mark.asyncio
async def test_create_case_assigns_creator(auth_client: AsyncClient, sample_client, attorney):
    response = await auth_client.post(
        "/api/v1/cases/",
        json={"title": "Thowerd v. Martinez", "caseType": "AUTO_ACCIDENT", "clientId": sample_client["id"]},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "ACTIVE"
    assert data["createdBy"]["id"] == str(attorney.id)
    assert data["client"]["lastName"] == "Thowerd"
    assert len(data["assignments"]) == 1
    assert data["assignments"][0]["role"] == "Primary Attorney"
    assert data["assignments"][0]["user"]["email"] == attorney.email


@pytest.mark.asyncio
async def test_generated_case_numbers_are_sequential(new_case, sample_client):
    year = utcnow().year
    first = await new_case(sample_client["id"], title="First")
    second = await new_case(sample_client["id"], title="Second")
    assert first["caseNumber"] == f"LE-{year}-001"
    assert second["caseNumber"] == f"LE-{year}-002"


@pytest.mark.asyncio
async def test_manual_case_number_must_be_unique(auth_client: AsyncClient, new_case, sample_client):
    await new_case(sample_client["id"], caseNumber="LE-2015-001")

    response = await auth_client.post(
        "/api/v1/cases/",
        json={
            "title": "Duplicate",
            "caseType": "SLIP_AND_FALL",
            "clientId": sample_client["id"],
            "caseNumber": "LE-2015-001",
        },
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Case number already exists"


@pytest.mark.asyncio
async def test_case_numbers_continue_after_deletions(auth_client: AsyncClient, new_case, sample_client):
    year = utcnow().year
    cases = [await new_case(sample_client["id"], title=f"Case {n}") for n in range(1, 11)]
    assert cases[-1]["caseNumber"] == f"LE-{year}-010"

    for case in cases[:4]:
        response = await auth_client.delete(f"/api/v1/cases/{case['id']}")
        assert response.status_code == 200

    eleventh = await new_case(sample_client["id"], title="After deletions")
    twelfth = await new_case(sample_client["id"], title="And one more")
    assert eleventh["caseNumber"] == f"LE-{year}-011"
    assert twelfth["caseNumber"] == f"LE-{year}-012"


@pytest.mark.asyncio
async def test_case_number_fills_gap_left_by_latest_delete(auth_client: AsyncClient, new_case, sample_client):
    year = utcnow().year
    await new_case(sample_client["id"], title="First")
    second = await new_case(sample_client["id"], title="Second")
    await auth_client.delete(f"/api/v1/cases/{second['id']}")

    replacement = await new_case(sample_client["id"], title="Replacement")
    assert replacement["caseNumber"] == f"LE-{year}-002"


@pytest.mark.asyncio
async def test_manual_case_number_format_is_checked(auth_client: AsyncClient, sample_client):
    response = await auth_client.post(
        "/api/v1/cases/",
        json={"title": "Odd", "caseType": "OTHER", "clientId": sample_client["id"], "caseNumber": "case 7"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert any(e.startswith("caseNumber") for e in response.json()["errors"])


@pytest.mark.asyncio
async def test_create_case_for_unknown_client(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/cases/",
        json={"title": "Orphan", "caseType": "OTHER", "clientId": str(uuid.uuid4())},
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Client not found"


@pytest.mark.asyncio
async def test_create_case_rejects_bad_enum(auth_client: AsyncClient, sample_client):
    response = await auth_client.post(
        "/api/v1/cases/",
        json={"title": "Bad", "caseType": "SHIPWRECK", "clientId": sample_client["id"]},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


# =============================================================================
# Read / Update / List
# =============================================================================

@pytest.mark.asyncio
async def test_get_case_detail(auth_client: AsyncClient, sample_case):
    response = await auth_client.get(f"/api/v1/cases/{sample_case['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["caseNumber"] == sample_case["caseNumber"]
    assert data["tasks"] == []
    assert data["notes"] == []
    assert "contacts" in data["client"]


@pytest.mark.asyncio
async def test_update_case(auth_client: AsyncClient, sample_case):
    response = await auth_client.patch(
        f"/api/v1/cases/{sample_case['id']}",
        json={"status": "SETTLED", "statuteOfLimitations": "2017-09-20"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "SETTLED"
    assert data["statuteOfLimitations"] == "2017-09-20"


@pytest.mark.asyncio
async def test_list_cases_filters(auth_client: AsyncClient, new_case, sample_client):
    await new_case(sample_client["id"], title="Rear End Collision")
    await new_case(sample_client["id"], title="Grocery Store Fall", caseType="SLIP_AND_FALL")

    response = await auth_client.get("/api/v1/cases/?caseType=SLIP_AND_FALL")
    assert response.status_code == 200
    data = response.json()
    assert data["meta"]["total"] == 1
    assert data["data"][0]["title"] == "Grocery Store Fall"
    assert data["data"][0]["counts"] == {"tasks": 0, "documents": 0, "medicalProviders": 0}

    response = await auth_client.get("/api/v1/cases/?search=rear")
    assert [c["title"] for c in response.json()["data"]] == ["Rear End Collision"]


@pytest.mark.asyncio
async def test_list_cases_by_assignee(auth_client: AsyncClient, sample_case, paralegal):
    response = await auth_client.get(f"/api/v1/cases/?assignedTo={paralegal.id}")
    assert response.json()["meta"]["total"] == 0

    await auth_client.post(
        f"/api/v1/cases/{sample_case['id']}/assignments",
        json={"userId": str(paralegal.id), "role": "Case Assistant"},
    )
    response = await auth_client.get(f"/api/v1/cases/?assignedTo={paralegal.id}")
    assert response.json()["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_repeated_listing_is_stable(auth_client: AsyncClient, new_case, sample_client):
    for n in range(5):
        await new_case(sample_client["id"], title=f"Matter {n}")

    params = {"page": 2, "limit": 2}
    first = (await auth_client.get("/api/v1/cases/", params=params)).json()
    second = (await auth_client.get("/api/v1/cases/", params=params)).json()
    assert first["data"] == second["data"]
    assert first["meta"] == second["meta"] == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}


# =============================================================================
# Assignments
# =============================================================================

@pytest.mark.asyncio
async def test_duplicate_assignment_rejected(auth_client: AsyncClient, sample_case, paralegal):
    payload = {"userId": str(paralegal.id), "role": "Case Assistant"}
    first = await auth_client.post(f"/api/v1/cases/{sample_case['id']}/assignments", json=payload)
    assert first.status_code == 201
    assert first.json()["user"]["lastName"] == "Camacho"

    second = await auth_client.post(f"/api/v1/cases/{sample_case['id']}/assignments", json=payload)
    assert second.status_code == 400
    assert second.json()["message"] == "User already assigned to this role"


@pytest.mark.asyncio
async def test_assign_unknown_user(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(
        f"/api/v1/cases/{sample_case['id']}/assignments",
        json={"userId": str(uuid.uuid4()), "role": "Case Assistant"},
    )
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_last_assignment_cannot_be_removed(auth_client: AsyncClient, sample_case, attorney, paralegal):
    case_id = sample_case["id"]

    response = await auth_client.delete(f"/api/v1/cases/{case_id}/assignments/{attorney.id}")
    assert response.status_code == 400

    await auth_client.post(
        f"/api/v1/cases/{case_id}/assignments",
        json={"userId": str(paralegal.id), "role": "Case Assistant"},
    )
    response = await auth_client.delete(f"/api/v1/cases/{case_id}/assignments/{paralegal.id}?role=Case Assistant")
    assert response.status_code == 200
    assert response.json()["message"] == "Assignment removed successfully"

    response = await auth_client.delete(f"/api/v1/cases/{case_id}/assignments/{paralegal.id}")
    assert response.status_code == 404


# =============================================================================
# Overview / Timeline
# =============================================================================

@pytest.mark.asyncio
async def test_overview_statistics(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    provider = (await auth_client.post(
        f"/api/v1/medical/cases/{case_id}/providers",
        json={"name": "Newport Beach Medical Center", "type": "Emergency Room"},
    )).json()
    await auth_client.post(
        f"/api/v1/medical/cases/{case_id}/records",
        json={"date": "2015-09-20", "type": "Emergency Visit", "cost": 15420, "providerId": provider["id"]},
    )
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Order records"})
    await auth_client.post(
        f"/api/v1/insurance/cases/{case_id}/policies",
        json={"type": "AUTO", "company": "State Farm", "policyNumber": "SF-1", "policyHolder": "Patricia Thowerd"},
    )

    response = await auth_client.get(f"/api/v1/cases/{case_id}/overview")
    assert response.status_code == 200
    stats = response.json()["statistics"]
    assert stats["totalMedicalBills"] == 15420
    assert stats["documentsCount"] == 0
    assert stats["tasksStats"] == {"pending": 1}
    assert stats["insurancePolicies"][0]["company"] == "State Farm"
    assert stats["caseAge"] > 365


@pytest.mark.asyncio
async def test_timeline_is_newest_first(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Call adjuster"})
    await auth_client.post(f"/api/v1/notes/cases/{case_id}", json={"content": "Spoke with client"})

    response = await auth_client.get(f"/api/v1/cases/{case_id}/timeline")
    assert response.status_code == 200
    entries = response.json()
    assert [e["type"] for e in entries] == ["note", "task"]
    assert entries[0]["title"] == "Case Note"
    assert entries[0]["status"] == "created"
    assert entries[1]["status"] == "PENDING"
    assert entries[0]["user"]["firstName"] == "John"


async def upload_document(ac, case_id, filename="police_report.pdf", doc_type="POLICE_REPORT"):
    files = {"file": (filename, BytesIO(b"%PDF-1.4 report"), "application/pdf")}
    response = await ac.post(f"/api/v1/documents/cases/{case_id}", data={"type": doc_type}, files=files)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_timeline_merges_tasks_notes_and_documents(auth_client: AsyncClient, storage, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Request records"})
    await auth_client.post(f"/api/v1/notes/cases/{case_id}", json={"content": "Client called"})
    document = await upload_document(auth_client, case_id)
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Send demand"})

    entries = (await auth_client.get(f"/api/v1/cases/{case_id}/timeline")).json()
    assert len(entries) == 4
    assert [e["type"] for e in entries] == ["task", "document", "note", "task"]
    dates = [e["date"] for e in entries]
    assert dates == sorted(dates, reverse=True)

    uploaded = entries[1]
    assert uploaded["id"] == document["id"]
    assert uploaded["title"] == "police_report.pdf"
    assert uploaded["description"] == "Document uploaded: POLICE_REPORT"
    assert uploaded["status"] == "uploaded"


@pytest.mark.asyncio
async def test_timeline_keeps_only_latest_of_each_kind(auth_client: AsyncClient, storage, sample_case):
    case_id = sample_case["id"]
    for n in range(12):
        await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": f"Task {n}"})
        await auth_client.post(f"/api/v1/notes/cases/{case_id}", json={"content": f"Note {n}"})
    for n in range(6):
        await upload_document(auth_client, case_id, filename=f"scan-{n}.pdf")

    entries = (await auth_client.get(f"/api/v1/cases/{case_id}/timeline")).json()
    kinds = [e["type"] for e in entries]
    assert kinds.count("task") == 10
    assert kinds.count("note") == 10
    assert kinds.count("document") == 5

    titles = {e["title"] for e in entries}
    assert "Task 0" not in titles and "Task 11" in titles
    assert "scan-0.pdf" not in titles and "scan-5.pdf" in titles


@pytest.mark.asyncio
async def test_case_tasks_listing(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Done already", "status": "COMPLETED"})
    await auth_client.post(f"/api/v1/tasks/cases/{case_id}", json={"title": "Still open"})

    response = await auth_client.get(f"/api/v1/cases/{case_id}/tasks?status=PENDING")
    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["Still open"]


# =============================================================================
# Delete
# =============================================================================

@pytest.mark.asyncio
async def test_delete_case_removes_it(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await auth_client.post(f"/api/v1/notes/cases/{case_id}", json={"content": "Initial consult"})

    response = await auth_client.delete(f"/api/v1/cases/{case_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Case deleted successfully"

    assert (await auth_client.get(f"/api/v1/cases/{case_id}")).status_code == 404
    assert (await auth_client.get(f"/api/v1/notes/cases/{case_id}")).status_code == 404


@pytest.mark.asyncio
async def test_unknown_case_is_404(auth_client: AsyncClient):
    response = await auth_client.get(f"/api/v1/cases/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["message"] == "Case not found"
