"""
Legal Estate - Notes API Tests
"""

import uuid

import pytest
from httpx import AsyncClient


async def add_note(ac, case_id, content, **extra):
    response = await ac.post(f"/api/v1/notes/cases/{case_id}", json={"content": content, **extra})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_note_sets_author(auth_client: AsyncClient, sample_case, attorney):
    note = await add_note(auth_client, sample_case["id"], "Initial consultation", type="MEETING")
    assert note["authorId"] == str(attorney.id)
    assert note["author"]["firstName"] == "John"
    assert note["type"] == "MEETING"


@pytest.mark.asyncio
async def test_blank_note_rejected(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(f"/api/v1/notes/cases/{sample_case['id']}", json={"content": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_notes_newest_first_with_filters(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_note(auth_client, case_id, "Called the adjuster", type="PHONE_CALL")
    await add_note(auth_client, case_id, "Reviewed police report", title="Police report")

    response = await auth_client.get(f"/api/v1/notes/cases/{case_id}")
    data = response.json()
    assert data["meta"]["total"] == 2
    assert [n["content"] for n in data["data"]] == ["Reviewed police report", "Called the adjuster"]

    calls = (await auth_client.get(f"/api/v1/notes/cases/{case_id}?type=PHONE_CALL")).json()
    assert [n["content"] for n in calls["data"]] == ["Called the adjuster"]

    search = (await auth_client.get(f"/api/v1/notes/cases/{case_id}?search=police")).json()
    assert search["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_update_and_delete_note(auth_client: AsyncClient, sample_case):
    note = await add_note(auth_client, sample_case["id"], "Draft")

    response = await auth_client.patch(f"/api/v1/notes/{note['id']}", json={"content": "Final", "type": "INTERNAL"})
    assert response.status_code == 200
    assert response.json()["content"] == "Final"

    response = await auth_client.delete(f"/api/v1/notes/{note['id']}")
    assert response.json()["message"] == "Note deleted successfully"
    assert (await auth_client.get(f"/api/v1/notes/{note['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_note_summary(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_note(auth_client, case_id, "x" * 150, type="PHONE_CALL")
    await add_note(auth_client, case_id, "Met with client", title="Meeting", type="MEETING")

    response = await auth_client.get(f"/api/v1/notes/cases/{case_id}/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["byType"] == {"phone_call": 1, "meeting": 1}

    latest, older = data["recentNotes"]
    assert latest["title"] == "Meeting"
    assert latest["author"] == "John Smith"
    assert older["title"] == "Untitled Note"
    assert older["content"] == "x" * 100 + "..."
    assert older["type"] == "PHONE_CALL"


@pytest.mark.asyncio
async def test_note_timeline(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_note(auth_client, case_id, "Adjuster returned call", type="PHONE_CALL")
    await add_note(auth_client, case_id, "Mediation scheduled", title="Mediation", type="COURT")

    response = await auth_client.get(f"/api/v1/notes/cases/{case_id}/timeline")
    assert response.status_code == 200
    latest, older = response.json()
    assert latest["title"] == "Mediation"
    assert latest["noteType"] == "COURT"
    assert latest["type"] == "note"
    assert older["title"] == "PHONE_CALL Note"
    assert older["content"] == "Adjuster returned call"
    assert older["author"] == "John Smith"


@pytest.mark.asyncio
async def test_note_timeline_unknown_case(auth_client: AsyncClient):
    response = await auth_client.get(f"/api/v1/notes/cases/{uuid.uuid4()}/timeline")
    assert response.status_code == 404
    assert response.json()["message"] == "Case not found"
