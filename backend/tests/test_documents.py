"""
Legal Estate - Documents API Tests
Uploads into local storage, metadata updates, delete and summaries.
"""

from io import BytesIO
from pathlib import PurePosixPath

import pytest
from httpx import AsyncClient

PDF = b"%PDF-1.4 mock police report content"


async def upload(ac, case_id, filename="police_report.pdf", content=PDF, mime="application/pdf", **form):
    data = {"type": "POLICE_REPORT", **form}
    files = {"file": (filename, BytesIO(content), mime)}
    return await ac.post(f"/api/v1/documents/cases/{case_id}", data=data, files=files)


def stored_path(storage, document):
    return storage.root / "documents" / PurePosixPath(document["filePath"]).name


# =============================================================================
# Upload
# =============================================================================

@pytest.mark.asyncio
async def test_upload_document(auth_client: AsyncClient, storage, sample_case, attorney):
    response = await upload(auth_client, sample_case["id"], category="Police", description="NPB report")
    assert response.status_code == 201
    document = response.json()
    assert document["name"] == "police_report.pdf"
    assert document["type"] == "POLICE_REPORT"
    assert document["mimeType"] == "application/pdf"
    assert document["fileSize"] == len(PDF)
    assert document["filePath"].startswith("/uploads/documents/")
    assert document["filePath"].endswith(".pdf")
    assert document["uploadedBy"]["id"] == str(attorney.id)

    path = stored_path(storage, document)
    assert path.exists()
    assert path.read_bytes() == PDF


@pytest.mark.asyncio
async def test_upload_uses_given_name(auth_client: AsyncClient, sample_case):
    response = await upload(auth_client, sample_case["id"], name="NPB Report 2015-09-20")
    assert response.json()["name"] == "NPB Report 2015-09-20"


@pytest.mark.asyncio
async def test_upload_rejects_disallowed_type(auth_client: AsyncClient, storage, sample_case):
    response = await upload(
        auth_client, sample_case["id"], filename="run.exe", content=b"MZ", mime="application/x-msdownload"
    )
    assert response.status_code == 400
    assert response.json()["message"] == "File type application/x-msdownload is not allowed"
    assert list((storage.root / "documents").iterdir()) == []


@pytest.mark.asyncio
async def test_upload_without_file(auth_client: AsyncClient, sample_case):
    response = await auth_client.post(
        f"/api/v1/documents/cases/{sample_case['id']}",
        data={"type": "OTHER"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "No file provided"


@pytest.mark.asyncio
async def test_upload_empty_file(auth_client: AsyncClient, sample_case):
    response = await upload(auth_client, sample_case["id"], content=b"")
    assert response.status_code == 400
    assert response.json()["message"] == "Uploaded file is empty"


@pytest.mark.asyncio
async def test_upload_to_unknown_case(auth_client: AsyncClient, storage):
    response = await upload(auth_client, "00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404
    assert list((storage.root / "documents").iterdir()) == []


# =============================================================================
# Read / Update / Delete
# =============================================================================

@pytest.mark.asyncio
async def test_list_and_filter_documents(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await upload(auth_client, case_id, category="Police")
    await upload(
        auth_client, case_id, filename="er_bill.pdf", type="MEDICAL_BILL", category="Billing",
        description="Emergency room invoice",
    )

    listing = (await auth_client.get(f"/api/v1/documents/cases/{case_id}")).json()
    assert listing["meta"]["total"] == 2

    bills = (await auth_client.get(f"/api/v1/documents/cases/{case_id}?type=MEDICAL_BILL")).json()
    assert [d["name"] for d in bills["data"]] == ["er_bill.pdf"]

    search = (await auth_client.get(f"/api/v1/documents/cases/{case_id}?search=invoice")).json()
    assert [d["name"] for d in search["data"]] == ["er_bill.pdf"]

    categories = (await auth_client.get(f"/api/v1/documents/cases/{case_id}/categories")).json()
    assert categories == ["Billing", "Police"]


@pytest.mark.asyncio
async def test_get_and_update_document(auth_client: AsyncClient, sample_case):
    document = (await upload(auth_client, sample_case["id"])).json()

    detail = await auth_client.get(f"/api/v1/documents/{document['id']}")
    assert detail.status_code == 200
    assert detail.json()["case"]["caseNumber"] == sample_case["caseNumber"]

    updated = await auth_client.patch(
        f"/api/v1/documents/{document['id']}",
        json={"category": "Police", "type": "LEGAL"},
    )
    assert updated.status_code == 200
    assert updated.json()["type"] == "LEGAL"
    assert updated.json()["filePath"] == document["filePath"]


@pytest.mark.asyncio
async def test_document_file_fields_are_read_only(auth_client: AsyncClient, sample_case):
    document = (await upload(auth_client, sample_case["id"])).json()
    response = await auth_client.patch(f"/api/v1/documents/{document['id']}", json={"filePath": "/etc/passwd"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_document_removes_file(auth_client: AsyncClient, storage, sample_case):
    document = (await upload(auth_client, sample_case["id"])).json()
    path = stored_path(storage, document)
    assert path.exists()

    response = await auth_client.delete(f"/api/v1/documents/{document['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Document deleted successfully"
    assert not path.exists()
    assert (await auth_client.get(f"/api/v1/documents/{document['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_case_removes_stored_files(auth_client: AsyncClient, storage, sample_case):
    document = (await upload(auth_client, sample_case["id"])).json()
    path = stored_path(storage, document)

    response = await auth_client.delete(f"/api/v1/cases/{sample_case['id']}")
    assert response.status_code == 200
    assert not path.exists()


@pytest.mark.asyncio
async def test_document_summary(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await upload(auth_client, case_id, category="Police")
    await upload(auth_client, case_id, filename="photo.png", content=b"\x89PNG data", mime="image/png", type="PHOTO")

    response = await auth_client.get(f"/api/v1/documents/cases/{case_id}/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["totalSize"] == len(PDF) + len(b"\x89PNG data")
    assert data["byType"] == {"POLICE_REPORT": 1, "PHOTO": 1}
    assert data["byCategory"] == {"Police": 1, "uncategorized": 1}
