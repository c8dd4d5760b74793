"""
Legal Estate - Insurance API Tests
Policies, claims, the case summary and coverage analysis.
"""

import pytest
from httpx import AsyncClient


async def add_policy(ac, case_id, policy_type="AUTO", company="State Farm", **extra):
    payload = {
        "type": policy_type,
        "company": company,
        "policyNumber": f"{company[:2].upper()}-{policy_type}",
        "policyHolder": "Patricia Thowerd",
        **extra,
    }
    response = await ac.post(f"/api/v1/insurance/cases/{case_id}/policies", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def add_claim(ac, policy_id, claim_number, amount, status="OPEN", date_reported="2015-09-20"):
    response = await ac.post(
        f"/api/v1/insurance/policies/{policy_id}/claims",
        json={"claimNumber": claim_number, "dateReported": date_reported, "amount": amount, "status": status},
    )
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Policies / Claims
# =============================================================================

@pytest.mark.asyncio
async def test_policy_crud(auth_client: AsyncClient, sample_case):
    policy = await add_policy(
        auth_client,
        sample_case["id"],
        coverageLimits={"bodilyInjury": "$100,000/$300,000", "medicalPayments": 5000},
    )
    assert policy["status"] == "ACTIVE"
    assert policy["deductible"] == 0
    assert policy["claims"] == []

    detail = await auth_client.get(f"/api/v1/insurance/policies/{policy['id']}")
    assert detail.status_code == 200
    assert detail.json()["case"]["id"] == sample_case["id"]

    updated = await auth_client.patch(f"/api/v1/insurance/policies/{policy['id']}", json={"status": "EXPIRED"})
    assert updated.json()["status"] == "EXPIRED"

    deleted = await auth_client.delete(f"/api/v1/insurance/policies/{policy['id']}")
    assert deleted.json()["message"] == "Insurance policy deleted successfully"
    missing = await auth_client.get(f"/api/v1/insurance/policies/{policy['id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Insurance policy not found"


@pytest.mark.asyncio
async def test_policies_ordered_by_type(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_policy(auth_client, case_id, "HEALTH", "Blue Shield")
    await add_policy(auth_client, case_id, "AUTO", "State Farm")

    policies = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/policies")).json()
    assert [p["type"] for p in policies] == ["AUTO", "HEALTH"]

    autos = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/auto-insurance")).json()
    assert [p["company"] for p in autos] == ["State Farm"]


@pytest.mark.asyncio
async def test_claims_filtering(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    auto = await add_policy(auth_client, case_id, "AUTO", "State Farm")
    health = await add_policy(auth_client, case_id, "HEALTH", "Blue Shield")
    claim = await add_claim(auth_client, auto["id"], "SF-1", 25000)
    await add_claim(auth_client, health["id"], "BS-1", 4000, status="CLOSED", date_reported="2015-10-01")

    assert claim["policy"]["company"] == "State Farm"

    claims = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/claims")).json()
    assert [c["claimNumber"] for c in claims] == ["BS-1", "SF-1"]

    large = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/claims?minAmount=10000")).json()
    assert [c["claimNumber"] for c in large] == ["SF-1"]

    by_type = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/claims?type=HEALTH")).json()
    assert [c["claimNumber"] for c in by_type] == ["BS-1"]


@pytest.mark.asyncio
async def test_claim_on_unknown_policy(auth_client: AsyncClient):
    response = await auth_client.post(
        "/api/v1/insurance/policies/00000000-0000-0000-0000-000000000000/claims",
        json={"claimNumber": "X-1", "dateReported": "2015-09-20"},
    )
    assert response.status_code == 404


# =============================================================================
# Summary / Coverage
# =============================================================================

@pytest.mark.asyncio
async def test_insurance_summary(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    auto = await add_policy(auth_client, case_id, "AUTO", "State Farm", premium=1200)
    await add_claim(auth_client, auto["id"], "SF-1", 25000)
    await add_claim(auth_client, auto["id"], "SF-2", 5000, status="DENIED")

    response = await auth_client.get(f"/api/v1/insurance/cases/{case_id}/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == {
        "totalPolicies": 1,
        "totalClaims": 2,
        "totalClaimAmount": 30000,
        "averageClaimAmount": 15000,
    }
    assert data["claimsByStatus"]["open"] == {"count": 1, "totalAmount": 25000}
    assert data["claimsByStatus"]["denied"]["count"] == 1
    assert data["policiesByType"] == {"auto": {"count": 1, "totalPremium": 1200}}


@pytest.mark.asyncio
async def test_coverage_gaps_with_only_health(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    await add_policy(auth_client, case_id, "HEALTH", "Blue Shield")

    response = await auth_client.get(f"/api/v1/insurance/cases/{case_id}/coverage-analysis")
    assert response.status_code == 200
    data = response.json()
    assert data["healthInsurance"]["present"] is True
    assert data["autoInsurance"]["present"] is False
    assert data["gaps"] == [
        "No auto insurance policy found",
        "No liability or umbrella insurance found",
    ]
    assert data["recommendations"] == [
        "Add auto insurance policy information",
        "Check for additional liability coverage",
    ]


@pytest.mark.asyncio
async def test_coverage_totals_and_active_claims(auth_client: AsyncClient, sample_case):
    case_id = sample_case["id"]
    auto = await add_policy(
        auth_client, case_id, "AUTO", "State Farm",
        coverageLimits={"bodilyInjury": 100000, "propertyDamage": 50000, "notes": "stacked"},
    )
    await add_policy(auth_client, case_id, "HEALTH", "Blue Shield")
    await add_policy(auth_client, case_id, "UMBRELLA", "Chubb")
    await add_claim(auth_client, auto["id"], "SF-1", 25000)
    await add_claim(auth_client, auto["id"], "SF-2", 1000, status="CLOSED")

    data = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/coverage-analysis")).json()
    assert data["autoInsurance"]["totalCoverage"] == 150000
    assert data["autoInsurance"]["activeClaims"] == 1
    assert data["gaps"] == []

    liability = (await auth_client.get(f"/api/v1/insurance/cases/{case_id}/liability-insurance")).json()
    assert liability["liability"] == []
    assert [p["company"] for p in liability["umbrella"]] == ["Chubb"]
    assert [p["company"] for p in liability["combined"]] == ["Chubb"]
