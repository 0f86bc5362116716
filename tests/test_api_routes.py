# tests/test_api_routes.py
from __future__ import annotations

from fastapi.testclient import TestClient

from backoffice.main import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def _staff(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id, "X-User-Role": "staff"}


def _mk_people(client: TestClient) -> tuple[str, str]:
    owner = client.post("/api/proprietors", json={"name": "Owner Co", "category": "group_company"})
    tenant = client.post("/api/proprietors", json={"name": "Tenant Co", "category": "tenant"})
    assert owner.status_code == 200, owner.text
    assert tenant.status_code == 200, tenant.text
    assert owner.json()["code"] == "A01"
    assert tenant.json()["code"] == "T01"
    return owner.json()["id"], tenant.json()["id"]


def _mk_property(client: TestClient, owner: str, tenant: str, code: str = "P1", headers=None) -> dict:
    r = client.post(
        "/api/properties",
        json={"name": f"Lot {code}", "code": code, "address": "1 Harbour Rd", "proprietorIds": [owner], "tenantId": tenant},
        headers=headers or {},
    )
    assert r.status_code == 200, r.text
    return r.json()


def test_health_and_request_id():
    client = _client()
    r = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.headers["X-Request-ID"] == "req-123"

    enums = client.get("/api/meta/enums").json()
    assert enums["propertyStatus"] == ["holding", "renting", "sold", "suspended"]
    assert len(enums["landUse"]) == 8


def test_property_lifecycle_with_rent():
    client = _client()
    owner, tenant = _mk_people(client)
    prop = _mk_property(client, owner, tenant)

    assert prop["proprietorId"] == owner
    assert prop["proprietor"]["code"] == "A01"
    assert prop["tenant"]["code"] == "T01"
    assert prop["warnings"] == []

    r = client.post(
        "/api/rents",
        json={"propertyId": prop["id"], "type": "rent_out", "rentOutMonthlyRental": 50000, "rentOutPeriods": 12},
    )
    assert r.status_code == 200, r.text
    rent = r.json()
    assert rent["property"]["id"] == prop["id"]
    assert rent["lease"]["effectiveAmount"] == 50000.0
    assert rent["lease"]["totalAmount"] == 600000.0
    assert rent["lease"]["isExpired"] is False

    detail = client.get(f"/api/properties/{prop['id']}").json()
    assert [x["id"] for x in detail["rents"]] == [rent["id"]]

    stats = client.get("/api/dashboard/stats").json()
    assert stats["totalProperties"] == 1
    assert stats["totalIncome"] == 600000.0
    assert stats["statusBreakdown"]["holding"] == 1

    assert client.get("/api/rents", params={"type": "renting"}).json() == []
    assert len(client.get("/api/rents", params={"type": "rent_out"}).json()) == 1

    r = client.patch(f"/api/properties/{prop['id']}", json={"status": "renting"})
    assert r.status_code == 200
    assert r.json()["status"] == "renting"

    assert client.delete(f"/api/properties/{prop['id']}").status_code == 200
    orphan = client.get(f"/api/rents/{rent['id']}").json()
    assert orphan["property"] is None


def test_property_validation():
    client = _client()
    owner, tenant = _mk_people(client)
    _mk_property(client, owner, tenant)

    dup = client.post("/api/properties", json={"name": "Again", "code": "P1"})
    assert dup.status_code == 409

    mismatch = client.post(
        "/api/properties",
        json={"name": "X", "code": "P2", "proprietorId": tenant, "proprietorIds": [owner]},
    )
    assert mismatch.status_code == 422

    too_many = client.post("/api/properties", json={"name": "Y", "code": "P3", "geoMaps": ["a", "b", "c"]})
    assert too_many.status_code == 422

    assert client.get("/api/properties/nope").status_code == 404
    assert [p["code"] for p in client.get("/api/properties", params={"q": "harbour"}).json()] == ["P1"]


def test_ownership_endpoint_reports_role_mismatch():
    client = _client()
    owner, tenant = _mk_people(client)
    # tenant record used as the owner
    prop = _mk_property(client, tenant, owner)
    warnings = client.get(f"/api/properties/{prop['id']}/ownership").json()["warnings"]
    assert "role_code_mismatch" in {w["code"] for w in warnings}


def test_proprietor_delete_is_refused_while_referenced():
    client = _client()
    owner, tenant = _mk_people(client)
    prop = _mk_property(client, owner, tenant)
    rent = client.post("/api/rents", json={"propertyId": prop["id"], "type": "renting", "proprietorId": owner}).json()

    r = client.delete(f"/api/proprietors/{owner}")
    assert r.status_code == 409
    linked = r.json()["detail"]["linked"]
    assert {"kind": "rent", "id": rent["id"], "field": "proprietorId"} in linked
    assert {"kind": "property", "id": prop["id"], "field": "proprietorId"} in linked

    assert client.get(f"/api/proprietors/{owner}").json()["linked"] == linked
    assert client.delete("/api/proprietors/nope").status_code == 404


def test_proprietor_codes_and_role_filter():
    client = _client()
    _mk_people(client)
    assert client.get("/api/proprietors/next_code", params={"role": "tenant"}).json()["code"] == "T02"
    assert client.get("/api/proprietors/next_code").json()["code"] == "A02"

    tenants = client.get("/api/proprietors", params={"role": "tenant"}).json()
    assert [p["code"] for p in tenants] == ["T01"]

    r = client.post("/api/proprietors", json={"name": "Manual", "code": " a05 "})
    assert r.json()["code"] == "A05"


def test_rent_unlink_and_delete():
    client = _client()
    owner, tenant = _mk_people(client)
    prop = _mk_property(client, owner, tenant)

    assert client.post("/api/rents", json={"propertyId": "missing", "type": "rent_out"}).status_code == 404
    assert client.post("/api/rents", json={"propertyId": prop["id"], "type": "sublet"}).status_code == 422

    rent = client.post(
        "/api/rents",
        json={"propertyId": prop["id"], "type": "renting", "startDate": "2024-01-01T00:00:00Z", "endDate": "2025-01-01T00:00:00Z"},
    ).json()
    assert rent["lease"]["isExpired"] is True

    unlinked = client.post(f"/api/rents/{rent['id']}/unlink").json()
    assert unlinked["propertyId"] is None
    assert unlinked["property"] is None

    assert client.delete(f"/api/rents/{rent['id']}").status_code == 200
    assert client.get(f"/api/rents/{rent['id']}").status_code == 404


def test_relations_are_scoped_for_staff():
    client = _client()
    owner, tenant = _mk_people(client)
    _mk_property(client, owner, tenant, code="P1", headers=_staff("u1"))
    _mk_property(client, owner, tenant, code="P2", headers=_staff("u2"))

    assert [p["code"] for p in client.get("/api/dashboard/relations").json()] == ["P1", "P2"]
    assert [p["code"] for p in client.get("/api/dashboard/relations", headers=_staff("u2")).json()] == ["P2"]
    assert client.get("/api/dashboard/relations", headers={"X-User-Role": "staff"}).status_code == 401


def test_patch_primary_owner_must_match_stored_list():
    client = _client()
    owner, tenant = _mk_people(client)
    prop = _mk_property(client, owner, tenant)

    r = client.patch(f"/api/properties/{prop['id']}", json={"proprietorId": tenant})
    assert r.status_code == 422

    stored = client.get(f"/api/properties/{prop['id']}").json()
    assert stored["proprietorId"] == owner
    assert stored["proprietorIds"] == [owner]
    assert stored["warnings"] == []

    assert client.patch(f"/api/properties/{prop['id']}", json={"proprietorId": owner}).status_code == 200

    # moving the list moves the primary with it
    r = client.patch(f"/api/properties/{prop['id']}", json={"proprietorIds": [tenant, owner]})
    assert r.status_code == 200
    assert r.json()["proprietorId"] == tenant


def test_duplicate_proprietor_code_is_rejected():
    client = _client()
    owner, tenant = _mk_people(client)

    assert client.post("/api/proprietors", json={"name": "Clash", "code": "A01"}).status_code == 409
    assert client.patch(f"/api/proprietors/{tenant}", json={"code": "A01"}).status_code == 409
    assert client.get(f"/api/proprietors/{tenant}").json()["code"] == "T01"
