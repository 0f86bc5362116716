# tests/test_record_store.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backoffice.auth import Principal
from backoffice.db import SessionLocal
from backoffice.domain.entities import EntityKind
from backoffice.domain.keys import to_application_form
from backoffice.domain.relations import resolve_rent
from backoffice.services.storage import RecordStore
from backoffice.services.views import dashboard_view, load_dataset, relations_view


def _seed(store: RecordStore) -> tuple[str, str, str]:
    owner = store.upsert(EntityKind.proprietor, {"name": "Owner Co", "category": "group_company"})
    tenant = store.upsert(EntityKind.proprietor, {"name": "Tenant Co", "category": "tenant"})
    prop = store.upsert(
        EntityKind.property,
        {"name": "Lot 1", "code": "P1", "address": "1 Harbour Rd", "proprietor_ids": [owner], "tenant_id": tenant},
    )
    return owner, tenant, prop


def test_proprietor_codes_are_assigned_per_prefix():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        a1 = store.upsert(EntityKind.proprietor, {"name": "A", "category": "group_company"})
        t1 = store.upsert(EntityKind.proprietor, {"name": "T", "category": "tenant"})
        a2 = store.upsert(EntityKind.proprietor, {"name": "B", "category": "joint_venture"})
        explicit = store.upsert(EntityKind.proprietor, {"name": "C", "code": "A09"})
        a10 = store.upsert(EntityKind.proprietor, {"name": "D"})

        codes = {pid: store.fetch_one(EntityKind.proprietor, pid)["code"] for pid in (a1, t1, a2, explicit, a10)}
        assert codes == {a1: "A01", t1: "T01", a2: "A02", explicit: "A09", a10: "A10"}
    finally:
        db.close()


def test_property_upsert_backfills_primary_and_rejects_duplicate_code():
    db = SessionLocal()
    try:
        store = RecordStore(db, principal=Principal(user_id="u1", role="staff"))
        owner, tenant, prop = _seed(store)

        row = store.fetch_one(EntityKind.property, prop)
        assert row["proprietor_id"] == owner
        assert row["proprietor_ids"] == [owner]
        assert row["created_by"] == "u1"

        with pytest.raises(ValueError):
            store.upsert(EntityKind.property, {"name": "Other", "code": "P1"})
    finally:
        db.close()


def test_update_sets_and_clears_columns():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        _, _, prop = _seed(store)
        store.upsert(EntityKind.property, {"id": prop, "status": "renting", "tenant_id": None, "bogus": 1})

        row = store.fetch_one(EntityKind.property, prop)
        assert row["status"] == "renting"
        assert row["tenant_id"] is None
        assert "bogus" not in row
    finally:
        db.close()


def test_rent_dates_are_stored_as_utc_and_type_is_checked():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        _, _, prop = _seed(store)
        end = datetime(2027, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=8)))
        rid = store.upsert(
            EntityKind.rent,
            {"property_id": prop, "type": "rent_out", "rent_out_end_date": end, "rent_out_monthly_rental": 100},
        )
        row = store.fetch_one(EntityKind.rent, rid)
        assert row["rent_out_end_date"] == datetime(2027, 1, 1, 0, 0)
        assert row["currency"] == "HKD"

        with pytest.raises(ValueError):
            store.upsert(EntityKind.rent, {"property_id": prop, "type": "sublet"})
    finally:
        db.close()


def test_search_properties():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        _seed(store)
        store.upsert(EntityKind.property, {"name": "Warehouse", "code": "W7", "address": "9 Kiln St"})
        assert [r["code"] for r in store.search_properties("harbour")] == ["P1"]
        assert [r["code"] for r in store.search_properties("w7")] == ["W7"]
        assert len(store.search_properties("  ")) == 2
    finally:
        db.close()


def test_property_delete_leaves_rents_orphaned():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        owner, tenant, prop = _seed(store)
        rid = store.upsert(EntityKind.rent, {"property_id": prop, "type": "renting", "amount": 10})

        assert store.delete(EntityKind.property, prop)
        rent = store.fetch_one(EntityKind.rent, rid)
        assert rent is not None
        assert rent["property_id"] == prop

        props = [to_application_form(r) for r in store.fetch_all(EntityKind.property)]
        assert resolve_rent(to_application_form(rent), props, [])["property"] is None
    finally:
        db.close()


def test_unlink_and_delete_rent():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        _, _, prop = _seed(store)
        rid = store.upsert(EntityKind.rent, {"property_id": prop, "type": "rent_out"})

        assert store.unlink_rent(rid) is True
        assert store.fetch_one(EntityKind.rent, rid)["property_id"] is None
        assert store.unlink_rent("nope") is False

        assert store.delete(EntityKind.rent, rid)
        assert store.fetch_one(EntityKind.rent, rid) is None
    finally:
        db.close()


def test_proprietor_delete_refused_while_referenced():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        owner, tenant, prop = _seed(store)
        rid = store.upsert(
            EntityKind.rent, {"property_id": prop, "type": "rent_out", "tenant_id": tenant, "proprietor_id": owner}
        )

        res = store.delete(EntityKind.proprietor, tenant)
        assert not res
        assert ("rent", rid, "tenantId") in {(link.kind.value, link.id, link.field) for link in res.linked}
        assert store.fetch_one(EntityKind.proprietor, tenant) is not None

        # free it up, then the delete goes through
        store.upsert(EntityKind.property, {"id": prop, "tenant_id": None})
        store.upsert(EntityKind.rent, {"id": rid, "tenant_id": None})
        assert store.delete(EntityKind.proprietor, tenant)

        missing = store.delete(EntityKind.proprietor, "does-not-exist")
        assert not missing
        assert missing.reason == "not found"
        assert missing.linked == ()
    finally:
        db.close()


def test_dataset_views():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        owner, tenant, prop = _seed(store)
        store.upsert(
            EntityKind.rent,
            {
                "property_id": prop,
                "type": "rent_out",
                "rent_out_monthly_rental": 50000,
                "rent_out_periods": 12,
                "rent_out_status": "renting",
            },
        )

        ds = load_dataset(store)
        rel = relations_view(ds)
        assert rel[0]["proprietor"]["id"] == owner
        assert rel[0]["tenant"]["code"] == "T01"
        assert rel[0]["rents"][0]["lease"]["totalAmount"] == 600000.0

        stats = dashboard_view(ds)
        assert stats["totalProperties"] == 1
        assert stats["totalProprietors"] == 2
        assert stats["totalRents"] == 1
        assert stats["totalIncome"] == 600000.0
        assert stats["rentingLeases"] == 1

        staff = load_dataset(store, principal=Principal(user_id="someone", role="staff"))
        assert staff.properties == []
    finally:
        db.close()


def test_proprietor_code_must_be_unique():
    db = SessionLocal()
    try:
        store = RecordStore(db)
        first = store.upsert(EntityKind.proprietor, {"name": "First"})
        second = store.upsert(EntityKind.proprietor, {"name": "Second"})

        with pytest.raises(ValueError):
            store.upsert(EntityKind.proprietor, {"name": "Copy", "code": "a01"})
        with pytest.raises(ValueError):
            store.upsert(EntityKind.proprietor, {"id": second, "code": "A01"})

        assert store.fetch_one(EntityKind.proprietor, second)["code"] == "A02"
        # re-saving a record with its own code is fine
        assert store.upsert(EntityKind.proprietor, {"id": first, "code": "A01", "name": "First Ltd"}) == first
    finally:
        db.close()
