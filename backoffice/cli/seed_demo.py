# backoffice/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import SessionLocal, init_db
from ..domain.entities import EntityKind
from ..models import Property, Proprietor, Rent
from ..services.storage import RecordStore


@dataclass(frozen=True)
class SeedResult:
    owner_id: str
    tenant_id: str
    property_id: str
    rent_id: Optional[str]


def _get_or_create_proprietor(db: Session, store: RecordStore, *, name: str, category: str) -> str:
    row = db.scalars(select(Proprietor).where(Proprietor.name == name)).first()
    if row:
        return row.id
    return store.upsert(
        EntityKind.proprietor,
        {"name": name, "type": "company", "category": category},
    )


def _get_or_create_property(db: Session, store: RecordStore, *, code: str, owner_id: str, tenant_id: str) -> str:
    row = db.scalars(select(Property).where(Property.code == code)).first()
    if row:
        return row.id
    return store.upsert(
        EntityKind.property,
        {
            "name": "Demo Industrial Lot",
            "code": code,
            "address": "1 Demo Road",
            "type": "group_asset",
            "status": "holding",
            "land_use": "open_storage",
            "proprietor_id": owner_id,
            "proprietor_ids": [owner_id],
            "tenant_id": tenant_id,
        },
    )


def seed_demo(
    *,
    property_code: str = "DEMO-001",
    monthly_rental: float = 12000.0,
    periods: int = 12,
    create_sample_rent: bool = True,
) -> SeedResult:
    init_db()
    db = SessionLocal()
    try:
        store = RecordStore(db)
        owner_id = _get_or_create_proprietor(db, store, name="Demo Holdings Ltd", category="group_company")
        tenant_id = _get_or_create_proprietor(db, store, name="Demo Logistics Ltd", category="tenant")
        property_id = _get_or_create_property(
            db, store, code=property_code, owner_id=owner_id, tenant_id=tenant_id
        )

        rent_id: Optional[str] = None
        if create_sample_rent:
            existing = db.scalars(select(Rent).where(Rent.property_id == property_id)).first()
            if existing:
                rent_id = existing.id
            else:
                start = datetime.now(timezone.utc).replace(microsecond=0)
                rent_id = store.upsert(
                    EntityKind.rent,
                    {
                        "property_id": property_id,
                        "proprietor_id": owner_id,
                        "tenant_id": tenant_id,
                        "type": "rent_out",
                        "rent_out_monthly_rental": monthly_rental,
                        "rent_out_periods": periods,
                        "rent_out_start_date": start,
                        "rent_out_end_date": start + timedelta(days=30 * periods),
                        "rent_out_status": "renting",
                    },
                )

        return SeedResult(owner_id=owner_id, tenant_id=tenant_id, property_id=property_id, rent_id=rent_id)
    finally:
        db.close()
