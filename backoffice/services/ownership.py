# backoffice/services/ownership.py
from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from ..domain.entities import EntityKind
from .storage import RecordStore


def _must_get(store: RecordStore, kind: EntityKind, record_id: str) -> dict[str, Any]:
    row = store.fetch_one(kind, record_id)
    if not row:
        raise HTTPException(status_code=404, detail=f"{kind.value} not found")
    return row


def must_get_property(store: RecordStore, *, property_id: str) -> dict[str, Any]:
    return _must_get(store, EntityKind.property, property_id)


def must_get_proprietor(store: RecordStore, *, proprietor_id: str) -> dict[str, Any]:
    return _must_get(store, EntityKind.proprietor, proprietor_id)


def must_get_rent(store: RecordStore, *, rent_id: str) -> dict[str, Any]:
    return _must_get(store, EntityKind.rent, rent_id)
