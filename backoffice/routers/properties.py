# backoffice/routers/properties.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..domain.entities import EntityKind
from ..domain.keys import to_application_form
from ..schemas import PropertyCreate, PropertyUpdate, sync_owner_refs
from ..services.ownership import must_get_property
from ..services.storage import RecordStore
from ..services.views import load_dataset, ownership_warnings, property_view

router = APIRouter(prefix="/properties", tags=["properties"])


def _view_or_404(store: RecordStore, property_id: str) -> dict:
    view = property_view(load_dataset(store), property_id)
    if view is None:
        raise HTTPException(status_code=404, detail="property not found")
    return view


@router.post("", response_model=dict)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    store = RecordStore(db, principal=p)
    try:
        pid = store.upsert(EntityKind.property, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view_or_404(store, pid)


@router.get("", response_model=list[dict])
def list_properties(
    q: Optional[str] = Query(default=None, description="matches name, code or address"),
    db: Session = Depends(get_db),
):
    store = RecordStore(db)
    rows = store.search_properties(q) if q else store.fetch_all(EntityKind.property)
    return [to_application_form(r) for r in rows]


@router.get("/{property_id}", response_model=dict)
def get_property(property_id: str, db: Session = Depends(get_db)):
    """
    Property with proprietor(s), tenant and rents; each rent carries its
    effective lease fields under `lease`.
    """
    return _view_or_404(RecordStore(db), property_id)


@router.get("/{property_id}/ownership", response_model=dict)
def property_ownership(property_id: str, db: Session = Depends(get_db)):
    store = RecordStore(db)
    prop = to_application_form(must_get_property(store, property_id=property_id))
    people = [to_application_form(r) for r in store.fetch_all(EntityKind.proprietor)]
    return {"propertyId": property_id, "warnings": ownership_warnings(prop, people)}


@router.patch("/{property_id}", response_model=dict)
def update_property(
    property_id: str,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    store = RecordStore(db, principal=p)
    current = must_get_property(store, property_id=property_id)

    data = payload.model_dump(exclude_unset=True)
    if "proprietor_id" in data and "proprietor_ids" not in data:
        # the body only moves the primary owner; it still has to match the stored list
        try:
            data["proprietor_id"] = sync_owner_refs(data["proprietor_id"], current.get("proprietor_ids"))
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    data["id"] = property_id
    try:
        store.upsert(EntityKind.property, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view_or_404(store, property_id)


@router.delete("/{property_id}")
def delete_property(property_id: str, db: Session = Depends(get_db)):
    """Rents of the property are kept; they become orphaned."""
    res = RecordStore(db).delete(EntityKind.property, property_id)
    if not res:
        raise HTTPException(status_code=404, detail="property not found")
    return {"ok": True}
