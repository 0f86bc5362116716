# backoffice/routers/rents.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..domain.entities import EntityKind, RentType
from ..schemas import RentCreate, RentUpdate
from ..services.ownership import must_get_property, must_get_rent
from ..services.storage import RecordStore
from ..services.views import load_dataset, rents_view

router = APIRouter(prefix="/rents", tags=["rents"])


def _rent_view(store: RecordStore, rent_id: str) -> dict:
    rows = [r for r in rents_view(load_dataset(store)) if r.get("id") == rent_id]
    if not rows:
        raise HTTPException(status_code=404, detail="rent not found")
    return rows[0]


@router.post("", response_model=dict)
def create_rent(payload: RentCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    store = RecordStore(db, principal=p)
    must_get_property(store, property_id=payload.property_id)
    try:
        rid = store.upsert(EntityKind.rent, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _rent_view(store, rid)


@router.get("", response_model=list[dict])
def list_rents(
    type: Optional[RentType] = Query(default=None, description="rent_out | renting"),
    db: Session = Depends(get_db),
):
    """
    Newest first, with property / landlord / tenant attached and the
    effective lease fields under `lease`.
    """
    return rents_view(load_dataset(RecordStore(db)), rent_type=type.value if type else None)


@router.get("/{rent_id}", response_model=dict)
def get_rent(rent_id: str, db: Session = Depends(get_db)):
    return _rent_view(RecordStore(db), rent_id)


@router.patch("/{rent_id}", response_model=dict)
def update_rent(
    rent_id: str,
    payload: RentUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    store = RecordStore(db, principal=p)
    must_get_rent(store, rent_id=rent_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("property_id"):
        must_get_property(store, property_id=data["property_id"])

    data["id"] = rent_id
    try:
        store.upsert(EntityKind.rent, data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _rent_view(store, rent_id)


@router.post("/{rent_id}/unlink", response_model=dict)
def unlink_rent(rent_id: str, db: Session = Depends(get_db)):
    store = RecordStore(db)
    if not store.unlink_rent(rent_id):
        raise HTTPException(status_code=404, detail="rent not found")
    return _rent_view(store, rent_id)


@router.delete("/{rent_id}")
def delete_rent(rent_id: str, db: Session = Depends(get_db)):
    if not RecordStore(db).delete(EntityKind.rent, rent_id):
        raise HTTPException(status_code=404, detail="rent not found")
    return {"ok": True}
