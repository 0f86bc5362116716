# backoffice/routers/proprietors.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..config import settings
from ..db import get_db
from ..domain.entities import EntityKind, ProprietorRole, next_proprietor_code, role_from_code
from ..domain.keys import to_application_form
from ..schemas import ProprietorCreate, ProprietorUpdate
from ..services.ownership import must_get_proprietor
from ..services.storage import RecordStore

router = APIRouter(prefix="/proprietors", tags=["proprietors"])


@router.post("", response_model=dict)
def create_proprietor(payload: ProprietorCreate, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    store = RecordStore(db, principal=p)
    try:
        pid = store.upsert(EntityKind.proprietor, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return to_application_form(store.fetch_one(EntityKind.proprietor, pid))


@router.get("", response_model=list[dict])
def list_proprietors(
    role: Optional[ProprietorRole] = Query(default=None, description="owner (A codes) | tenant (T codes)"),
    db: Session = Depends(get_db),
):
    rows = RecordStore(db).fetch_all(EntityKind.proprietor)
    if role is not None:
        rows = [r for r in rows if role_from_code(r.get("code")) == role]
    return [to_application_form(r) for r in rows]


@router.get("/next_code", response_model=dict)
def next_code(role: ProprietorRole = Query(default=ProprietorRole.owner), db: Session = Depends(get_db)):
    codes = [r.get("code") for r in RecordStore(db).fetch_all(EntityKind.proprietor)]
    return {"role": role.value, "code": next_proprietor_code(codes, role, width=settings.proprietor_code_width)}


@router.get("/{proprietor_id}", response_model=dict)
def get_proprietor(proprietor_id: str, db: Session = Depends(get_db)):
    store = RecordStore(db)
    out = to_application_form(must_get_proprietor(store, proprietor_id=proprietor_id))
    out["linked"] = [link.as_record() for link in store.linked_records(proprietor_id)]
    return out


@router.patch("/{proprietor_id}", response_model=dict)
def update_proprietor(
    proprietor_id: str,
    payload: ProprietorUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    store = RecordStore(db, principal=p)
    must_get_proprietor(store, proprietor_id=proprietor_id)

    data = payload.model_dump(exclude_unset=True)
    data["id"] = proprietor_id
    try:
        store.upsert(EntityKind.proprietor, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return to_application_form(store.fetch_one(EntityKind.proprietor, proprietor_id))


@router.delete("/{proprietor_id}")
def delete_proprietor(proprietor_id: str, db: Session = Depends(get_db)):
    res = RecordStore(db).delete(EntityKind.proprietor, proprietor_id)
    if res:
        return {"ok": True}
    if res.linked:
        raise HTTPException(
            status_code=409,
            detail={
                "message": "proprietor is still referenced",
                "linked": [link.as_record() for link in res.linked],
            },
        )
    raise HTTPException(status_code=404, detail="proprietor not found")
