# backoffice/routers/dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..services.storage import RecordStore
from ..services.views import dashboard_view, load_dataset, relations_view

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=dict)
def dashboard_stats(db: Session = Depends(get_db)):
    """
    Top dashboard cards: counts, property status breakdown, active/expired
    leases, income vs expenses.
    """
    return dashboard_view(load_dataset(RecordStore(db)))


@router.get("/relations", response_model=list[dict])
def dashboard_relations(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    """
    Every property with its proprietor(s), tenant and rents, sorted by code.
    Non-admin principals only see the records they created.
    """
    return relations_view(load_dataset(RecordStore(db), principal=p))
