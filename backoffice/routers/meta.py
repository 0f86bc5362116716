# backoffice/routers/meta.py
from __future__ import annotations

from fastapi import APIRouter

from ..config import settings
from ..domain.entities import (
    LandUse,
    PropertyStatus,
    PropertyType,
    ProprietorCategory,
    ProprietorType,
    RentOutStatus,
    RentStatus,
    RentType,
)

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=dict)
def health():
    return {"ok": True, "env": settings.app_env, "version": settings.app_version}


@router.get("/meta/enums", response_model=dict)
def enums():
    """Choice lists for the record forms."""
    return {
        "propertyType": [e.value for e in PropertyType],
        "propertyStatus": [e.value for e in PropertyStatus],
        "landUse": [e.value for e in LandUse],
        "proprietorType": [e.value for e in ProprietorType],
        "proprietorCategory": [e.value for e in ProprietorCategory],
        "rentType": [e.value for e in RentType],
        "rentStatus": [e.value for e in RentStatus],
        "rentOutStatus": [e.value for e in RentOutStatus],
    }
