# backoffice/models.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base

# Reference columns (proprietor_id, tenant_id, property_id) are plain strings
# with no FK constraint: a deleted property leaves its rents orphaned, and
# dangling ids must stay representable.


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    lot_index: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    lot_area: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    type: Mapped[str] = mapped_column(String(30), nullable=False, default="group_asset", index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="holding", index=True)
    land_use: Mapped[str] = mapped_column(String(30), nullable=False, default="unknown")

    images: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    geo_maps: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    location: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)  # {lat, lng, address}
    google_drive_plan_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    has_planning_permission: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # legacy single owner + multi-owner list; proprietor_ids[0] == proprietor_id when both set
    proprietor_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    proprietor_ids: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    tenant_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class Proprietor(Base):
    __tablename__ = "proprietors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, index=True)  # A01 | T07
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="company")
    category: Mapped[str] = mapped_column(String(30), nullable=False, default="group_company", index=True)
    english_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    short_name: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)

    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class Rent(Base):
    __tablename__ = "rents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    property_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    proprietor_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    tenant_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # rent_out|renting

    # ---- legacy (direction-less) ----
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---- rent out (we collect) ----
    rent_out_tenancy_number: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    rent_out_pricing: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_out_monthly_rental: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_out_periods: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rent_out_total_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_out_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rent_out_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rent_out_actual_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rent_out_deposit_received: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_out_deposit_receive_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rent_out_deposit_return_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rent_out_deposit_return_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_out_lessor: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    rent_out_address_detail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rent_out_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # listing|renting|completed
    rent_out_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---- renting (we pay) ----
    renting_number: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    renting_reference_number: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    renting_monthly_rental: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    renting_periods: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    renting_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    renting_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    renting_deposit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
