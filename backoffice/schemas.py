# backoffice/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .domain.entities import (
    MAX_GEO_MAPS,
    MAX_PROPERTY_IMAGES,
    LandUse,
    PropertyStatus,
    PropertyType,
    ProprietorCategory,
    ProprietorType,
    RentOutStatus,
    RentStatus,
    RentType,
)
from .domain.keys import snake_to_camel

# Payloads accept either naming convention: camelCase (the application form,
# what the UI sends) or snake_case. model_dump() always yields snake_case,
# which is the storage form.
_RECORD_CONFIG = ConfigDict(alias_generator=snake_to_camel, populate_by_name=True, use_enum_values=True)


# -------------------- Properties --------------------

class Location(BaseModel):
    lat: float
    lng: float
    address: str = ""


def sync_owner_refs(proprietor_id: Optional[str], proprietor_ids: Optional[list[str]]) -> Optional[str]:
    """
    New writes keep the two owner shapes in agreement: back-fill the legacy id
    from the list, reject a disagreement.
    """
    ids = [i for i in (proprietor_ids or []) if i]
    if not ids:
        return proprietor_id
    if proprietor_id and proprietor_id != ids[0]:
        raise ValueError("proprietor_id must equal proprietor_ids[0]")
    return ids[0]


class PropertyCreate(BaseModel):
    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    address: str = ""
    lot_index: Optional[str] = None
    lot_area: Optional[str] = None

    type: PropertyType = PropertyType.group_asset
    status: PropertyStatus = PropertyStatus.holding
    land_use: LandUse = LandUse.unknown

    images: list[str] = Field(default_factory=list, max_length=MAX_PROPERTY_IMAGES)
    geo_maps: list[str] = Field(default_factory=list, max_length=MAX_GEO_MAPS)
    location: Optional[Location] = None
    google_drive_plan_url: Optional[str] = None
    has_planning_permission: Optional[str] = None
    notes: Optional[str] = None

    proprietor_id: Optional[str] = None
    proprietor_ids: list[str] = Field(default_factory=list)
    tenant_id: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _strip_code(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def _owner_refs(self):
        self.proprietor_id = sync_owner_refs(self.proprietor_id, self.proprietor_ids)
        return self


class PropertyUpdate(BaseModel):
    model_config = _RECORD_CONFIG

    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    lot_index: Optional[str] = None
    lot_area: Optional[str] = None

    type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    land_use: Optional[LandUse] = None

    images: Optional[list[str]] = Field(default=None, max_length=MAX_PROPERTY_IMAGES)
    geo_maps: Optional[list[str]] = Field(default=None, max_length=MAX_GEO_MAPS)
    location: Optional[Location] = None
    google_drive_plan_url: Optional[str] = None
    has_planning_permission: Optional[str] = None
    notes: Optional[str] = None

    proprietor_id: Optional[str] = None
    proprietor_ids: Optional[list[str]] = None
    tenant_id: Optional[str] = None

    @model_validator(mode="after")
    def _owner_refs(self):
        if self.proprietor_ids:
            self.proprietor_id = sync_owner_refs(self.proprietor_id, self.proprietor_ids)
        return self


# -------------------- Proprietors --------------------

class ProprietorCreate(BaseModel):
    model_config = _RECORD_CONFIG

    name: str = Field(min_length=1)
    code: Optional[str] = None  # assigned (A01 / T01 ...) when omitted
    type: ProprietorType = ProprietorType.company
    category: ProprietorCategory = ProprietorCategory.group_company
    english_name: str = ""
    short_name: str = ""

    @field_validator("code")
    @classmethod
    def _upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None


class ProprietorUpdate(BaseModel):
    model_config = _RECORD_CONFIG

    name: Optional[str] = None
    code: Optional[str] = None
    type: Optional[ProprietorType] = None
    category: Optional[ProprietorCategory] = None
    english_name: Optional[str] = None
    short_name: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None


# -------------------- Rents --------------------

class _RentFields(BaseModel):
    model_config = _RECORD_CONFIG

    proprietor_id: Optional[str] = None  # landlord
    tenant_id: Optional[str] = None

    # legacy
    location: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[RentStatus] = None
    notes: Optional[str] = None

    # rent out
    rent_out_tenancy_number: Optional[str] = None
    rent_out_pricing: Optional[float] = Field(default=None, ge=0)
    rent_out_monthly_rental: Optional[float] = Field(default=None, ge=0)
    rent_out_periods: Optional[int] = Field(default=None, ge=1)
    rent_out_total_amount: Optional[float] = Field(default=None, ge=0)
    rent_out_start_date: Optional[datetime] = None
    rent_out_end_date: Optional[datetime] = None
    rent_out_actual_end_date: Optional[datetime] = None
    rent_out_deposit_received: Optional[float] = Field(default=None, ge=0)
    rent_out_deposit_receive_date: Optional[datetime] = None
    rent_out_deposit_return_date: Optional[datetime] = None
    rent_out_deposit_return_amount: Optional[float] = Field(default=None, ge=0)
    rent_out_lessor: Optional[str] = None
    rent_out_address_detail: Optional[str] = None
    rent_out_status: Optional[RentOutStatus] = None
    rent_out_description: Optional[str] = None

    # renting
    renting_number: Optional[str] = None
    renting_reference_number: Optional[str] = None
    renting_monthly_rental: Optional[float] = Field(default=None, ge=0)
    renting_periods: Optional[int] = Field(default=None, ge=1)
    renting_start_date: Optional[datetime] = None
    renting_end_date: Optional[datetime] = None
    renting_deposit: Optional[float] = Field(default=None, ge=0)


class RentCreate(_RentFields):
    property_id: str = Field(min_length=1)
    type: RentType


class RentUpdate(_RentFields):
    property_id: Optional[str] = None
    type: Optional[RentType] = None
