# backoffice/domain/entities.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional


class EntityKind(str, Enum):
    property = "property"
    proprietor = "proprietor"
    rent = "rent"


class PropertyType(str, Enum):
    group_asset = "group_asset"
    co_investment = "co_investment"
    external_lease = "external_lease"
    managed_asset = "managed_asset"


class PropertyStatus(str, Enum):
    holding = "holding"
    renting = "renting"
    sold = "sold"
    suspended = "suspended"


class LandUse(str, Enum):
    unknown = "unknown"
    open_storage = "open_storage"
    residential_a = "residential_a"
    residential_c = "residential_c"
    open_space = "open_space"
    recreation_use = "recreation_use"
    village_dev = "village_dev"
    conservation_area = "conservation_area"


class ProprietorType(str, Enum):
    company = "company"
    individual = "individual"


class ProprietorCategory(str, Enum):
    group_company = "group_company"
    joint_venture = "joint_venture"
    managed_individual = "managed_individual"
    external_landlord = "external_landlord"
    tenant = "tenant"


class RentType(str, Enum):
    rent_out = "rent_out"  # we are landlord, collecting
    renting = "renting"  # we are tenant, paying


class RentStatus(str, Enum):
    # legacy, direction-less
    active = "active"
    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"


class RentOutStatus(str, Enum):
    listing = "listing"
    renting = "renting"
    completed = "completed"


class ProprietorRole(str, Enum):
    owner = "owner"
    tenant = "tenant"


ROLE_PREFIX = {ProprietorRole.owner: "A", ProprietorRole.tenant: "T"}

MAX_PROPERTY_IMAGES = 5
MAX_GEO_MAPS = 2

_CODE_RE = re.compile(r"^([A-Za-z]+)(\d+)$")


def _get(record: Any, key: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


# -----------------------------
# Proprietor codes / roles
# -----------------------------
def role_from_code(code: Optional[str]) -> Optional[ProprietorRole]:
    """
    The code prefix is the sole role discriminator: A.. = owner, T.. = tenant.
    """
    c = (code or "").strip().upper()
    if c.startswith("T"):
        return ProprietorRole.tenant
    if c.startswith("A"):
        return ProprietorRole.owner
    return None


def role_for_category(category: Optional[str]) -> ProprietorRole:
    if (category or "").strip().lower() == ProprietorCategory.tenant.value:
        return ProprietorRole.tenant
    return ProprietorRole.owner


def next_proprietor_code(existing_codes: Iterable[Optional[str]], role: ProprietorRole, *, width: int = 2) -> str:
    """
    Sequential per prefix: highest existing number for the prefix + 1, zero-padded.

    A01, A02, T01 + role=owner -> A03. Gaps left by deletes are not reused.
    """
    prefix = ROLE_PREFIX[ProprietorRole(role)]
    highest = 0
    for code in existing_codes:
        m = _CODE_RE.match((code or "").strip())
        if not m or m.group(1).upper() != prefix:
            continue
        highest = max(highest, int(m.group(2)))
    return f"{prefix}{str(highest + 1).zfill(width)}"


# -----------------------------
# Ownership references
# -----------------------------
@dataclass(frozen=True)
class OwnershipRefs:
    """
    Validated view over the two coexisting proprietor reference shapes.

    primary: the id used for single-owner display
    all_ids: every owner id, primary first, no duplicates
    legacy_only: the record predates the multi-reference list
    """

    primary: Optional[str]
    all_ids: tuple[str, ...]
    legacy_only: bool


@dataclass(frozen=True)
class DataQualityWarning:
    code: str
    message: str
    record_id: Optional[str] = None


def _clean_id(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def ownership_refs(prop: Any) -> OwnershipRefs:
    legacy = _clean_id(_get(prop, "proprietorId"))
    raw_list = _get(prop, "proprietorIds")
    ids: list[str] = []
    if isinstance(raw_list, (list, tuple)):
        for v in raw_list:
            cid = _clean_id(v)
            if cid and cid not in ids:
                ids.append(cid)

    if not ids:
        return OwnershipRefs(primary=legacy, all_ids=(legacy,) if legacy else (), legacy_only=True)

    primary = legacy or ids[0]
    ordered = [primary] + [i for i in ids if i != primary]
    return OwnershipRefs(primary=primary, all_ids=tuple(ordered), legacy_only=False)


def check_ownership(prop: Any) -> list[DataQualityWarning]:
    """
    Data-quality checks for the dual proprietor reference.
    Historical rows may predate proprietorIds, so nothing here is fatal.
    """
    out: list[DataQualityWarning] = []
    pid = _clean_id(_get(prop, "id"))
    legacy = _clean_id(_get(prop, "proprietorId"))
    raw_list = _get(prop, "proprietorIds")

    if raw_list is not None and not isinstance(raw_list, (list, tuple)):
        out.append(DataQualityWarning("proprietor_ids_not_list", "proprietorIds is not a list", pid))
        return out

    ids = [_clean_id(v) for v in (raw_list or [])]
    if ids and ids[0] != legacy:
        out.append(
            DataQualityWarning(
                "primary_proprietor_mismatch",
                f"proprietorId={legacy!r} disagrees with proprietorIds[0]={ids[0]!r}",
                pid,
            )
        )
    if any(i is None for i in ids):
        out.append(DataQualityWarning("blank_proprietor_ref", "proprietorIds contains a blank id", pid))
    return out


def check_role(proprietor: Any, role: ProprietorRole, *, record_id: Optional[str] = None) -> list[DataQualityWarning]:
    """
    A record used as tenant should carry a T code and the tenant category;
    a record used as owner should carry an A code.
    """
    if proprietor is None:
        return []

    code = _get(proprietor, "code")
    got = role_from_code(code)
    out: list[DataQualityWarning] = []
    if got != role:
        out.append(
            DataQualityWarning(
                "role_code_mismatch",
                f"proprietor code {code!r} used as {ProprietorRole(role).value}",
                record_id,
            )
        )
    category = _get(proprietor, "category")
    if category and role_for_category(category) != role:
        out.append(
            DataQualityWarning(
                "role_category_mismatch",
                f"proprietor category {category!r} used as {ProprietorRole(role).value}",
                record_id,
            )
        )
    return out
