# backoffice/domain/relations.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .entities import EntityKind, ownership_refs


@dataclass(frozen=True)
class LinkedRecord:
    kind: EntityKind
    id: Optional[str]
    field: str

    def as_record(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "id": self.id, "field": self.field}


def _id(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def index_by_id(records: Optional[Iterable[Mapping[str, Any]]]) -> dict[str, Mapping[str, Any]]:
    """
    id -> record. On duplicate ids the first record wins.
    """
    out: dict[str, Mapping[str, Any]] = {}
    for r in records or ():
        rid = _id(r.get("id"))
        if rid is not None and rid not in out:
            out[rid] = r
    return out


def _copy(record: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    return dict(record) if record is not None else None


def _resolve(
    prop: Mapping[str, Any],
    by_id: dict[str, Mapping[str, Any]],
    rents: list[Mapping[str, Any]],
) -> dict[str, Any]:
    refs = ownership_refs(prop)
    owners = [_copy(by_id[i]) for i in refs.all_ids if i in by_id]
    tenant_id = _id(prop.get("tenantId"))
    prop_id = _id(prop.get("id"))

    out = dict(prop)
    out["proprietor"] = _copy(by_id.get(refs.primary)) if refs.primary else None
    out["proprietors"] = owners
    out["tenant"] = _copy(by_id.get(tenant_id)) if tenant_id else None
    out["rents"] = [dict(r) for r in rents if prop_id is not None and _id(r.get("propertyId")) == prop_id]
    return out


def resolve_property(
    prop: Mapping[str, Any],
    proprietors: Optional[Iterable[Mapping[str, Any]]],
    rents: Optional[Iterable[Mapping[str, Any]]],
) -> dict[str, Any]:
    """
    Property with relations (application form in, application form out).

    - proprietor: primary owner (legacy proprietorId, else proprietorIds[0])
    - proprietors: every owner that resolves, primary first
    - tenant: current tenant
    - rents: leases pointing at this property, in source order

    Dangling ids resolve to None (or are left out of `proprietors`).
    """
    return _resolve(prop, index_by_id(proprietors), list(rents or ()))


def resolve_all(
    properties: Optional[Iterable[Mapping[str, Any]]],
    proprietors: Optional[Iterable[Mapping[str, Any]]],
    rents: Optional[Iterable[Mapping[str, Any]]],
) -> list[dict[str, Any]]:
    by_id = index_by_id(proprietors)
    rent_list = list(rents or ())
    return [_resolve(p, by_id, rent_list) for p in properties or ()]


def resolve_rent(
    rent: Mapping[str, Any],
    properties: Optional[Iterable[Mapping[str, Any]]],
    proprietors: Optional[Iterable[Mapping[str, Any]]],
) -> dict[str, Any]:
    """
    Rent with its property, landlord and tenant attached.
    An orphaned rent (property deleted or unlinked) gets property=None.
    """
    props = index_by_id(properties)
    people = index_by_id(proprietors)

    out = dict(rent)
    out["property"] = _copy(props.get(_id(rent.get("propertyId")) or ""))
    out["proprietor"] = _copy(people.get(_id(rent.get("proprietorId")) or ""))
    out["tenant"] = _copy(people.get(_id(rent.get("tenantId")) or ""))
    return out


def find_proprietor_links(
    proprietor_id: Any,
    properties: Optional[Iterable[Mapping[str, Any]]],
    rents: Optional[Iterable[Mapping[str, Any]]],
) -> list[LinkedRecord]:
    """
    Every property/rent reference that would dangle if the proprietor went away.
    """
    target = _id(proprietor_id)
    if target is None:
        return []

    out: list[LinkedRecord] = []
    for p in properties or ():
        pid = _id(p.get("id"))
        if _id(p.get("proprietorId")) == target:
            out.append(LinkedRecord(EntityKind.property, pid, "proprietorId"))
        elif target in ownership_refs(p).all_ids:
            out.append(LinkedRecord(EntityKind.property, pid, "proprietorIds"))
        if _id(p.get("tenantId")) == target:
            out.append(LinkedRecord(EntityKind.property, pid, "tenantId"))

    for r in rents or ():
        rid = _id(r.get("id"))
        if _id(r.get("proprietorId")) == target:
            out.append(LinkedRecord(EntityKind.rent, rid, "proprietorId"))
        if _id(r.get("tenantId")) == target:
            out.append(LinkedRecord(EntityKind.rent, rid, "tenantId"))
    return out


def scope_to_principal(records: Optional[Iterable[Mapping[str, Any]]], principal: Any) -> list[Mapping[str, Any]]:
    """
    Admins (and the anonymous context) see everything; anyone else only the
    records they created.
    """
    rows = list(records or ())
    if principal is None or getattr(principal, "is_admin", False):
        return rows
    uid = _id(getattr(principal, "user_id", None))
    return [r for r in rows if uid is not None and _id(r.get("createdBy")) == uid]
