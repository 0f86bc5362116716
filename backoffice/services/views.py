# backoffice/services/views.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ..domain.dashboard import compute_dashboard_stats
from ..domain.entities import EntityKind, ProprietorRole, check_ownership, check_role, ownership_refs
from ..domain.keys import to_application_form
from ..domain.lease_fields import compute_lease_view
from ..domain.relations import resolve_all, resolve_property, resolve_rent, scope_to_principal
from .storage import RecordStore

log = logging.getLogger("backoffice.views")


@dataclass(frozen=True)
class Dataset:
    """One fetch of every collection, already in application form."""

    properties: list[dict[str, Any]]
    proprietors: list[dict[str, Any]]
    rents: list[dict[str, Any]]


def load_dataset(store: RecordStore, *, principal: Any = None) -> Dataset:
    """
    fetch -> key normalization -> optional principal scoping.
    """
    props = [to_application_form(r) for r in store.fetch_all(EntityKind.property)]
    people = [to_application_form(r) for r in store.fetch_all(EntityKind.proprietor)]
    rents = [to_application_form(r) for r in store.fetch_all(EntityKind.rent)]
    return Dataset(
        properties=scope_to_principal(props, principal),
        proprietors=scope_to_principal(people, principal),
        rents=scope_to_principal(rents, principal),
    )


def _with_lease(rent: dict[str, Any], now: datetime) -> dict[str, Any]:
    out = dict(rent)
    out["lease"] = compute_lease_view(rent, now).as_record()
    return out


def ownership_warnings(prop: dict[str, Any], proprietors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Reference invariant + role/code consistency of the attached proprietors.
    """
    by_id = {p.get("id"): p for p in proprietors}
    pid = prop.get("id")
    warnings = list(check_ownership(prop))
    for owner_id in ownership_refs(prop).all_ids:
        if owner_id in by_id:
            warnings += check_role(by_id[owner_id], ProprietorRole.owner, record_id=pid)
    if prop.get("tenantId") in by_id:
        warnings += check_role(by_id[prop.get("tenantId")], ProprietorRole.tenant, record_id=pid)

    # one entry per distinct warning
    seen: set[tuple] = set()
    out: list[dict[str, Any]] = []
    for w in warnings:
        key = (w.code, w.message)
        if key in seen:
            continue
        seen.add(key)
        out.append({"code": w.code, "message": w.message, "recordId": w.record_id})
    return out


def property_view(ds: Dataset, property_id: str, *, now: Optional[datetime] = None) -> Optional[dict[str, Any]]:
    """
    Property with relations; each rent carries its derived lease view.
    """
    now = now or datetime.now(timezone.utc)
    prop = next((p for p in ds.properties if p.get("id") == property_id), None)
    if prop is None:
        return None
    out = resolve_property(prop, ds.proprietors, ds.rents)
    out["rents"] = [_with_lease(r, now) for r in out["rents"]]
    out["warnings"] = ownership_warnings(prop, ds.proprietors)
    return out


def relations_view(ds: Dataset, *, now: Optional[datetime] = None) -> list[dict[str, Any]]:
    """
    Every property with relations, sorted by code for the relations board.
    """
    now = now or datetime.now(timezone.utc)
    out = []
    for view in resolve_all(ds.properties, ds.proprietors, ds.rents):
        view["rents"] = [_with_lease(r, now) for r in view["rents"]]
        out.append(view)
    return sorted(out, key=lambda v: str(v.get("code") or ""))


def rents_view(ds: Dataset, *, rent_type: Optional[str] = None, now: Optional[datetime] = None) -> list[dict[str, Any]]:
    now = now or datetime.now(timezone.utc)
    out = []
    for r in ds.rents:
        if rent_type and r.get("type") != rent_type:
            continue
        out.append(_with_lease(resolve_rent(r, ds.properties, ds.proprietors), now))
    return out


def dashboard_view(ds: Dataset, *, now: Optional[datetime] = None) -> dict[str, Any]:
    stats = compute_dashboard_stats(ds.properties, ds.rents, ds.proprietors, now=now)
    log.debug(
        "dashboard computed",
        extra={"properties": stats.total_properties, "rents": len(ds.rents)},
    )
    out = stats.as_record()
    out["totalRents"] = stats.total_rents
    return out
