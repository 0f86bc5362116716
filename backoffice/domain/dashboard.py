# backoffice/domain/dashboard.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .entities import PropertyStatus, RentOutStatus, RentType
from .keys import to_application_form
from .lease_fields import compute_lease_view, is_active_tenancy


def _empty_breakdown() -> dict[str, int]:
    return {s.value: 0 for s in PropertyStatus}


@dataclass(frozen=True)
class DashboardStats:
    total_properties: int = 0
    total_proprietors: int = 0
    total_rents: int = 0
    renting_leases: int = 0
    expired_leases: int = 0
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_profit: float = 0.0
    status_breakdown: dict[str, int] = field(default_factory=_empty_breakdown)

    def as_record(self) -> dict[str, Any]:
        """The fixed stat-card set; total_rents is only surfaced by the HTTP view."""
        out = to_application_form(
            {
                "total_properties": self.total_properties,
                "total_proprietors": self.total_proprietors,
                "renting_leases": self.renting_leases,
                "expired_leases": self.expired_leases,
                "total_income": self.total_income,
                "total_expenses": self.total_expenses,
                "net_profit": self.net_profit,
            }
        )
        out["statusBreakdown"] = dict(self.status_breakdown)
        return out


def _rent_type(rent: Any) -> str:
    t = rent.get("type") if isinstance(rent, Mapping) else getattr(rent, "type", None)
    return str(getattr(t, "value", t) or "").strip().lower()


def compute_dashboard_stats(
    properties: Optional[Iterable[Mapping[str, Any]]],
    rents: Optional[Iterable[Mapping[str, Any]]],
    proprietors: Optional[Iterable[Mapping[str, Any]]] = (),
    *,
    now: Optional[datetime] = None,
) -> DashboardStats:
    """
    Dashboard cards from the full record set (application form).

    - statusBreakdown always carries every property status
    - rentingLeases: rent-out leases in an active, non-expired tenancy
    - expiredLeases: either direction
    - totalIncome: rent-out totals, listings excluded
    - totalExpenses: renting totals
    Order-independent; malformed records contribute their defaulted values.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    props = list(properties or ())
    rent_list = list(rents or ())

    breakdown = _empty_breakdown()
    for p in props:
        s = str(getattr(p.get("status"), "value", p.get("status")) or "").strip().lower()
        if s in breakdown:
            breakdown[s] += 1

    renting_leases = 0
    expired_leases = 0
    income = 0.0
    expenses = 0.0

    for r in rent_list:
        view = compute_lease_view(r, now)
        kind = _rent_type(r)

        if view.is_expired:
            expired_leases += 1

        if kind == RentType.rent_out.value:
            if is_active_tenancy(r, now):
                renting_leases += 1
            if view.status != RentOutStatus.listing.value:
                income += view.total_amount
        elif kind == RentType.renting.value:
            expenses += view.total_amount

    return DashboardStats(
        total_properties=len(props),
        total_proprietors=len(list(proprietors or ())),
        total_rents=len(rent_list),
        renting_leases=renting_leases,
        expired_leases=expired_leases,
        total_income=float(income),
        total_expenses=float(expenses),
        net_profit=float(income - expenses),
        status_breakdown=breakdown,
    )
