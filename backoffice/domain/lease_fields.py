# backoffice/domain/lease_fields.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional

from .entities import RentOutStatus, RentStatus, RentType
from .keys import to_application_form


@dataclass(frozen=True)
class LeaseFieldSet:
    """Direction-specific field names, in application form."""

    start: str
    end: str
    monthly: str
    periods: str
    status: Optional[str]


RENT_OUT_FIELDS = LeaseFieldSet(
    start="rentOutStartDate",
    end="rentOutEndDate",
    monthly="rentOutMonthlyRental",
    periods="rentOutPeriods",
    status="rentOutStatus",
)

RENTING_FIELDS = LeaseFieldSet(
    start="rentingStartDate",
    end="rentingEndDate",
    monthly="rentingMonthlyRental",
    periods="rentingPeriods",
    status=None,
)

LEGACY_START = "startDate"
LEGACY_END = "endDate"
LEGACY_AMOUNT = "amount"
LEGACY_STATUS = "status"


def _get(record: Any, key: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def field_set_for(rent_type: Any) -> Optional[LeaseFieldSet]:
    t = str(getattr(rent_type, "value", rent_type) or "").strip().lower()
    if t == RentType.rent_out.value:
        return RENT_OUT_FIELDS
    if t == RentType.renting.value:
        return RENTING_FIELDS
    return None


# -----------------------------
# Parsing (malformed -> None)
# -----------------------------
def as_datetime(v: Any) -> Optional[datetime]:
    """
    Normalize to an aware UTC datetime.
    - naive datetimes are taken as UTC (that is how the DB stores them)
    - plain dates become midnight UTC
    - ISO strings are accepted; anything unparseable is absent
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, datetime):
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v.astimezone(timezone.utc)
    if isinstance(v, date):
        return datetime.combine(v, time.min, tzinfo=timezone.utc)
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return as_datetime(datetime.fromisoformat(s))
        except ValueError:
            return None
    return None


def as_amount(v: Any) -> Optional[float]:
    """Non-negative finite number, or None."""
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(str(v).strip().replace(",", "")) if isinstance(v, str) else float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f) or math.isinf(f) or f < 0:
        return None
    return f


def as_periods(v: Any) -> Optional[int]:
    f = as_amount(v)
    if f is None or f <= 0 or f != int(f):
        return None
    return int(f)


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


# -----------------------------
# Effective fields
# -----------------------------
def effective_start(rent: Any) -> Optional[datetime]:
    fs = field_set_for(_get(rent, "type"))
    own = as_datetime(_get(rent, fs.start)) if fs else None
    return _first(own, as_datetime(_get(rent, LEGACY_START)))


def effective_end(rent: Any) -> Optional[datetime]:
    fs = field_set_for(_get(rent, "type"))
    own = as_datetime(_get(rent, fs.end)) if fs else None
    return _first(own, as_datetime(_get(rent, LEGACY_END)))


def effective_amount(rent: Any) -> float:
    fs = field_set_for(_get(rent, "type"))
    own = as_amount(_get(rent, fs.monthly)) if fs else None
    return float(_first(own, as_amount(_get(rent, LEGACY_AMOUNT)), 0.0))


def effective_periods(rent: Any) -> int:
    fs = field_set_for(_get(rent, "type"))
    p = as_periods(_get(rent, fs.periods)) if fs else None
    return p if p is not None else 1


def effective_status(rent: Any) -> Optional[str]:
    fs = field_set_for(_get(rent, "type"))
    own = _get(rent, fs.status) if fs and fs.status else None
    s = _first(own or None, _get(rent, LEGACY_STATUS) or None)
    if s is None:
        return None
    return str(getattr(s, "value", s)).strip().lower() or None


def total_amount(rent: Any) -> float:
    return effective_amount(rent) * effective_periods(rent)


def is_expired(rent: Any, now: Optional[datetime] = None) -> bool:
    end = effective_end(rent)
    if end is None:
        return False
    return end < (as_datetime(now) if now is not None else datetime.now(timezone.utc))


def _status_value(v: Any) -> str:
    return str(getattr(v, "value", v) or "").strip().lower()


def is_active_tenancy(rent: Any, now: Optional[datetime] = None) -> bool:
    """
    Either status field marks the lease live (legacy status active, or
    rentOutStatus renting) and it has not expired. No status means not live.
    """
    live = (
        _status_value(_get(rent, LEGACY_STATUS)) == RentStatus.active.value
        or _status_value(_get(rent, RENT_OUT_FIELDS.status)) == RentOutStatus.renting.value
    )
    return live and not is_expired(rent, now)


@dataclass(frozen=True)
class LeaseView:
    effective_start: Optional[datetime]
    effective_end: Optional[datetime]
    effective_amount: float
    effective_periods: int
    total_amount: float
    status: Optional[str]
    is_expired: bool

    def as_record(self) -> dict[str, Any]:
        return to_application_form(asdict(self))


def compute_lease_view(rent: Any, now: Optional[datetime] = None) -> LeaseView:
    """
    Derived on every call; nothing is cached on the rent record.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    amount = effective_amount(rent)
    periods = effective_periods(rent)
    return LeaseView(
        effective_start=effective_start(rent),
        effective_end=effective_end(rent),
        effective_amount=amount,
        effective_periods=periods,
        total_amount=amount * periods,
        status=effective_status(rent),
        is_expired=is_expired(rent, now),
    )
