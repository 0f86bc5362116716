# backoffice/services/storage.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import DateTime, asc, desc, func, or_, select
from sqlalchemy.orm import Session

from ..config import settings
from ..domain.entities import EntityKind, RentType, next_proprietor_code, role_for_category, check_ownership
from ..domain.keys import to_application_form
from ..domain.lease_fields import as_datetime
from ..domain.relations import LinkedRecord, find_proprietor_links
from ..models import Property, Proprietor, Rent

log = logging.getLogger("backoffice.storage")

MODELS = {
    EntityKind.property: Property,
    EntityKind.proprietor: Proprietor,
    EntityKind.rent: Rent,
}

# server-managed; never taken from the caller's record
_MANAGED = frozenset({"id", "created_at", "updated_at", "created_by"})


@dataclass(frozen=True)
class DeleteResult:
    """
    Falsy when nothing was deleted. `linked` lists the records that still
    reference the target (referential-integrity failure).
    """

    ok: bool
    linked: tuple[LinkedRecord, ...] = ()
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def _kind(kind: Any) -> EntityKind:
    try:
        return EntityKind(getattr(kind, "value", kind))
    except ValueError:
        raise ValueError(f"unknown entity kind: {kind!r}")


def _naive_utc(v: Any) -> Optional[datetime]:
    dt = as_datetime(v)
    return dt.astimezone(timezone.utc).replace(tzinfo=None) if dt else None


def row_to_record(row: Any) -> dict[str, Any]:
    """ORM row -> storage-form dict (snake_case column names)."""
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


class RecordStore:
    """
    Storage collaborator over a SQLAlchemy session.

    Reads and writes storage-form (snake_case) records. `principal` is only
    used to stamp created_by on inserts.
    """

    def __init__(self, db: Session, *, principal: Any = None):
        self.db = db
        self.principal = principal

    # -------------------------
    # Reads
    # -------------------------
    def fetch_all(self, kind: Any) -> list[dict[str, Any]]:
        k = _kind(kind)
        model = MODELS[k]
        q = select(model)
        if k == EntityKind.rent:
            q = q.order_by(desc(model.created_at), asc(model.id))
        else:
            q = q.order_by(asc(model.name), asc(model.id))
        return [row_to_record(r) for r in self.db.scalars(q).all()]

    def fetch_one(self, kind: Any, record_id: Any) -> Optional[dict[str, Any]]:
        model = MODELS[_kind(kind)]
        row = self.db.get(model, str(record_id)) if record_id else None
        return row_to_record(row) if row is not None else None

    def search_properties(self, query: str) -> list[dict[str, Any]]:
        """Case-insensitive substring match on name, code or address."""
        q = (query or "").strip().lower()
        if not q:
            return self.fetch_all(EntityKind.property)
        like = f"%{q}%"
        rows = self.db.scalars(
            select(Property)
            .where(
                or_(
                    func.lower(Property.name).like(like),
                    func.lower(Property.code).like(like),
                    func.lower(Property.address).like(like),
                )
            )
            .order_by(asc(Property.name), asc(Property.id))
        ).all()
        return [row_to_record(r) for r in rows]

    def linked_records(self, proprietor_id: Any) -> list[LinkedRecord]:
        props = [to_application_form(r) for r in self.fetch_all(EntityKind.property)]
        rents = [to_application_form(r) for r in self.fetch_all(EntityKind.rent)]
        return find_proprietor_links(proprietor_id, props, rents)

    # -------------------------
    # Writes
    # -------------------------
    def _clean(self, model: Any, record: Mapping[str, Any]) -> dict[str, Any]:
        cols = model.__table__.columns
        out: dict[str, Any] = {}
        for k, v in (record or {}).items():
            if k in _MANAGED or k not in cols:
                continue
            if isinstance(cols[k].type, DateTime) and v is not None:
                v = _naive_utc(v)
            out[k] = v
        return out

    def _user_id(self) -> Optional[str]:
        uid = getattr(self.principal, "user_id", None)
        return str(uid) if uid else None

    def _prepare_property(self, row: Property) -> None:
        ids = [str(x) for x in (row.proprietor_ids or []) if x]
        row.proprietor_ids = ids or None
        if ids and not row.proprietor_id:
            row.proprietor_id = ids[0]

        for w in check_ownership(to_application_form(row_to_record(row))):
            log.warning("property %s: %s", row.id, w.message)

        clash = self.db.scalar(select(Property.id).where(Property.code == row.code, Property.id != row.id))
        if clash:
            raise ValueError(f"property code {row.code!r} already in use")

    def _prepare_proprietor(self, row: Proprietor) -> None:
        if row.code:
            row.code = row.code.strip().upper()
            clash = self.db.scalar(
                select(Proprietor.id).where(func.upper(Proprietor.code) == row.code, Proprietor.id != row.id)
            )
            if clash:
                raise ValueError(f"proprietor code {row.code!r} already in use")
            return
        existing = self.db.scalars(select(Proprietor.code).where(Proprietor.id != row.id)).all()
        row.code = next_proprietor_code(
            existing,
            role_for_category(row.category),
            width=settings.proprietor_code_width,
        )

    def _prepare_rent(self, row: Rent, *, creating: bool) -> None:
        try:
            RentType(row.type)
        except ValueError:
            raise ValueError(f"rent type must be rent_out or renting, got {row.type!r}")
        if creating and not row.currency:
            row.currency = settings.default_currency

    def upsert(self, kind: Any, record: Mapping[str, Any]) -> str:
        """
        Insert (new or unknown id) or update (existing id). Returns the id.

        Unknown keys are dropped. On insert, None values are skipped; on
        update, a None clears the column.
        """
        k = _kind(kind)
        model = MODELS[k]
        data = self._clean(model, record)
        now = datetime.utcnow()

        rid = str(record.get("id")) if record.get("id") else None
        row = self.db.get(model, rid) if rid else None
        creating = row is None

        if creating:
            row = model(
                id=rid or str(uuid.uuid4()),
                created_at=now,
                updated_at=now,
                created_by=self._user_id(),
                **{c: v for c, v in data.items() if v is not None},
            )
        else:
            for c, v in data.items():
                setattr(row, c, v)
            row.updated_at = now

        try:
            if k == EntityKind.property:
                self._prepare_property(row)
            elif k == EntityKind.proprietor:
                self._prepare_proprietor(row)
            else:
                self._prepare_rent(row, creating=creating)
        except ValueError:
            if not creating:
                self.db.rollback()
            raise

        if creating:
            self.db.add(row)
        self.db.commit()

        log.info("%s %s %s", k.value, "created" if creating else "updated", row.id)
        return str(row.id)

    def delete(self, kind: Any, record_id: Any) -> DeleteResult:
        """
        - property: removed; its rents are left orphaned
        - proprietor: refused while any property/rent still references it
        - rent: removed
        """
        k = _kind(kind)
        model = MODELS[k]
        row = self.db.get(model, str(record_id)) if record_id else None
        if row is None:
            return DeleteResult(ok=False, reason="not found")

        if k == EntityKind.proprietor:
            linked = self.linked_records(row.id)
            if linked:
                log.info("proprietor %s delete refused: %d linked record(s)", row.id, len(linked))
                return DeleteResult(ok=False, linked=tuple(linked), reason="still referenced")

        if k == EntityKind.property:
            orphaned = self.db.scalar(select(func.count()).select_from(Rent).where(Rent.property_id == row.id))
            if orphaned:
                log.info("property %s deleted; %d rent(s) now orphaned", row.id, int(orphaned))

        self.db.delete(row)
        self.db.commit()
        return DeleteResult(ok=True)

    def unlink_rent(self, rent_id: Any) -> bool:
        """Detach a rent from its property, keeping the row."""
        row = self.db.get(Rent, str(rent_id)) if rent_id else None
        if row is None:
            return False
        row.property_id = None
        row.updated_at = datetime.utcnow()
        self.db.commit()
        return True
