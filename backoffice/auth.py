# backoffice/auth.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from .config import settings


@dataclass(frozen=True)
class Principal:
    """
    Explicit session context. Passed into services; nothing reads it from
    ambient state.
    """

    user_id: Optional[str] = None
    role: str = "admin"  # admin | staff

    @property
    def is_admin(self) -> bool:
        return self.role == settings.admin_role


ANONYMOUS = Principal(user_id=None, role=settings.admin_role)


def get_principal(request: Request) -> Principal:
    """
    Auth modes:
      - off: every request is the anonymous admin
      - dev: identity comes from the X-User-Id / X-User-Role headers
    Real authentication lives in front of this service.
    """
    mode = (settings.auth_mode or "dev").strip().lower()
    if mode == "off":
        return ANONYMOUS

    if mode != "dev":
        raise HTTPException(status_code=401, detail=f"Unsupported auth_mode {mode!r}")

    user_id = (request.headers.get(settings.dev_header_user_id) or "").strip() or None
    role = (request.headers.get(settings.dev_header_user_role) or settings.admin_role).strip().lower()
    if role != settings.admin_role and not user_id:
        raise HTTPException(status_code=401, detail=f"Missing {settings.dev_header_user_id} for non-admin role")
    return Principal(user_id=user_id, role=role)
