# backoffice/domain/__init__.py
from .keys import to_application_form, to_storage_form
from .relations import resolve_property, resolve_all, resolve_rent, find_proprietor_links
from .lease_fields import compute_lease_view, LeaseView
from .dashboard import compute_dashboard_stats, DashboardStats

__all__ = [
    "to_application_form",
    "to_storage_form",
    "resolve_property",
    "resolve_all",
    "resolve_rent",
    "find_proprietor_links",
    "compute_lease_view",
    "LeaseView",
    "compute_dashboard_stats",
    "DashboardStats",
]
