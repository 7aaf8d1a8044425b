"""Domain layer for ledgerdesk application.

Services are exposed lazily so that importing ``ledgerdesk.domain.entities``
from the database layer does not pull the services (and the database layer)
back in.
"""

_SERVICES = {
    "AccountService": "ledgerdesk.domain.account",
    "DocTypeService": "ledgerdesk.domain.doctype",
    "DocumentService": "ledgerdesk.domain.document",
    "ChartService": "ledgerdesk.domain.chart",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
