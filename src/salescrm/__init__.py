"""Multi-tenant sales CRM API."""

__version__ = "0.1.0"
