"""Leads module - prospects and lead conversion."""

__module_info__ = {
    "name": "leads",
    "version": "1.0.0",
    "description": "Leads and lead conversion",
    "dependencies": ["accounts", "contacts", "opportunities"],
}
