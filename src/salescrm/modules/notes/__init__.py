"""Notes module - free text on records, optionally private."""

__module_info__ = {
    "name": "notes",
    "version": "1.0.0",
    "description": "Notes attached to CRM records",
    "dependencies": ["accounts", "contacts", "leads", "opportunities"],
}
