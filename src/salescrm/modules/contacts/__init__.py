"""Contacts module - people at accounts."""

__module_info__ = {
    "name": "contacts",
    "version": "1.0.0",
    "description": "Contacts linked to accounts",
    "dependencies": ["accounts"],
}
