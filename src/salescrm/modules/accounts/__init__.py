"""Accounts module - companies the sales team works with."""

__module_info__ = {
    "name": "accounts",
    "version": "1.0.0",
    "description": "Company accounts",
    "dependencies": ["tenants", "users"],
}
