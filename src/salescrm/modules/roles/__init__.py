"""Roles module - per-tenant permission sets."""

__module_info__ = {
    "name": "roles",
    "version": "1.0.0",
    "description": "Role and permission management",
    "dependencies": ["tenants"],
}
