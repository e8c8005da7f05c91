"""Tenants module - multi-tenancy support."""

__module_info__ = {
    "name": "tenants",
    "version": "1.0.0",
    "description": "Multi-tenancy support module",
    "dependencies": [],
}
