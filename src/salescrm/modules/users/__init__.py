"""Users module for user management."""

__module_info__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User management within a tenant",
    "dependencies": ["tenants"],
}
