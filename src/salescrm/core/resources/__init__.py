"""Shared building blocks for tenant-scoped CRUD resources.

- ``schemas``: camelCase API base models
- ``service``: ``TenantResourceService`` and reference checks
- ``router``: ``register_resource_routes`` and pagination parameters
"""
