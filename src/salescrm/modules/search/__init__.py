"""Search module - cross-entity lookup within a tenant."""

__module_info__ = {
    "name": "search",
    "version": "1.0.0",
    "description": "Global search",
    "dependencies": ["accounts", "contacts", "leads", "opportunities"],
}
