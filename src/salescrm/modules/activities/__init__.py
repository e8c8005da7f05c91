"""Activities module - calls, emails and meetings logged against records."""

__module_info__ = {
    "name": "activities",
    "version": "1.0.0",
    "description": "Activity timeline",
    "dependencies": ["accounts", "contacts", "leads", "opportunities"],
}
