"""Opportunities module - deals and the sales pipeline."""

__module_info__ = {
    "name": "opportunities",
    "version": "1.0.0",
    "description": "Opportunities and sales stages",
    "dependencies": ["accounts"],
}
