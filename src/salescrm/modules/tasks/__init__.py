"""Tasks module - to-dos assigned to users."""

__module_info__ = {
    "name": "tasks",
    "version": "1.0.0",
    "description": "Task assignment and tracking",
    "dependencies": ["users"],
}
