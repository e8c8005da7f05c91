"""Task business logic."""

from datetime import UTC, datetime
from typing import Any

from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import Reference, TenantResourceService
from salescrm.modules.parents import PARENT_MODELS
from salescrm.modules.tasks.models import Task
from salescrm.modules.tasks.schemas import TaskStatus
from salescrm.modules.users.models import User


def _stamp_completion(values: dict[str, Any], was_completed: bool) -> None:
    status = values.get("status")
    if status is None:
        return
    if status == TaskStatus.COMPLETED and not was_completed:
        values["completed_at"] = datetime.now(UTC)
    elif status != TaskStatus.COMPLETED:
        values["completed_at"] = None


class TaskService(TenantResourceService[Task]):
    """Tenant-scoped tasks.

    The caller is always recorded as ``assigned_by``; ``completed_at``
    follows the status.
    """

    model = Task
    resource = Resource.TASKS.value
    label = "Task"
    search_fields = ("subject", "description")
    references = (Reference("assigned_to", User, "user"),)
    parent_models = PARENT_MODELS

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        if values.get("assigned_to") is None:
            values["assigned_to"] = self.auth.user_id
        values["assigned_by"] = self.auth.user_id
        _stamp_completion(values, was_completed=False)
        return values

    async def prepare_update(self, obj: Task, values: dict[str, Any]) -> dict[str, Any]:
        _stamp_completion(values, was_completed=obj.status == TaskStatus.COMPLETED)
        return values
