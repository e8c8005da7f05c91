"""Activity business logic."""

from typing import Any

from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import TenantResourceService
from salescrm.modules.activities.models import Activity
from salescrm.modules.parents import PARENT_MODELS


class ActivityService(TenantResourceService[Activity]):
    """Tenant-scoped activity log. The actor is always the caller."""

    model = Activity
    resource = Resource.ACTIVITIES.value
    label = "Activity"
    search_fields = ("subject", "description")
    parent_models = PARENT_MODELS

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values["user_id"] = self.auth.user_id
        return values
