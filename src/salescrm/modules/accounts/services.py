"""Account business logic."""

from typing import Any

from salescrm.core.errors import ValidationFailed
from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import Reference, TenantResourceService
from salescrm.modules.accounts.models import Account
from salescrm.modules.users.models import User


class AccountService(TenantResourceService[Account]):
    """Tenant-scoped account management."""

    model = Account
    resource = Resource.ACCOUNTS.value
    label = "Account"
    search_fields = ("name", "website", "city")
    references = (
        Reference("owner_id", User, "user"),
        Reference("parent_account_id", Account, "account"),
    )

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values.setdefault("owner_id", self.auth.user_id)
        return values

    async def prepare_update(
        self, obj: Account, values: dict[str, Any]
    ) -> dict[str, Any]:
        if values.get("parent_account_id") == obj.id:
            raise ValidationFailed(
                errors=[
                    {
                        "field": "parentAccountId",
                        "message": "An account cannot be its own parent",
                        "type": "invalid_reference",
                    }
                ]
            )
        return values
