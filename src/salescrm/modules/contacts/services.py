"""Contact business logic."""

from typing import Any

from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import Reference, TenantResourceService
from salescrm.modules.accounts.models import Account
from salescrm.modules.contacts.models import Contact
from salescrm.modules.users.models import User


class ContactService(TenantResourceService[Contact]):
    """Tenant-scoped contact management."""

    model = Contact
    resource = Resource.CONTACTS.value
    label = "Contact"
    search_fields = ("first_name", "last_name", "email")
    references = (
        Reference("account_id", Account, "account"),
        Reference("owner_id", User, "user"),
    )

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values.setdefault("owner_id", self.auth.user_id)
        if values.get("email"):
            values["email"] = values["email"].lower()
        return values

    async def prepare_update(
        self, obj: Contact, values: dict[str, Any]  # noqa: ARG002
    ) -> dict[str, Any]:
        if values.get("email"):
            values["email"] = values["email"].lower()
        return values
