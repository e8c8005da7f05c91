"""Note business logic."""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.sql import ColumnElement

from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import TenantResourceService
from salescrm.modules.notes.models import Note
from salescrm.modules.parents import PARENT_MODELS


class NoteService(TenantResourceService[Note]):
    """Tenant-scoped notes.

    Private notes behave as if they did not exist for everyone but their
    author: they are left out of lists and read, update and delete all
    answer 404.
    """

    model = Note
    resource = Resource.NOTES.value
    label = "Note"
    search_fields = ("content",)
    parent_models = PARENT_MODELS

    def visibility_filters(self) -> list[ColumnElement[bool]]:
        return [or_(Note.is_private.is_(False), Note.author_id == self.auth.user_id)]

    def is_visible(self, obj: Note) -> bool:
        return not obj.is_private or obj.author_id == self.auth.user_id

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values["author_id"] = self.auth.user_id
        return values
