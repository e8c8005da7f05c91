"""Opportunity business logic."""

from collections.abc import Sequence
from datetime import date
from typing import Any
from uuid import UUID

from salescrm.core.database.tenant import QuerySpec
from salescrm.core.permissions.policy import Resource
from salescrm.core.resources.service import Reference, TenantResourceService
from salescrm.modules.accounts.models import Account
from salescrm.modules.opportunities.models import Opportunity, SalesStage
from salescrm.modules.users.models import User


class OpportunityService(TenantResourceService[Opportunity]):
    """Tenant-scoped opportunity management.

    Moving an opportunity to a new stage resets its probability to the
    stage default unless one is given. Entering a closed stage stamps
    ``actual_close_date`` when none is set.
    """

    model = Opportunity
    resource = Resource.OPPORTUNITIES.value
    label = "Opportunity"
    search_fields = ("name", "lead_source")
    references = (
        Reference("account_id", Account, "account"),
        Reference("stage_id", SalesStage, "sales stage"),
        Reference("owner_id", User, "user"),
    )

    async def stages(self) -> Sequence[SalesStage]:
        """List the tenant's pipeline in order."""
        return await self.scope.all(
            SalesStage, QuerySpec(order_by=[SalesStage.stage_order])
        )

    async def first_open_stage(self) -> SalesStage | None:
        """Return the earliest stage that is neither won nor lost."""
        spec = QuerySpec(
            filters=[
                SalesStage.is_closed_won.is_(False),
                SalesStage.is_closed_lost.is_(False),
            ],
            order_by=[SalesStage.stage_order],
        )
        stages = await self.scope.all(SalesStage, spec)
        return stages[0] if stages else None

    async def _apply_stage(
        self,
        values: dict[str, Any],
        stage_id: UUID,
        closed_on: date | None = None,
    ) -> None:
        stage = await self.scope.get(SalesStage, stage_id)
        if stage is None:
            # reported by validate_references
            return
        values.setdefault("probability", stage.probability)
        if stage.is_closed and closed_on is None:
            values.setdefault("actual_close_date", date.today())

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values.setdefault("owner_id", self.auth.user_id)
        await self._apply_stage(
            values, values["stage_id"], values.get("actual_close_date")
        )
        return values

    async def prepare_update(
        self, obj: Opportunity, values: dict[str, Any]
    ) -> dict[str, Any]:
        stage_id = values.get("stage_id")
        if stage_id is not None and stage_id != obj.stage_id:
            await self._apply_stage(
                values,
                stage_id,
                values.get("actual_close_date", obj.actual_close_date),
            )
        return values
