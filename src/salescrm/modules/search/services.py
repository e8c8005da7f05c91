"""Global search across the main CRM records."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from salescrm.core.audit.recorder import AuditRecorder
from salescrm.core.auth.flow import AuthContext
from salescrm.core.constants import SEARCH_RESULTS_PER_ENTITY
from salescrm.core.errors import ValidationFailed
from salescrm.core.permissions.policy import Action
from salescrm.core.resources.service import TenantResourceService
from salescrm.modules.accounts.services import AccountService
from salescrm.modules.contacts.services import ContactService
from salescrm.modules.leads.services import LeadService
from salescrm.modules.opportunities.services import OpportunityService
from salescrm.modules.search.schemas import SearchHit


logger = structlog.get_logger()


@dataclass(frozen=True)
class SearchTarget:
    service_class: type[TenantResourceService[Any]]
    describe: Callable[[Any], tuple[str, str | None]]


SEARCH_TARGETS: dict[str, SearchTarget] = {
    "accounts": SearchTarget(AccountService, lambda a: (a.name, a.industry)),
    "contacts": SearchTarget(ContactService, lambda c: (c.full_name, c.email)),
    "leads": SearchTarget(LeadService, lambda lead: (lead.full_name, lead.company)),
    "opportunities": SearchTarget(
        OpportunityService,
        lambda o: (o.name, str(o.amount) if o.amount is not None else None),
    ),
}


def parse_entities(raw: str | None) -> list[str]:
    """Split a comma-separated entity list; all entities when empty.

    Raises:
        ValidationFailed: An unknown entity name was given
    """
    if not raw:
        return list(SEARCH_TARGETS)
    names = [part.strip() for part in raw.split(",") if part.strip()]
    unknown = [name for name in names if name not in SEARCH_TARGETS]
    if unknown:
        raise ValidationFailed(
            errors=[
                {
                    "field": "entities",
                    "message": f"Unknown entity '{name}'",
                    "type": "invalid_choice",
                }
                for name in unknown
            ]
        )
    return list(dict.fromkeys(names))


class SearchService:
    """Runs one query against each readable entity in the caller's tenant."""

    def __init__(
        self, db: AsyncSession, auth: AuthContext, recorder: AuditRecorder
    ) -> None:
        self.db = db
        self.auth = auth
        self.recorder = recorder

    async def search(
        self,
        term: str,
        entities: Iterable[str],
        limit: int = SEARCH_RESULTS_PER_ENTITY,
    ) -> dict[str, list[SearchHit]]:
        results: dict[str, list[SearchHit]] = {}
        for name in entities:
            if not self.auth.can(name, Action.READ):
                continue
            target = SEARCH_TARGETS[name]
            service = target.service_class(self.db, self.auth, self.recorder)
            hits = []
            for row in await service.search(term, limit):
                title, subtitle = target.describe(row)
                hits.append(SearchHit(id=row.id, title=title, subtitle=subtitle))
            results[name] = hits

        logger.debug(
            "search_completed",
            entities=list(results),
            hits=sum(len(h) for h in results.values()),
        )
        return results
