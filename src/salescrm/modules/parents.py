"""Record types that activities, tasks and notes can attach to."""

from enum import StrEnum
from typing import Any

from salescrm.modules.accounts.models import Account
from salescrm.modules.contacts.models import Contact
from salescrm.modules.leads.models import Lead
from salescrm.modules.opportunities.models import Opportunity


class ParentType(StrEnum):
    ACCOUNT = "account"
    CONTACT = "contact"
    LEAD = "lead"
    OPPORTUNITY = "opportunity"


PARENT_MODELS: dict[str, type[Any]] = {
    ParentType.ACCOUNT: Account,
    ParentType.CONTACT: Contact,
    ParentType.LEAD: Lead,
    ParentType.OPPORTUNITY: Opportunity,
}
