"""Import every model so ``Base.metadata`` is complete.

Used by Alembic autogeneration and by tests that create the schema
directly.
"""

from salescrm.core.audit.models import AuditLog
from salescrm.core.auth.models import RevokedToken
from salescrm.core.database.base import Base
from salescrm.core.permissions.models import Role
from salescrm.modules.accounts.models import Account
from salescrm.modules.activities.models import Activity
from salescrm.modules.contacts.models import Contact
from salescrm.modules.leads.models import Lead
from salescrm.modules.notes.models import Note
from salescrm.modules.opportunities.models import Opportunity, SalesStage
from salescrm.modules.tasks.models import Task
from salescrm.modules.tenants.models import Tenant
from salescrm.modules.users.models import User


__all__ = [
    "Account",
    "Activity",
    "AuditLog",
    "Base",
    "Contact",
    "Lead",
    "Note",
    "Opportunity",
    "RevokedToken",
    "Role",
    "SalesStage",
    "Task",
    "Tenant",
    "User",
]
