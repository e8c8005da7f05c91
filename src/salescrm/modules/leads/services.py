"""Lead business logic, including conversion."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog

from salescrm.core.audit.models import AuditAction
from salescrm.core.audit.serialization import snapshot
from salescrm.core.errors import ConflictError, ValidationFailed
from salescrm.core.permissions.policy import Action, Resource
from salescrm.core.resources.service import Reference, TenantResourceService
from salescrm.modules.accounts.models import Account
from salescrm.modules.contacts.models import Contact
from salescrm.modules.leads.models import Lead
from salescrm.modules.leads.schemas import LeadConvert, LeadStatus
from salescrm.modules.opportunities.models import Opportunity, SalesStage
from salescrm.modules.opportunities.services import OpportunityService
from salescrm.modules.users.models import User


logger = structlog.get_logger()


@dataclass
class LeadConversion:
    """Rows produced by converting one lead."""

    lead: Lead
    account: Account
    contact: Contact
    opportunity: Opportunity | None = None


def _invalid(field: str, message: str) -> ValidationFailed:
    return ValidationFailed(
        errors=[{"field": field, "message": message, "type": "invalid_reference"}]
    )


class LeadService(TenantResourceService[Lead]):
    """Tenant-scoped lead management."""

    model = Lead
    resource = Resource.LEADS.value
    label = "Lead"
    search_fields = ("first_name", "last_name", "email", "company")
    references = (Reference("owner_id", User, "user"),)

    async def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        values.setdefault("owner_id", self.auth.user_id)
        if values.get("status") == LeadStatus.CONVERTED:
            raise ValidationFailed(
                errors=[
                    {
                        "field": "status",
                        "message": "Use lead conversion to mark a lead converted",
                        "type": "invalid_status",
                    }
                ]
            )
        if values.get("email"):
            values["email"] = values["email"].lower()
        return values

    async def prepare_update(self, obj: Lead, values: dict[str, Any]) -> dict[str, Any]:
        status = values.get("status")
        if status is not None and (status == LeadStatus.CONVERTED) != obj.is_converted:
            raise ValidationFailed(
                errors=[
                    {
                        "field": "status",
                        "message": "Lead status cannot change conversion state",
                        "type": "invalid_status",
                    }
                ]
            )
        if values.get("email"):
            values["email"] = values["email"].lower()
        return values

    async def _resolve_stage(self, stage_id: UUID | None) -> SalesStage:
        if stage_id is not None:
            stage = await self.scope.get(SalesStage, stage_id)
            if stage is None:
                raise _invalid("stageId", "Referenced sales stage does not exist")
            return stage
        pipeline = OpportunityService(self.db, self.auth, self.recorder, self.request_info)
        stage = await pipeline.first_open_stage()
        if stage is None:
            raise _invalid("stageId", "No open sales stage is configured")
        return stage

    async def convert(self, lead_id: UUID, data: LeadConvert) -> LeadConversion:
        """Convert a lead into an account, a contact and maybe an opportunity.

        The caller needs write access to every record type created, on
        top of ``leads:write``.

        Args:
            lead_id: Lead to convert
            data: Conversion options

        Returns:
            The updated lead and the rows created or linked

        Raises:
            ForbiddenError: Missing write access to a created record type
            NotFoundError: Unknown or foreign lead
            ConflictError: The lead was already converted
            ValidationFailed: Unknown account or stage reference
        """
        self.auth.require(Resource.ACCOUNTS, Action.WRITE)
        self.auth.require(Resource.CONTACTS, Action.WRITE)
        if data.create_opportunity:
            self.auth.require(Resource.OPPORTUNITIES, Action.WRITE)

        lead = await self.get(lead_id)
        if lead.is_converted:
            raise ConflictError("Lead is already converted")

        owner_id = lead.owner_id or self.auth.user_id
        stage = await self._resolve_stage(data.stage_id) if data.create_opportunity else None

        new_account = data.account_id is None
        if new_account:
            account = Account(
                name=data.account_name or lead.company or lead.full_name,
                phone=lead.phone,
                owner_id=owner_id,
            )
            self.scope.add(account)
        else:
            existing = await self.scope.get(Account, data.account_id)  # type: ignore[arg-type]
            if existing is None:
                raise _invalid("accountId", "Referenced account does not exist")
            account = existing
        await self._flush()

        contact = Contact(
            account_id=account.id,
            first_name=lead.first_name,
            last_name=lead.last_name,
            email=lead.email,
            phone=lead.phone,
            title=lead.title,
            lead_source=lead.source,
            owner_id=owner_id,
            is_primary=new_account,
        )
        self.scope.add(contact)

        opportunity = None
        if stage is not None:
            opportunity = Opportunity(
                account_id=account.id,
                name=data.opportunity_name or f"{account.name} - {lead.full_name}",
                amount=data.amount,
                stage_id=stage.id,
                probability=stage.probability,
                expected_close_date=data.expected_close_date,
                lead_source=lead.source,
                owner_id=owner_id,
            )
            self.scope.add(opportunity)
        await self._flush()

        before = snapshot(lead)
        lead.is_converted = True
        lead.status = LeadStatus.CONVERTED.value
        lead.converted_at = datetime.now(UTC)
        lead.converted_account_id = account.id
        lead.converted_contact_id = contact.id
        lead.converted_opportunity_id = opportunity.id if opportunity else None
        await self._flush()

        created = [obj for obj in (account, contact, opportunity) if obj is not None]
        for obj in (lead, *created):
            await self.scope.refresh(obj)
        await self.scope.commit()

        logger.info(
            "lead_converted",
            lead_id=str(lead.id),
            account_id=str(account.id),
            contact_id=str(contact.id),
        )
        if new_account:
            self.audit(
                AuditAction.CREATE,
                account.id,
                after=snapshot(account),
                resource_type=Resource.ACCOUNTS.value,
            )
        self.audit(
            AuditAction.CREATE,
            contact.id,
            after=snapshot(contact),
            resource_type=Resource.CONTACTS.value,
        )
        if opportunity is not None:
            self.audit(
                AuditAction.CREATE,
                opportunity.id,
                after=snapshot(opportunity),
                resource_type=Resource.OPPORTUNITIES.value,
            )
        self.audit(AuditAction.CONVERT, lead.id, before=before, after=snapshot(lead))

        return LeadConversion(
            lead=lead, account=account, contact=contact, opportunity=opportunity
        )
