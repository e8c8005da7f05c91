"""User repository for database operations."""

from uuid import UUID

from sqlalchemy import func, or_

from salescrm.core.database.pagination import Page, PageParams
from salescrm.core.database.tenant import QuerySpec, TenantScope
from salescrm.core.permissions.models import Role
from salescrm.core.utils.text import escape_like
from salescrm.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    All queries run through the caller's ``TenantScope``. Deactivated
    users stay visible here so administrators can review and reactivate
    them; sign-in and authentication never use this repository.
    """

    def __init__(self, scope: TenantScope) -> None:
        self.scope = scope

    async def create(self, user: User) -> User:
        """Create a new user in the scope's tenant.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.scope.add(user)
        await self.scope.flush()
        await self.scope.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user of this tenant by ID, active or not."""
        return await self.scope.get(User, user_id, include_inactive=True)

    async def get_by_email(self, email: str) -> User | None:
        """Get a user of this tenant by email address, active or not."""
        statement = self.scope.select(User, include_inactive=True).where(
            func.lower(User.email) == email.lower()
        )
        result = await self.scope.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(self, params: PageParams, search: str | None = None) -> Page[User]:
        """List users for the tenant with pagination.

        Args:
            params: Clamped page and limit
            search: Optional substring of email or name

        Returns:
            One page of users, newest first
        """
        spec = QuerySpec(order_by=[User.created_at.desc(), User.id.desc()])
        if search and search.strip():
            pattern = f"%{escape_like(search.strip())}%"
            spec.filters.append(
                or_(
                    User.email.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                )
            )
        return await self.scope.paginate(User, spec, params, include_inactive=True)

    async def update(self, user: User) -> User:
        """Flush pending changes to a user and reload it.

        Args:
            user: User instance with updated fields

        Returns:
            The updated user
        """
        await self.scope.flush()
        await self.scope.refresh(user)
        return user

    async def get_role(self, role_id: UUID) -> Role | None:
        """Get a role of this tenant."""
        return await self.scope.get(Role, role_id)

