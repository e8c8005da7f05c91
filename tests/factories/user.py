"""User factory for tests."""

from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory

from salescrm.modules.users.schemas import UserCreate


class UserCreateFactory(ModelFactory[UserCreate]):
    """Factory for creating UserCreate schemas.

    Optional profile fields keep their defaults, so ``role_id`` is None
    unless passed in.
    """

    __model__ = UserCreate
    __use_defaults__ = True

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"user-{uuid4().hex[:8]}@example.com"

    @classmethod
    def first_name(cls) -> str:
        return cls.__faker__.first_name()

    @classmethod
    def password(cls) -> str:
        """Generate a password that meets the complexity rules."""
        return "Testpassword123!"
