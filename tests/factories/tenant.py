"""Factory for tenant registration payloads."""

from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory

from salescrm.core.auth.schemas import RegisterRequest


class RegisterRequestFactory(ModelFactory[RegisterRequest]):
    """Factory for generating self-service signups."""

    __model__ = RegisterRequest
    __use_defaults__ = True

    @classmethod
    def tenant_name(cls) -> str:
        """Generate a company name."""
        return f"{cls.__faker__.company()} {uuid4().hex[:4]}"

    @classmethod
    def email(cls) -> str:
        """Generate a unique owner email."""
        return f"owner-{uuid4().hex[:8]}@example.com"

    @classmethod
    def password(cls) -> str:
        return "SecurePass123!"
