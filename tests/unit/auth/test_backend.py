"""Unit tests for password hashing and password rules."""

import pytest
from pydantic import ValidationError

from salescrm.core.auth.backend import hash_password, verify_password
from salescrm.core.auth.schemas import RegisterRequest
from salescrm.modules.users.schemas import UserCreate, validate_password_complexity


pytestmark = pytest.mark.unit


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password_returns_hash(self):
        """hash_password should return a bcrypt hash."""
        hashed = hash_password("Secret123")

        assert hashed != "Secret123"
        assert hashed.startswith("$2b$")

    def test_hash_password_different_each_time(self):
        """Different salts give different hashes for the same password."""
        assert hash_password("Secret123") != hash_password("Secret123")

    def test_verify_password_correct(self):
        assert verify_password("Secret123", hash_password("Secret123")) is True

    def test_verify_password_incorrect(self):
        assert verify_password("Secret124", hash_password("Secret123")) is False

    def test_verify_password_malformed_hash(self):
        """A corrupt stored hash is a mismatch, not an error."""
        assert verify_password("Secret123", "not-a-bcrypt-hash") is False


class TestPasswordComplexity:
    """Tests for validate_password_complexity."""

    def test_accepts_mixed_password(self):
        assert validate_password_complexity("Admin123!") == "Admin123!"

    @pytest.mark.parametrize(
        ("password", "missing"),
        [
            ("admin123!", "uppercase letter"),
            ("ADMIN123!", "lowercase letter"),
            ("AdminAdmin!", "digit"),
            ("Admin1234", "special character"),
        ],
    )
    def test_single_rule_missing(self, password: str, missing: str):
        with pytest.raises(ValueError, match=missing):
            validate_password_complexity(password)

    def test_several_rules_missing(self):
        with pytest.raises(ValueError, match="uppercase letter, digit"):
            validate_password_complexity("lowercase-only")

    def test_user_create_enforces_length(self):
        with pytest.raises(ValidationError):
            UserCreate(email="a@example.com", password="Ab1")

    def test_register_enforces_complexity(self):
        with pytest.raises(ValidationError):
            RegisterRequest(tenant_name="Acme", email="a@example.com", password="password")

    def test_register_accepts_camel_case(self):
        request = RegisterRequest.model_validate(
            {
                "tenantName": "Acme",
                "email": "a@example.com",
                "password": "Admin123!",
                "firstName": "Ada",
            }
        )

        assert request.tenant_name == "Acme"
        assert request.first_name == "Ada"
