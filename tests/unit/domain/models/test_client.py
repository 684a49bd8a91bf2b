"""
Unit tests for Client domain model.
"""

import pytest
from datetime import datetime
from crefin.domain.models.base import ValidationError
from crefin.domain.models.client import Client


class TestClient:
    """Test cases for Client domain model."""

    def test_create_client_success(self):
        """Test successful client creation."""
        client = Client(
            name="John Doe",
            owner_id="user123",
            email="john@example.com",
            phone="123-456-7890",
            company="Test Company"
        )

        assert client.name == "John Doe"
        assert client.owner_id == "user123"
        assert client.email == "john@example.com"
        assert client.phone == "123-456-7890"
        assert client.company == "Test Company"
        assert client.id is None
        assert client.is_new
        assert isinstance(client.created_at, datetime)
        assert isinstance(client.updated_at, datetime)

    def test_create_client_invalid_name(self):
        """Test client creation with invalid name."""
        with pytest.raises(ValidationError, match="Client name is required"):
            Client(name="", owner_id="user123")

        with pytest.raises(ValidationError, match="Client name is required"):
            Client(name="   ", owner_id="user123")

    def test_create_client_requires_owner(self):
        """Test client creation without an owner."""
        with pytest.raises(ValidationError, match="Owner ID is required"):
            Client(name="Acme", owner_id="")

    def test_create_client_invalid_email(self):
        """Test client creation with malformed email."""
        with pytest.raises(ValidationError, match="Invalid email format"):
            Client(name="Acme", owner_id="user123", email="not-an-email")

    def test_factory_normalizes_blank_fields(self):
        """Test the factory strips the name and drops empty optionals."""
        client = Client.create(owner_id="user123", name="  Acme  ", email="", company="")

        assert client.name == "Acme"
        assert client.email is None
        assert client.company is None

    def test_update_info_partial(self):
        """Test that None leaves fields unchanged and empty strings clear them."""
        client = Client.create(
            owner_id="user123",
            name="Acme",
            email="billing@acme.test",
            phone="555-0100"
        )
        version = client.version

        client.update_info(name="Acme Corp", phone="")

        assert client.name == "Acme Corp"
        assert client.email == "billing@acme.test"
        assert client.phone is None
        assert client.version == version + 1

    def test_update_info_revalidates(self):
        """Test that an update producing an invalid client is rejected."""
        client = Client.create(owner_id="user123", name="Acme")

        with pytest.raises(ValidationError):
            client.update_info(email="broken")

    def test_is_owned_by(self):
        client = Client.create(owner_id="user123", name="Acme")

        assert client.is_owned_by("user123")
        assert not client.is_owned_by("someone-else")
