import pytest

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from rest_framework.test import APIClient

from modules.core.metrics import reset_metrics
from modules.customers.models import Customer, CustomerStatus, DocumentType

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _reset_metrics():
    """Start every test with zeroed process-wide counters."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


def _client_with_role(username: str, role: str) -> APIClient:
    client = APIClient()
    user = User.objects.create_user(username=username, password="testpass123")
    group, _ = Group.objects.get_or_create(name=role)
    user.groups.add(group)
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def viewer_client():
    """APIClient authenticated as a user holding the viewer role."""
    return _client_with_role("viewer-user", settings.ROLE_VIEWER)


@pytest.fixture()
def admin_client():
    """APIClient authenticated as a user holding the admin role."""
    return _client_with_role("admin-user", settings.ROLE_ADMIN)


@pytest.fixture()
def make_customer():
    """Factory that persists a Customer with sane defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Customer:
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "first_name": "John",
            "last_name": "Doe",
            "document_type": DocumentType.DNI,
            "document_id": f"DOC{n:08d}",
            "email": f"customer{n}@example.com",
            "status": CustomerStatus.ACTIVE,
        }
        defaults.update(overrides)
        return Customer.objects.create(**defaults)

    return _make
