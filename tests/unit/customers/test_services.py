"""Unit tests for CustomerService.

Covers:
- create_customer: happy path, duplicate document, duplicate email,
  check order, constraint race, counters.
- update_customer: partial merge, not found, email collision, unchanged email.
- get_customer / get_customer_by_document: happy path, not found.
- list_customers: status filter, page totals.
- delete_customer / update_customer_status: status writes, idempotency.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.core.metrics import MetricsCollector
from modules.customers.dtos import (
    CreateCustomerDTO,
    CustomerStatusEnum,
    DocumentTypeEnum,
    UpdateCustomerDTO,
)
from modules.customers.exceptions import CustomerNotFound, DuplicateCustomer
from modules.customers.models import Customer, CustomerStatus, DocumentType
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit

SUCCESS = "customer_operations_success_total"
FAILURE = "customer_operations_failure_total"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.exists_by_document_type_and_id.return_value = False
    repo.exists_by_email.return_value = False
    repo.save.side_effect = lambda c: c
    return repo


@pytest.fixture()
def metrics():
    return MetricsCollector()


@pytest.fixture()
def service(mock_repo, metrics):
    return CustomerService(repository=mock_repo, metrics=metrics)


def _make_customer(**overrides) -> Customer:
    """Unsaved Customer; the repository is mocked."""
    defaults = {
        "first_name": "John",
        "last_name": "Doe",
        "document_type": DocumentType.DNI,
        "document_id": "DOC12345678",
        "email": "john@x.com",
        "phone": "+1234567890",
        "address": "123 Main St",
        "status": CustomerStatus.ACTIVE,
    }
    defaults.update(overrides)
    return Customer(**defaults)


def _create_dto(**overrides) -> CreateCustomerDTO:
    data = {
        "first_name": "John",
        "last_name": "Doe",
        "document_type": DocumentTypeEnum.DNI,
        "document_id": "DOC12345678",
        "email": "john@x.com",
    }
    data.update(overrides)
    return CreateCustomerDTO(**data)


# ===========================================================================
# create_customer
# ===========================================================================


class TestCreateCustomer:
    def test_success_starts_pending(self, service, mock_repo, metrics):
        customer = service.create_customer(_create_dto())

        assert customer.status == CustomerStatus.PENDING
        assert customer.id is not None
        assert customer.document_id == "DOC12345678"
        mock_repo.save.assert_called_once()
        assert metrics.get_counter_value(SUCCESS) == 1
        assert metrics.get_counter_value(FAILURE) == 0

    def test_sets_optional_fields(self, service):
        customer = service.create_customer(
            _create_dto(phone="+1234567890", address="123 Main St")
        )

        assert customer.phone == "+1234567890"
        assert customer.address == "123 Main St"

    def test_duplicate_document_raises(self, service, mock_repo, metrics):
        mock_repo.exists_by_document_type_and_id.return_value = True

        with pytest.raises(DuplicateCustomer, match="document"):
            service.create_customer(_create_dto())

        mock_repo.save.assert_not_called()
        assert metrics.get_counter_value(FAILURE) == 1
        assert metrics.get_counter_value(SUCCESS) == 0

    def test_duplicate_email_raises(self, service, mock_repo, metrics):
        mock_repo.exists_by_email.return_value = True

        with pytest.raises(DuplicateCustomer, match="email"):
            service.create_customer(_create_dto(document_id="DOC99999999"))

        mock_repo.save.assert_not_called()
        assert metrics.get_counter_value(FAILURE) == 1

    def test_document_check_takes_precedence(self, service, mock_repo):
        mock_repo.exists_by_document_type_and_id.return_value = True
        mock_repo.exists_by_email.return_value = True

        with pytest.raises(DuplicateCustomer, match="document"):
            service.create_customer(_create_dto())

        mock_repo.exists_by_email.assert_not_called()

    def test_constraint_violation_on_save_counts_as_failure(
        self, service, mock_repo, metrics
    ):
        mock_repo.save.side_effect = DuplicateCustomer("constraint")

        with pytest.raises(DuplicateCustomer):
            service.create_customer(_create_dto())

        assert metrics.get_counter_value(FAILURE) == 1
        assert metrics.get_counter_value(SUCCESS) == 0


# ===========================================================================
# update_customer
# ===========================================================================


class TestUpdateCustomer:
    def test_success(self, service, mock_repo, metrics):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer(str(existing.id), UpdateCustomerDTO(first_name="Jane"))

        assert customer.first_name == "Jane"
        mock_repo.save.assert_called_once()
        assert metrics.get_counter_value(SUCCESS) == 1

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(CustomerNotFound):
            service.update_customer("non-existent-id", UpdateCustomerDTO(first_name="Ghost"))

        mock_repo.save.assert_not_called()

    def test_null_fields_are_left_untouched(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer(str(existing.id), UpdateCustomerDTO(phone="+1987654321"))

        assert customer.phone == "+1987654321"
        assert customer.first_name == "John"
        assert customer.last_name == "Doe"
        assert customer.email == "john@x.com"
        assert customer.address == "123 Main St"

    def test_empty_update_changes_nothing(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer(str(existing.id), UpdateCustomerDTO())

        assert customer.first_name == "John"
        assert customer.phone == "+1234567890"
        assert customer.status == CustomerStatus.ACTIVE
        mock_repo.exists_by_email.assert_not_called()

    def test_email_collision_raises(self, service, mock_repo, metrics):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing
        mock_repo.exists_by_email.return_value = True

        with pytest.raises(DuplicateCustomer, match="Email"):
            service.update_customer(str(existing.id), UpdateCustomerDTO(email="taken@x.com"))

        mock_repo.save.assert_not_called()
        assert existing.email == "john@x.com"
        assert metrics.get_counter_value(FAILURE) == 1

    def test_same_email_skips_uniqueness_check(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer(str(existing.id), UpdateCustomerDTO(email="john@x.com"))

        assert customer.email == "john@x.com"
        mock_repo.exists_by_email.assert_not_called()

    def test_new_email_is_checked_and_applied(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer(str(existing.id), UpdateCustomerDTO(email="new@x.com"))

        mock_repo.exists_by_email.assert_called_once_with("new@x.com")
        assert customer.email == "new@x.com"


# ===========================================================================
# Queries
# ===========================================================================


class TestGetCustomer:
    def test_success(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        assert service.get_customer(str(existing.id)).id == existing.id

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(CustomerNotFound):
            service.get_customer("non-existent-id")


class TestGetCustomerByDocument:
    def test_success(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_document.return_value = existing

        assert service.get_customer_by_document("DOC12345678") is existing
        mock_repo.get_by_document.assert_called_once_with("DOC12345678")

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_document.return_value = None

        with pytest.raises(CustomerNotFound, match="document"):
            service.get_customer_by_document("UNKNOWN1")

    def test_document_is_stripped_before_lookup(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_document.return_value = existing

        assert service.get_customer_by_document(" DOC12345678 ") is existing
        mock_repo.get_by_document.assert_called_once_with("DOC12345678")


class TestListCustomers:
    def test_without_filter_lists_all(self, service, mock_repo):
        items = [_make_customer(), _make_customer(document_id="DOC2", email="b@x.com")]
        mock_repo.list_all.return_value = (items, 2)

        page = service.list_customers(page=0, size=20)

        mock_repo.list_all.assert_called_once_with(0, 20)
        mock_repo.list_by_status.assert_not_called()
        assert page.content == items
        assert page.total_elements == 2
        assert page.total_pages == 1

    def test_with_status_filter(self, service, mock_repo):
        mock_repo.list_by_status.return_value = ([], 0)

        page = service.list_customers(page=1, size=10, status=CustomerStatus.SUSPENDED)

        mock_repo.list_by_status.assert_called_once_with(CustomerStatus.SUSPENDED, 1, 10)
        assert page.page == 1
        assert page.size == 10
        assert page.total_pages == 0

    @pytest.mark.parametrize(
        ("total", "size", "expected"),
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (101, 10, 11), (5, 0, 0)],
    )
    def test_total_pages(self, service, mock_repo, total, size, expected):
        mock_repo.list_all.return_value = ([], total)

        page = service.list_customers(page=0, size=size)

        assert page.total_pages == expected


# ===========================================================================
# delete_customer / update_customer_status
# ===========================================================================


class TestDeleteCustomer:
    def test_sets_inactive_only(self, service, mock_repo, metrics):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        service.delete_customer(str(existing.id))

        assert existing.status == CustomerStatus.INACTIVE
        assert existing.first_name == "John"
        assert existing.email == "john@x.com"
        mock_repo.save.assert_called_once_with(existing)
        assert metrics.get_counter_value(SUCCESS) == 1

    def test_twice_stays_inactive(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        service.delete_customer(str(existing.id))
        service.delete_customer(str(existing.id))

        assert existing.status == CustomerStatus.INACTIVE
        assert mock_repo.save.call_count == 2

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(CustomerNotFound):
            service.delete_customer("non-existent-id")

        mock_repo.save.assert_not_called()


class TestUpdateCustomerStatus:
    @pytest.mark.parametrize("initial", list(CustomerStatus))
    @pytest.mark.parametrize("target", list(CustomerStatusEnum))
    def test_any_transition_is_allowed(self, service, mock_repo, initial, target):
        existing = _make_customer(status=initial)
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer_status(str(existing.id), target, "reason")

        assert customer.status == target

    def test_reactivates_inactive_customer(self, service, mock_repo, metrics):
        existing = _make_customer(status=CustomerStatus.INACTIVE)
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer_status(str(existing.id), CustomerStatusEnum.ACTIVE)

        assert customer.status == CustomerStatus.ACTIVE
        mock_repo.save.assert_called_once_with(existing)
        assert metrics.get_counter_value(SUCCESS) == 1

    def test_reason_is_not_stored(self, service, mock_repo):
        existing = _make_customer()
        mock_repo.get_by_id.return_value = existing

        customer = service.update_customer_status(
            str(existing.id), CustomerStatusEnum.SUSPENDED, "Suspicious activity"
        )

        assert not hasattr(customer, "reason")

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(CustomerNotFound):
            service.update_customer_status("missing", CustomerStatusEnum.ACTIVE)
