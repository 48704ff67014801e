"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- (document_type, document_id) must be unique; checked before email.
- Email must be unique, on create and when an update changes it.
- New customers start PENDING.
- Soft delete sets status INACTIVE; records are never removed.
- Any status may move to any other status.

``ValidationService`` is the read-only "is this customer usable?" check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.core.exceptions import InvalidArgument
from modules.core.metrics import MetricsCollector, get_metrics_collector
from modules.customers.dtos import CustomerPage, ValidationResultDTO
from modules.customers.exceptions import CustomerNotFound, DuplicateCustomer
from modules.customers.models import Customer, CustomerStatus

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("first_name", "last_name", "email", "phone", "address")


class CustomerService:
    """Application service for Customer lifecycle use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    Success/failure counters are resolved once, at construction.
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._repo = repository
        metrics = metrics or get_metrics_collector()
        self._success = metrics.counter("customer_operations_success_total")
        self._failure = metrics.counter("customer_operations_failure_total")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Create a new PENDING customer after enforcing uniqueness rules.

        Raises:
            DuplicateCustomer: if the document pair or the email is taken.
        """
        log = logger.bind(document_type=dto.document_type, document_id=dto.document_id)

        if self._repo.exists_by_document_type_and_id(dto.document_type, dto.document_id):
            self._failure.increment()
            log.warning("customer.duplicate_document")
            raise DuplicateCustomer(
                f"Customer with document {dto.document_type}:{dto.document_id} already exists"
            )

        if self._repo.exists_by_email(dto.email):
            self._failure.increment()
            log.warning("customer.duplicate_email", email=dto.email)
            raise DuplicateCustomer(f"Customer with email {dto.email} already exists")

        customer = Customer(
            first_name=dto.first_name,
            last_name=dto.last_name,
            document_type=dto.document_type,
            document_id=dto.document_id,
            email=dto.email,
            phone=dto.phone,
            date_of_birth=dto.date_of_birth,
            address=dto.address,
            status=CustomerStatus.PENDING,
        )
        customer = self._persist(customer)
        self._success.increment()
        log.info("customer.created", customer_id=str(customer.id))
        return customer

    @transaction.atomic
    def update_customer(self, id: str, dto: UpdateCustomerDTO) -> Customer:
        """Merge the non-null fields of ``dto`` into an existing customer.

        Raises:
            CustomerNotFound: if the customer does not exist.
            DuplicateCustomer: if a changed email is already in use.
        """
        customer = self._get_or_raise(id)
        log = logger.bind(customer_id=str(customer.id))

        if dto.email is not None and dto.email != customer.email:
            if self._repo.exists_by_email(dto.email):
                self._failure.increment()
                log.warning("customer.duplicate_email", email=dto.email)
                raise DuplicateCustomer(f"Email already in use: {dto.email}")

        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        customer = self._persist(customer)
        self._success.increment()
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def delete_customer(self, id: str) -> None:
        """Soft-delete a customer by moving it to INACTIVE.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._get_or_raise(id)
        self._change_status(customer, CustomerStatus.INACTIVE)
        logger.info("customer.soft_deleted", customer_id=str(customer.id))

    @transaction.atomic
    def update_customer_status(
        self, id: str, status: str, reason: Optional[str] = None
    ) -> Customer:
        """Set ``status`` unconditionally; ``reason`` is only logged.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._get_or_raise(id)
        previous = customer.status
        self._change_status(customer, status)
        logger.info(
            "customer.status_changed",
            customer_id=str(customer.id),
            old_status=str(previous),
            new_status=str(status),
            reason=reason,
        )
        return customer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_customer(self, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._get_or_raise(id)
        logger.info("customer.retrieved", customer_id=str(customer.id))
        return customer

    def get_customer_by_document(self, document_id: str) -> Customer:
        document_id = document_id.strip()
        customer = self._repo.get_by_document(document_id)
        if not customer:
            raise CustomerNotFound(f"Customer not found with document: {document_id}")
        return customer

    def list_customers(
        self, page: int, size: int, status: Optional[str] = None
    ) -> CustomerPage:
        """Return one zero-based page, optionally filtered by status."""
        if status is not None:
            items, total = self._repo.list_by_status(status, page, size)
        else:
            items, total = self._repo.list_all(page, size)
        return CustomerPage.build(items, page, size, total)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, id: str) -> Customer:
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer not found: {id}")
        return customer

    def _change_status(self, customer: Customer, status: str) -> None:
        # Single write path for both soft delete and explicit status changes.
        customer.status = status
        self._persist(customer)
        self._success.increment()

    def _persist(self, customer: Customer) -> Customer:
        try:
            return self._repo.save(customer)
        except DuplicateCustomer:
            self._failure.increment()
            raise


class ValidationService:
    """Read-only check of whether a customer exists and is ACTIVE."""

    NOT_FOUND_MESSAGE = "Customer not found"
    VALID_MESSAGE = "Customer is active and valid"

    def __init__(
        self,
        repository: ICustomerRepository,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._repo = repository
        metrics = metrics or get_metrics_collector()
        self._success = metrics.counter("customer_validation_success_total")
        self._failure = metrics.counter("customer_validation_failure_total")

    def validate_customer(
        self,
        customer_id: Optional[UUID | str] = None,
        document_id: Optional[str] = None,
    ) -> ValidationResultDTO:
        """Validate by ``customer_id`` if given, else by ``document_id``.

        Raises:
            InvalidArgument: if neither identifier is usable.
        """
        if customer_id is None and (document_id is None or not document_id.strip()):
            self._failure.increment()
            raise InvalidArgument(
                "At least one of customer_id or document_id must be provided"
            )

        if customer_id is not None:
            customer = self._repo.get_by_id(str(customer_id))
        else:
            customer = self._repo.get_by_document(document_id.strip())
        return self._build_result(customer)

    def validate_customer_by_id(self, customer_id: UUID | str) -> ValidationResultDTO:
        return self._build_result(self._repo.get_by_id(str(customer_id)))

    def _build_result(self, customer: Optional[Customer]) -> ValidationResultDTO:
        if customer is None:
            self._failure.increment()
            logger.info("customer.validated", valid=False, found=False)
            return ValidationResultDTO(valid=False, message=self.NOT_FOUND_MESSAGE)

        valid = customer.status == CustomerStatus.ACTIVE
        if valid:
            self._success.increment()
            message = self.VALID_MESSAGE
        else:
            self._failure.increment()
            message = f"Customer exists but is not active (status: {str(customer.status)})"

        logger.info(
            "customer.validated",
            customer_id=str(customer.id),
            valid=valid,
            status=str(customer.status),
        )
        return ValidationResultDTO(
            valid=valid,
            customer_id=customer.id,
            status=str(customer.status),
            message=message,
        )
