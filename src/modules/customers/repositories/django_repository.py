"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.

Infrastructure failures (``DatabaseError``) surface as
``StorageUnavailable``; a unique-constraint violation on ``save``
surfaces as ``DuplicateCustomer``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import QuerySet

from modules.core.exceptions import StorageUnavailable
from modules.core.repositories.interfaces import PageResult
from modules.customers.exceptions import DuplicateCustomer
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise database failures as ``StorageUnavailable``."""
    try:
        yield
    except DatabaseError as exc:
        logger.error("customer.storage_error", operation=operation, error=str(exc))
        raise StorageUnavailable(f"Storage unavailable during {operation}.") from exc


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        with storage_errors("get_by_id"):
            try:
                return Customer.objects.filter(id=id).first()
            except (ValueError, ValidationError):
                return None

    def get_by_document(self, document_id: str) -> Optional[Customer]:
        with storage_errors("get_by_document"):
            return Customer.objects.filter(document_id=document_id).first()

    def get_by_document_type_and_id(
        self, document_type: str, document_id: str
    ) -> Optional[Customer]:
        with storage_errors("get_by_document_type_and_id"):
            return Customer.objects.filter(
                document_type=document_type, document_id=document_id
            ).first()

    def get_by_email(self, email: str) -> Optional[Customer]:
        with storage_errors("get_by_email"):
            return Customer.objects.filter(email=email).first()

    def exists_by_document_type_and_id(
        self, document_type: str, document_id: str
    ) -> bool:
        with storage_errors("exists_by_document_type_and_id"):
            return Customer.objects.filter(
                document_type=document_type, document_id=document_id
            ).exists()

    def exists_by_email(self, email: str) -> bool:
        with storage_errors("exists_by_email"):
            return Customer.objects.filter(email=email).exists()

    def list_all(self, page: int, page_size: int) -> PageResult[Customer]:
        with storage_errors("list_all"):
            return self._page(Customer.objects.all(), page, page_size)

    def list_by_status(
        self, status: str, page: int, page_size: int
    ) -> PageResult[Customer]:
        with storage_errors("list_by_status"):
            return self._page(Customer.objects.filter(status=status), page, page_size)

    def count_by_status(self, status: str) -> int:
        with storage_errors("count_by_status"):
            return Customer.objects.filter(status=status).count()

    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer inside its own savepoint."""
        is_new = entity._state.adding
        with storage_errors("save"):
            try:
                with transaction.atomic():
                    entity.save()
            except IntegrityError as exc:
                logger.warning(
                    "customer.unique_constraint_violation",
                    customer_id=str(entity.id),
                )
                raise DuplicateCustomer(
                    "Customer with the same document or email already exists"
                ) from exc
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @staticmethod
    def _page(queryset: QuerySet, page: int, page_size: int) -> PageResult[Customer]:
        total = queryset.count()
        if page_size <= 0:
            return [], total
        start = page * page_size
        items = list(queryset.order_by("-created_at", "-id")[start : start + page_size])
        return items, total
