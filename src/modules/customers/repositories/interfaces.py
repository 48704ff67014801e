"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups the customer
use-cases need: by document, by email, by status, and the existence
checks behind the uniqueness rules.

Uniqueness contract: implementations MUST back the
``(document_type, document_id)`` pair and ``email`` with database-level
unique constraints.  The service pre-checks with ``exists_by_*``, but a
check-then-insert is racy across concurrent requests; ``save`` must
raise ``DuplicateCustomer`` when a constraint rejects the write.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository, PageResult

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_document(self, document_id: str) -> Optional[Customer]:
        """Retrieve the first customer with ``document_id`` (any type)."""

    @abstractmethod
    def get_by_document_type_and_id(
        self, document_type: str, document_id: str
    ) -> Optional[Customer]:
        """Retrieve a customer by its full document pair."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""

    @abstractmethod
    def exists_by_document_type_and_id(
        self, document_type: str, document_id: str
    ) -> bool:
        """Whether a customer already holds the document pair."""

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        """Whether a customer already holds the email."""

    @abstractmethod
    def list_by_status(
        self, status: str, page: int, page_size: int
    ) -> PageResult[Customer]:
        """Return one zero-based page of customers in ``status``."""

    @abstractmethod
    def count_by_status(self, status: str) -> int:
        """Number of customers currently in ``status``."""
