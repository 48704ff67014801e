"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
``modules.core.exceptions.api_exception_handler`` translates them into
HTTP responses using the status each base class declares.
"""

from __future__ import annotations

from modules.core.exceptions import BadRequestError, ConflictError, NotFoundError


class CustomerNotFound(NotFoundError):
    """No customer matches the requested id or document."""


class DuplicateCustomer(ConflictError):
    """A customer with the same document pair or email already exists."""


class InvalidStatusTransition(BadRequestError):
    """A status change that the lifecycle does not allow.

    Every transition is currently permitted, so nothing raises this yet;
    it is mapped to 400 for when transition rules are defined.
    """
