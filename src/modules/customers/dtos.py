"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateCustomerDTO`` / ``UpdateCustomerDTO`` / ``UpdateStatusDTO`` /
  ``ValidateCustomerDTO``: request payloads.
- ``ValidationResultDTO``: answer of the validation use-case.
- ``CustomerPage``: one page of customers plus paging totals.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

if TYPE_CHECKING:
    from modules.customers.models import Customer


# ---------------------------------------------------------------------------
# Enums (framework-agnostic, NOT Django TextChoices)
# ---------------------------------------------------------------------------


class DocumentTypeEnum(StrEnum):
    DNI = "DNI"
    PASSPORT = "PASSPORT"
    CEDULA = "CEDULA"


class CustomerStatusEnum(StrEnum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"


PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
DocumentId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=20)]
Phone = Annotated[str, StringConstraints(pattern=PHONE_PATTERN)]
Address = Annotated[str, StringConstraints(max_length=500)]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    Validates:
    - ``first_name`` / ``last_name`` are non-blank and at most 100 chars.
    - ``document_id`` is 5 to 20 chars.
    - ``email`` is a well-formed address (Pydantic ``EmailStr``).
    - ``phone``, when present, matches the E.164-style pattern.
    """

    model_config = ConfigDict(frozen=True)

    first_name: Name
    last_name: Name
    document_type: DocumentTypeEnum
    document_id: DocumentId
    email: EmailStr
    phone: Optional[Phone] = None
    date_of_birth: Optional[date] = None
    address: Optional[Address] = None


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only supplied (non-null) fields are applied.
    Document and status cannot be changed through this DTO.
    """

    model_config = ConfigDict(frozen=True)

    first_name: Optional[Name] = None
    last_name: Optional[Name] = None
    email: Optional[EmailStr] = None
    phone: Optional[Phone] = None
    address: Optional[Address] = None


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: CustomerStatusEnum
    reason: Optional[Address] = None


class ValidateCustomerDTO(BaseModel):
    """Either identifier may be supplied; the service decides what is enough."""

    model_config = ConfigDict(frozen=True)

    customer_id: Optional[UUID] = None
    document_id: Optional[Annotated[str, StringConstraints(strip_whitespace=True)]] = None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ValidationResultDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    customer_id: Optional[UUID] = None
    status: Optional[CustomerStatusEnum] = None
    message: str = Field(min_length=1)


@dataclass(frozen=True)
class CustomerPage:
    """One zero-based page of customers."""

    content: List[Customer]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def build(
        cls, content: List[Customer], page: int, size: int, total_elements: int
    ) -> CustomerPage:
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
        )
