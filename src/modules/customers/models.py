"""Customer model with status lifecycle and document uniqueness.

Business rules implemented:
- (document_type, document_id) must be unique in the system.
- Email must be unique in the system.
- Customers are never physically erased: "deletion" moves ``status`` to
  INACTIVE (enforced at service layer).
- Sensitive data (document id) masked in ``__str__``.

Both uniqueness rules are backed by database constraints.  The service
layer pre-checks them to give a clean error, but only the constraints
close the race between two concurrent creates.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class DocumentType(models.TextChoices):
    DNI = "DNI", "DNI"
    PASSPORT = "PASSPORT", "Passport"
    CEDULA = "CEDULA", "Cédula"


class CustomerStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ACTIVE = "ACTIVE", "Active"
    SUSPENDED = "SUSPENDED", "Suspended"
    INACTIVE = "INACTIVE", "Inactive"


class Customer(BaseModel):
    """Customer aggregate root.

    ``id`` is a UUIDv7 assigned at construction; ``created_at`` is set on
    first insert and ``updated_at`` on every save (see ``BaseModel``).
    """

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    document_type = models.CharField(max_length=10, choices=DocumentType.choices)
    document_id = models.CharField(max_length=20)
    email = models.EmailField(max_length=254)
    phone = models.CharField(max_length=20, null=True, blank=True, default=None)
    date_of_birth = models.DateField(null=True, blank=True, default=None)
    address = models.CharField(max_length=500, null=True, blank=True, default=None)
    status = models.CharField(
        max_length=10,
        choices=CustomerStatus.choices,
        default=CustomerStatus.PENDING,
    )

    class Meta:
        db_table = "customers"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["document_type", "document_id"],
                name="uk_customers_document",
            ),
            models.UniqueConstraint(fields=["email"], name="uk_customers_email"),
        ]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
            models.Index(fields=["status"], name="customers_status_idx"),
            models.Index(fields=["document_id"], name="customers_document_id_idx"),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == CustomerStatus.ACTIVE

    def __str__(self) -> str:
        suffix = self.document_id[-4:] if self.document_id else "????"
        return f"{self.first_name} {self.last_name} ({self.document_type}: ***{suffix})"
