"""Customer DRF serializers for API input/output.

The serializers operate at the Interface layer (API Views).
They handle HTTP-level concerns: query-string parsing and response
rendering.  Request bodies are validated by the Pydantic DTOs in
``dtos.py`` before they reach the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer, CustomerStatus

# Pages are addressed by a signed 32-bit index.
MAX_PAGE = 2**31 - 1


class CustomerSerializer(serializers.ModelSerializer):
    """Read-only representation of a Customer resource."""

    class Meta:
        model = Customer
        fields = [
            "id",
            "first_name",
            "last_name",
            "document_type",
            "document_id",
            "email",
            "phone",
            "date_of_birth",
            "address",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerListQuerySerializer(serializers.Serializer):
    """Paging and filtering parameters for ``GET /customers/``."""

    page = serializers.IntegerField(min_value=0, max_value=MAX_PAGE, default=0)
    size = serializers.IntegerField(min_value=1, max_value=100, default=20)
    status = serializers.ChoiceField(
        choices=CustomerStatus.choices, required=False, allow_null=True
    )


class CustomerPageSerializer(serializers.Serializer):
    content = CustomerSerializer(many=True)
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    total_elements = serializers.IntegerField()
    total_pages = serializers.IntegerField()
