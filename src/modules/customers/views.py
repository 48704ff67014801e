"""Customer API views.

Exposes ``CustomerService`` and ``ValidationService`` via HTTP using a
DRF ViewSet.  Domain exceptions propagate to
``modules.core.exceptions.api_exception_handler``, which maps them to
status codes; views never catch them.

Read operations (including validation) require the ``viewer`` role,
mutating operations the ``admin`` role.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.permissions import IsAdmin, IsViewer
from modules.core.validation import parse_payload
from modules.customers.dtos import (
    CreateCustomerDTO,
    UpdateCustomerDTO,
    UpdateStatusDTO,
    ValidateCustomerDTO,
)
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    CustomerListQuerySerializer,
    CustomerPageSerializer,
    CustomerSerializer,
)
from modules.customers.services import CustomerService, ValidationService

UUID_PATTERN = r"[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"


class CustomerViewSet(ViewSet):
    """ViewSet for Customer lifecycle and validation operations.

    Uses the services with ``CustomerDjangoRepository`` (DIP).  All ORM
    access goes through the service/repository layer.
    """

    lookup_value_regex = UUID_PATTERN

    read_actions = {"list", "retrieve", "by_document", "validate", "validate_by_id"}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = CustomerDjangoRepository()
        self._service = CustomerService(repository=repository)
        self._validation = ValidationService(repository=repository)

    def get_permissions(self):
        if self.action in self.read_actions:
            return [IsViewer()]
        return [IsAdmin()]

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/?page=&size=&status="""
        query = CustomerListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        page = self._service.list_customers(
            page=params["page"], size=params["size"], status=params.get("status")
        )
        return Response(CustomerPageSerializer(page).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(CustomerSerializer(customer).data)

    @action(detail=False, methods=["get"], url_path=r"document/(?P<document_id>[^/]+)")
    def by_document(self, request: Request, document_id: str) -> Response:
        """GET /api/v1/customers/document/{document_id}/"""
        customer = self._service.get_customer_by_document(document_id)
        return Response(CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        dto = parse_payload(CreateCustomerDTO, request.data)
        customer = self._service.create_customer(dto)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/customers/{pk}/"""
        dto = parse_payload(UpdateCustomerDTO, request.data)
        customer = self._service.update_customer(pk, dto)
        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/status/"""
        dto = parse_payload(UpdateStatusDTO, request.data)
        customer = self._service.update_customer_status(pk, dto.status, dto.reason)
        return Response(CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="validate")
    def validate(self, request: Request) -> Response:
        """POST /api/v1/customers/validate/"""
        dto = parse_payload(ValidateCustomerDTO, request.data)
        result = self._validation.validate_customer(
            customer_id=dto.customer_id, document_id=dto.document_id
        )
        return Response(result.model_dump(mode="json"))

    @action(detail=True, methods=["get"], url_path="validate")
    def validate_by_id(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/validate/"""
        result = self._validation.validate_customer_by_id(pk)
        return Response(result.model_dump(mode="json"))
