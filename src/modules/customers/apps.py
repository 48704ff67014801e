from django.apps import AppConfig


class CustomersConfig(AppConfig):
    name = "modules.customers"
    label = "customers"

    def ready(self) -> None:
        from modules.core.metrics import get_metrics_collector
        from modules.customers.models import CustomerStatus
        from modules.customers.repositories.django_repository import (
            CustomerDjangoRepository,
        )

        repository = CustomerDjangoRepository()
        get_metrics_collector().register_gauge(
            "customer_active_total",
            lambda: repository.count_by_status(CustomerStatus.ACTIVE),
        )
