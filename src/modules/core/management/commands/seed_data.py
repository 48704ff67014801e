from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from modules.customers.models import Customer, CustomerStatus, DocumentType


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers = self._seed_customers()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        admin_group, _ = Group.objects.get_or_create(name=settings.ROLE_ADMIN)
        viewer_group, _ = Group.objects.get_or_create(name=settings.ROLE_VIEWER)

        created = 0
        for username, password, group in (
            ("admin", "admin123", admin_group),
            ("viewer", "viewer123", viewer_group),
        ):
            user, was_created = User.objects.get_or_create(username=username)
            if was_created:
                user.set_password(password)
                user.save()
                created += 1
            user.groups.add(group)
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        seed_customers = [
            ("John", "Doe", DocumentType.DNI, "DOC12345678", "john.doe@example.com", CustomerStatus.ACTIVE),
            ("Jane", "Roe", DocumentType.PASSPORT, "P4455667", "jane.roe@example.com", CustomerStatus.ACTIVE),
            ("Carlos", "Mendez", DocumentType.CEDULA, "1712345678", "carlos@example.com", CustomerStatus.PENDING),
            ("Lucia", "Paredes", DocumentType.DNI, "DOC87654321", "lucia@example.com", CustomerStatus.SUSPENDED),
            ("Mateo", "Vargas", DocumentType.CEDULA, "0923456789", "mateo@example.com", CustomerStatus.INACTIVE),
        ]
        for first_name, last_name, doc_type, document_id, email, status in seed_customers:
            customer, _ = Customer.objects.get_or_create(
                document_type=doc_type,
                document_id=document_id,
                defaults={
                    "first_name": first_name,
                    "last_name": last_name,
                    "email": email,
                    "status": status,
                },
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers
