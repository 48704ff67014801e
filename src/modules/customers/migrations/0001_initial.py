import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("DNI", "DNI"),
                            ("PASSPORT", "Passport"),
                            ("CEDULA", "Cédula"),
                        ],
                        max_length=10,
                    ),
                ),
                ("document_id", models.CharField(max_length=20)),
                ("email", models.EmailField(max_length=254)),
                (
                    "phone",
                    models.CharField(blank=True, default=None, max_length=20, null=True),
                ),
                (
                    "date_of_birth",
                    models.DateField(blank=True, default=None, null=True),
                ),
                (
                    "address",
                    models.CharField(blank=True, default=None, max_length=500, null=True),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("ACTIVE", "Active"),
                            ("SUSPENDED", "Suspended"),
                            ("INACTIVE", "Inactive"),
                        ],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
            ],
            options={
                "db_table": "customers",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="customers_created_idx"),
                    models.Index(fields=["status"], name="customers_status_idx"),
                    models.Index(
                        fields=["document_id"], name="customers_document_id_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("document_type", "document_id"),
                        name="uk_customers_document",
                    ),
                    models.UniqueConstraint(
                        fields=("email",), name="uk_customers_email"
                    ),
                ],
            },
        ),
    ]
