import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("calories", models.PositiveIntegerField()),
                (
                    "protein",
                    models.PositiveIntegerField(help_text="Grams of protein"),
                ),
                ("image", models.URLField(max_length=500)),
                ("category", models.CharField(max_length=100)),
                (
                    "spicy",
                    models.CharField(
                        blank=True,
                        help_text="Spice level label (e.g., Mild, Hot)",
                        max_length=50,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["category"], name="menuitem_category_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("firebase_uid", models.CharField(max_length=128)),
                ("user_email", models.EmailField(max_length=254)),
                (
                    "user_name",
                    models.CharField(blank=True, max_length=200, null=True),
                ),
                ("items", models.JSONField()),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("tax", models.DecimalField(decimal_places=2, max_digits=10)),
                ("total", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("preparing", "Preparing"),
                            ("completed", "Completed"),
                            ("rejected", "Rejected"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "preparation_time",
                    models.CharField(
                        blank=True,
                        help_text="Estimated minutes; set only while preparing",
                        max_length=50,
                        null=True,
                    ),
                ),
                (
                    "rejection_reason",
                    models.TextField(
                        blank=True, help_text="Set only when rejected", null=True
                    ),
                ),
                (
                    "cancelled_by",
                    models.CharField(
                        blank=True,
                        choices=[("guest", "Guest"), ("admin", "Admin")],
                        help_text="Set only when cancelled",
                        max_length=20,
                        null=True,
                    ),
                ),
                ("guest_arrived", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["firebase_uid", "created_at"],
                        name="order_owner_created_idx",
                    ),
                    models.Index(
                        fields=["status", "created_at"],
                        name="order_status_created_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("cancelled_by__isnull", True),
                                ("preparation_time__isnull", True),
                                ("rejection_reason__isnull", True),
                                ("status__in", ["pending", "completed"]),
                            ),
                            models.Q(
                                ("cancelled_by__isnull", True),
                                ("rejection_reason__isnull", True),
                                ("status", "preparing"),
                            ),
                            models.Q(
                                ("cancelled_by__isnull", True),
                                ("preparation_time__isnull", True),
                                ("status", "rejected"),
                            ),
                            models.Q(
                                ("preparation_time__isnull", True),
                                ("rejection_reason__isnull", True),
                                ("status", "cancelled"),
                            ),
                            _connector="OR",
                        ),
                        name="order_side_fields_match_status",
                    )
                ],
            },
        ),
    ]
