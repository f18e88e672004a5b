from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Retur",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item", models.CharField(max_length=255)),
                ("reason", models.TextField()),
                (
                    "status",
                    models.CharField(
                        choices=[("Pending", "Pending"), ("Approved", "Approved")],
                        default="Pending",
                        max_length=20,
                    ),
                ),
                (
                    "refund_mode",
                    models.CharField(
                        blank=True,
                        choices=[("barang", "Replacement Item"), ("uang", "Cash Refund")],
                        default="",
                        max_length=10,
                    ),
                ),
            ],
            options={
                "db_table": "retur",
                "ordering": ["id"],
            },
        ),
    ]
