# Generated manually for the PdfDocument model

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PdfDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255, verbose_name="Título")),
                ("filename", models.CharField(max_length=255, verbose_name="Nome do Arquivo")),
                ("file", models.FileField(blank=True, null=True, upload_to="pdfs/", verbose_name="Arquivo")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True, verbose_name="Enviado em")),
                (
                    "last_read_page",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Última Página Lida",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pdf_documents",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Usuário",
                    ),
                ),
            ],
            options={
                "verbose_name": "Documento PDF",
                "verbose_name_plural": "Documentos PDF",
                "ordering": ["-uploaded_at", "-id"],
            },
        ),
    ]
