# Generated manually for the scheduling models

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("documents", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StudySchedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200, verbose_name="Título")),
                ("description", models.TextField(blank=True, null=True, verbose_name="Descrição")),
                (
                    "subjects",
                    models.JSONField(
                        default=list,
                        help_text="Lista ordenada com o nome das matérias.",
                        verbose_name="Matérias",
                    ),
                ),
                ("start_date", models.DateField(verbose_name="Data de Início")),
                ("end_date", models.DateField(verbose_name="Data de Término")),
                (
                    "hours_per_day",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(24),
                        ],
                        verbose_name="Horas por Dia",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("exam_date", models.DateField(blank=True, null=True, verbose_name="Data da Prova")),
                (
                    "weekly_plan",
                    models.JSONField(
                        blank=True,
                        help_text='Ex: {"Segunda": [{"subject": "Português", "topics": ["Gramática"], "hours": 3}]}',
                        null=True,
                        verbose_name="Plano Semanal",
                    ),
                ),
                ("is_ai_generated", models.BooleanField(default=False, verbose_name="Gerado por IA")),
                (
                    "edital_pdf",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="schedules",
                        to="documents.pdfdocument",
                        verbose_name="PDF do Edital",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="study_schedules",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Usuário",
                    ),
                ),
            ],
            options={
                "verbose_name": "Cronograma de Estudo",
                "verbose_name_plural": "Cronogramas de Estudo",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="StudySession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("subject", models.CharField(max_length=200, verbose_name="Matéria")),
                (
                    "duration",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="Duração (minutos)",
                    ),
                ),
                ("completed_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Concluída em")),
                (
                    "schedule",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sessions",
                        to="scheduling.studyschedule",
                        verbose_name="Cronograma",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="study_sessions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Usuário",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sessão de Estudo",
                "verbose_name_plural": "Sessões de Estudo",
                "ordering": ["-completed_at", "-id"],
            },
        ),
    ]
