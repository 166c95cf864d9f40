# apps/scheduling/models.py

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.documents.models import PdfDocument

MIN_HOURS_PER_DAY = 1
MAX_HOURS_PER_DAY = 24


class StudyScheduleQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(user=user)


class StudySchedule(models.Model):
    """
    Um cronograma de estudo do usuário: período, matérias e, quando gerado
    a partir de um edital, o plano semanal sugerido.
    Ex: 'Cronograma TRT' de 2025-08-01 a 2025-11-30, 4h por dia.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='study_schedules',
        verbose_name="Usuário"
    )
    title = models.CharField(
        max_length=200,
        verbose_name="Título"
    )
    description = models.TextField(
        blank=True,
        null=True,
        verbose_name="Descrição"
    )
    subjects = models.JSONField(
        default=list,
        verbose_name="Matérias",
        help_text="Lista ordenada com o nome das matérias."
    )
    start_date = models.DateField(verbose_name="Data de Início")
    end_date = models.DateField(verbose_name="Data de Término")
    hours_per_day = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_HOURS_PER_DAY), MaxValueValidator(MAX_HOURS_PER_DAY)],
        verbose_name="Horas por Dia"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    exam_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Data da Prova"
    )
    edital_pdf = models.ForeignKey(
        PdfDocument,
        on_delete=models.SET_NULL,  # Apagar o PDF não apaga o cronograma.
        null=True,
        blank=True,
        related_name='schedules',
        verbose_name="PDF do Edital"
    )
    weekly_plan = models.JSONField(
        null=True,
        blank=True,
        verbose_name="Plano Semanal",
        help_text='Ex: {"Segunda": [{"subject": "Português", "topics": ["Gramática"], "hours": 3}]}'
    )
    is_ai_generated = models.BooleanField(
        default=False,
        verbose_name="Gerado por IA"
    )

    objects = StudyScheduleQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = "Cronograma de Estudo"
        verbose_name_plural = "Cronogramas de Estudo"

    def __str__(self):
        return f"{self.title} ({self.start_date} a {self.end_date})"

    def clean(self):
        if not self.subjects:
            raise ValidationError({'subjects': "Informe ao menos uma matéria."})
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': "A data de término deve ser posterior à data de início."})
        if self.is_ai_generated and (not self.weekly_plan or not self.exam_date):
            raise ValidationError("Cronogramas gerados por IA precisam de plano semanal e data da prova.")


class StudySessionQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(user=user)

    def recent(self, limit):
        return self.order_by('-completed_at', '-id')[:limit]


class StudySession(models.Model):
    """
    Uma SESSÃO DE ESTUDO concluída. É registrada ao final do estudo
    e nunca mais alterada.
    Ex: 45 minutos de Português em 2025-08-12 às 19h.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='study_sessions',
        verbose_name="Usuário"
    )
    schedule = models.ForeignKey(
        StudySchedule,
        on_delete=models.SET_NULL,  # Se o cronograma for apagado, o histórico de estudo permanece.
        null=True,
        blank=True,
        related_name='sessions',
        verbose_name="Cronograma"
    )
    subject = models.CharField(
        max_length=200,
        verbose_name="Matéria"
    )
    duration = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name="Duração (minutos)"
    )
    completed_at = models.DateTimeField(
        default=timezone.now,
        verbose_name="Concluída em"
    )

    objects = StudySessionQuerySet.as_manager()

    class Meta:
        ordering = ['-completed_at', '-id']
        verbose_name = "Sessão de Estudo"
        verbose_name_plural = "Sessões de Estudo"

    def __str__(self):
        return f"{self.subject} por {self.duration} min em {self.completed_at:%Y-%m-%d}"
