# apps/documents/models.py

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class PdfDocumentQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(user=user)


class PdfDocument(models.Model):
    """
    Um PDF enviado pelo usuário, seja para leitura em voz alta
    ou como edital de concurso analisado pela geração de cronogramas.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='pdf_documents',
        verbose_name="Usuário"
    )
    title = models.CharField(
        max_length=255,
        verbose_name="Título"
    )
    filename = models.CharField(
        max_length=255,
        verbose_name="Nome do Arquivo"
    )
    file = models.FileField(
        upload_to='pdfs/',
        null=True,
        blank=True,
        verbose_name="Arquivo"
    )
    uploaded_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Enviado em"
    )
    last_read_page = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name="Última Página Lida"
    )

    objects = PdfDocumentQuerySet.as_manager()

    class Meta:
        ordering = ['-uploaded_at', '-id']
        verbose_name = "Documento PDF"
        verbose_name_plural = "Documentos PDF"

    def __str__(self):
        return self.title
