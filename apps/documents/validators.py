# apps/documents/validators.py

from pathlib import Path

from django.conf import settings
from rest_framework import serializers

PDF_SIGNATURE = b'%PDF'
PDF_CONTENT_TYPES = {'application/pdf', 'application/x-pdf', 'application/octet-stream'}


def validate_pdf_upload(uploaded_file):
    """
    Garante que o arquivo enviado é um PDF: extensão, content type,
    assinatura '%PDF' no início do conteúdo e tamanho máximo.
    """
    if uploaded_file is None:
        raise serializers.ValidationError("Arquivo PDF é obrigatório.")

    if Path(uploaded_file.name).suffix.lower() != '.pdf':
        raise serializers.ValidationError("O arquivo deve ser um PDF.")

    content_type = getattr(uploaded_file, 'content_type', None)
    if content_type and content_type not in PDF_CONTENT_TYPES:
        raise serializers.ValidationError("O arquivo deve ser um PDF.")

    if uploaded_file.size > settings.MAX_PDF_UPLOAD_SIZE:
        limit_mb = settings.MAX_PDF_UPLOAD_SIZE // (1024 * 1024)
        raise serializers.ValidationError(f"O PDF excede o tamanho máximo de {limit_mb} MB.")

    uploaded_file.seek(0)
    header = uploaded_file.read(len(PDF_SIGNATURE))
    uploaded_file.seek(0)
    if header != PDF_SIGNATURE:
        raise serializers.ValidationError("O conteúdo enviado não é um PDF válido.")

    return uploaded_file
