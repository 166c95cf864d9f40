# apps/core/exceptions.py

from rest_framework import status
from rest_framework.exceptions import APIException


class EditalAnalysisError(Exception):
    """Falha ao obter a análise de um edital pelo modelo de linguagem."""


class ExtractionError(EditalAnalysisError):
    """O texto do PDF não pôde ser extraído."""


class AnalysisError(EditalAnalysisError):
    """A análise do texto falhou ou retornou uma estrutura inválida."""


class ProcessingError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Erro ao gerar cronograma com IA."
    default_code = 'processing_error'
