# tests/conftest.py
import json
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from unittest.mock import patch

from apps.documents.models import PdfDocument
from apps.scheduling.models import StudySchedule, StudySession

User = get_user_model()

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF"


@pytest.fixture
def api_client():
    """Cliente da API REST."""
    return APIClient()


@pytest.fixture(autouse=True)
def media_storage(tmp_path, settings):
    """Configura um diretório temporário para os PDFs enviados."""
    media_root = tmp_path / "media"
    media_root.mkdir(parents=True, exist_ok=True)
    settings.MEDIA_ROOT = media_root
    settings.MEDIA_URL = '/media/'
    return media_root


@pytest.fixture(autouse=True)
def no_llm_key(settings):
    """Sem chave da API: nenhum teste chama o modelo de verdade."""
    settings.LLM_API_KEY = ''


@pytest.fixture
def user():
    """Usuário de teste."""
    return User.objects.create_user(username='testuser', password='testpass123')


@pytest.fixture
def other_user():
    """Outro usuário para testar isolamento de dados."""
    return User.objects.create_user(username='otheruser', password='testpass123')


@pytest.fixture
def authenticated_client(api_client, user):
    """Cliente autenticado com JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def exam_date():
    """Data da prova 30 dias à frente."""
    return timezone.localdate() + timedelta(days=30)


@pytest.fixture
def edital_upload():
    """Fábrica de uploads de PDF de edital."""
    def _make(name='trt_tecnico.pdf', content=PDF_BYTES, content_type='application/pdf'):
        return SimpleUploadedFile(name, content, content_type=content_type)
    return _make


@pytest.fixture
def pdf_document(user):
    """PDF já enviado pelo usuário."""
    return PdfDocument.objects.create(user=user, title='Edital TRT', filename='edital_trt.pdf')


@pytest.fixture
def study_schedule(user):
    """Cronograma manual de teste."""
    today = timezone.localdate()
    return StudySchedule.objects.create(
        user=user,
        title='Cronograma TRT',
        subjects=['Português', 'Direito do Trabalho'],
        start_date=today,
        end_date=today + timedelta(days=60),
        hours_per_day=3,
    )


@pytest.fixture
def study_session(user, study_schedule):
    """Sessão de estudo concluída hoje."""
    return StudySession.objects.create(
        user=user,
        schedule=study_schedule,
        subject='Português',
        duration=45,
    )


@pytest.fixture
def llm_analysis():
    """Análise no formato devolvido pelo modelo de linguagem."""
    return {
        'subjects': ['Português', 'Direito do Trabalho', 'Legislação Específica'],
        'topics': {
            'Português': ['Interpretação de textos', 'Crase'],
            'Direito do Trabalho': ['CLT', 'Jornada de trabalho'],
            'Legislação Específica': ['Regimento interno do TRT'],
        },
        'priority': ['Direito do Trabalho', 'Português'],
        'hoursPerSubject': {'Português': 40, 'Direito do Trabalho': 60, 'Legislação Específica': 20},
        'weeklyPlan': {
            'Segunda': [{'subject': 'Direito do Trabalho', 'topics': ['CLT'], 'hours': 3}],
            'Terça': [{'subject': 'Português', 'topics': ['Crase'], 'hours': 2}],
            'Sábado': [{'subject': 'Revisão Geral', 'topics': ['revisão geral'], 'hours': 4}],
            'Domingo': [{'subject': 'Simulados', 'topics': ['testes práticos'], 'hours': 3}],
        },
    }


@pytest.fixture
def mock_llm_success(settings, llm_analysis):
    """Mock para respostas de sucesso da API do modelo: extração e depois análise."""
    settings.LLM_API_KEY = 'test-key'
    with patch('apps.core.services.llm_service._call_llm_api') as mock:
        mock.side_effect = ['Texto extraído do edital', json.dumps(llm_analysis)]
        yield mock


@pytest.fixture
def mock_llm_invalid(settings):
    """Mock para uma análise estruturalmente inválida (sem matérias)."""
    settings.LLM_API_KEY = 'test-key'
    with patch('apps.core.services.llm_service._call_llm_api') as mock:
        mock.side_effect = ['Texto extraído do edital', json.dumps({'subjects': []})]
        yield mock
