# tests/integration/test_ai_schedule.py
import json

import pytest
from django.urls import reverse
from rest_framework import status
from unittest.mock import patch

import requests

from apps.documents.models import PdfDocument
from apps.scheduling.models import StudySchedule

@pytest.mark.django_db
class TestAIScheduleGeneration:
    """Testes do fluxo upload -> extração -> análise -> cronograma."""

    url = '/api/scheduling/schedules/ai-generate/'

    def test_generation_with_llm(self, authenticated_client, user, edital_upload, exam_date, mock_llm_success):
        """A análise do modelo vira o cronograma salvo."""
        response = authenticated_client.post(
            self.url,
            {'edital_pdf': edital_upload(), 'exam_date': exam_date.isoformat()},
            format='multipart',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert mock_llm_success.call_count == 2

        schedule = StudySchedule.objects.get(user=user)
        assert schedule.is_ai_generated
        assert schedule.subjects == ['Português', 'Direito do Trabalho', 'Legislação Específica']
        assert schedule.weekly_plan['Segunda'][0]['subject'] == 'Direito do Trabalho'
        assert schedule.exam_date == exam_date
        # 120h em 30 dias
        assert schedule.hours_per_day == 4
        assert schedule.edital_pdf == PdfDocument.objects.get(user=user)

        analysis = response.data['analysis']
        assert analysis['source'] == 'ia'
        assert analysis['total_estimated_hours'] == 120
        assert analysis['topics']['Direito do Trabalho'] == ['CLT', 'Jornada de trabalho']

    def test_invalid_llm_analysis_falls_back_to_heuristic(
        self, authenticated_client, edital_upload, exam_date, mock_llm_invalid,
    ):
        """Análise sem matérias não chega ao usuário: o cronograma sai pela heurística."""
        response = authenticated_client.post(
            self.url,
            {'edital_pdf': edital_upload(), 'exam_date': exam_date.isoformat()},
            format='multipart',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['analysis']['source'] == 'heuristica'
        assert response.data['schedule']['subjects'] == [
            'Português',
            'Matemática',
            'Atualidades',
            'Direito do Trabalho',
            'Direito Constitucional',
            'Direito Administrativo',
        ]

    @pytest.mark.parametrize('defect', [
        {'hoursPerSubject': {'Português': float('inf')}},
        {'weeklyPlan': {}},
        {'subjects': ['Português', '']},
        {'weeklyPlan': {'Segunda': [{'subject': 'Português', 'topics': ['Crase'], 'hours': -3}]}},
    ])
    def test_unusable_llm_analysis_falls_back_to_heuristic(
        self, authenticated_client, settings, user, edital_upload, exam_date, llm_analysis, defect,
    ):
        """Horas infinitas, plano vazio, matéria sem nome ou horas negativas: vale a heurística."""
        settings.LLM_API_KEY = 'test-key'
        with patch('apps.core.services.llm_service._call_llm_api') as mock_llm:
            mock_llm.side_effect = ['Texto extraído do edital', json.dumps(dict(llm_analysis, **defect))]
            response = authenticated_client.post(
                self.url,
                {'edital_pdf': edital_upload(), 'exam_date': exam_date.isoformat()},
                format='multipart',
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['analysis']['source'] == 'heuristica'
        schedule = StudySchedule.objects.get(user=user)
        assert 'Matemática' in schedule.subjects
        assert schedule.weekly_plan['Segunda'][0]['subject'] == 'Português'

    def test_generated_schedule_can_be_renamed(self, authenticated_client, edital_upload, exam_date, mock_llm_success):
        """O cronograma gerado continua editável."""
        created = authenticated_client.post(
            self.url,
            {'edital_pdf': edital_upload(), 'exam_date': exam_date.isoformat()},
            format='multipart',
        )
        url = reverse('studyschedule-detail', args=[created.data['schedule']['id']])

        response = authenticated_client.patch(url, {'title': 'Novo'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['title'] == 'Novo'
        assert response.data['is_ai_generated'] is True

    def test_timeout_falls_back_without_retry(self, authenticated_client, settings, edital_upload, exam_date):
        """Timeout na chamada externa: uma única tentativa e depois a heurística."""
        settings.LLM_API_KEY = 'test-key'
        with patch('apps.core.services.llm_service.requests.post', side_effect=requests.Timeout('lento')) as mock_post:
            response = authenticated_client.post(
                self.url,
                {'edital_pdf': edital_upload('edital_analista.pdf'), 'exam_date': exam_date.isoformat()},
                format='multipart',
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert mock_post.call_count == 1
        assert 'Informática' in response.data['schedule']['subjects']
        assert 'lento' not in str(response.data)

    def test_exam_tomorrow_hits_daily_cap(self, authenticated_client, edital_upload):
        """Com um dia até a prova, as horas diárias ficam no limite de 12h."""
        from datetime import timedelta
        from django.utils import timezone

        tomorrow = timezone.localdate() + timedelta(days=1)
        response = authenticated_client.post(
            self.url,
            {'edital_pdf': edital_upload(), 'exam_date': tomorrow.isoformat()},
            format='multipart',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['schedule']['hours_per_day'] == 12
        assert response.data['analysis']['days_until_exam'] == 1

    @pytest.mark.parametrize('exam_date_value', ['', '15/10/2030', 'amanhã'])
    def test_invalid_exam_date(self, authenticated_client, edital_upload, exam_date_value):
        response = authenticated_client.post(
            self.url,
            {'edital_pdf': edital_upload(), 'exam_date': exam_date_value},
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'exam_date' in response.data
        assert not StudySchedule.objects.exists()
