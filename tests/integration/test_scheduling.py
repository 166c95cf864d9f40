# tests/integration/test_scheduling.py
import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from datetime import timedelta

from apps.scheduling.models import StudySchedule, StudySession

@pytest.mark.django_db
class TestStudyScheduleViewSet:
    """Testes do ViewSet de Cronogramas de Estudo."""

    def test_create_study_schedule(self, authenticated_client, user):
        """Testa criação manual de cronograma."""
        url = reverse('studyschedule-list')
        data = {
            'title': 'Cronograma INSS',
            'subjects': ['Português', 'Direito Previdenciário'],
            'start_date': '2025-09-01',
            'end_date': '2025-12-15',
            'hours_per_day': 5,
        }

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['subjects'] == ['Português', 'Direito Previdenciário']
        assert response.data['is_ai_generated'] is False
        assert response.data['description'] is None
        assert StudySchedule.objects.filter(user=user, title='Cronograma INSS').exists()

    def test_list_study_schedules(self, authenticated_client, study_schedule):
        """Testa listagem de cronogramas."""
        response = authenticated_client.get(reverse('studyschedule-list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['title'] == study_schedule.title

    def test_update_study_schedule(self, authenticated_client, study_schedule):
        """Testa atualização completa do cronograma."""
        url = reverse('studyschedule-detail', args=[study_schedule.id])
        data = {
            'title': 'Cronograma TRT revisado',
            'subjects': ['Direito do Trabalho'],
            'start_date': study_schedule.start_date.isoformat(),
            'end_date': study_schedule.end_date.isoformat(),
            'hours_per_day': 6,
        }

        response = authenticated_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        study_schedule.refresh_from_db()
        assert study_schedule.title == 'Cronograma TRT revisado'
        assert study_schedule.subjects == ['Direito do Trabalho']
        assert study_schedule.hours_per_day == 6

    def test_delete_study_schedule_keeps_sessions(self, authenticated_client, study_schedule, study_session):
        """Testa que apagar o cronograma não apaga as sessões (referência anulada)."""
        url = reverse('studyschedule-detail', args=[study_schedule.id])

        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        study_session.refresh_from_db()
        assert study_session.schedule is None

    def test_other_user_schedule_not_found(self, authenticated_client, other_user):
        """Testa isolamento dos cronogramas entre usuários."""
        today = timezone.localdate()
        alheio = StudySchedule.objects.create(
            user=other_user, title='Alheio', subjects=['Português'],
            start_date=today, end_date=today + timedelta(days=10), hours_per_day=2,
        )

        response = authenticated_client.get(reverse('studyschedule-detail', args=[alheio.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestStudySessionViewSet:
    """Testes do ViewSet de Sessões de Estudo."""

    def test_create_study_session(self, authenticated_client, study_schedule):
        """Testa registro de sessão concluída."""
        url = reverse('studysession-list')
        data = {'subject': 'Português', 'duration': 50, 'schedule': study_schedule.id}

        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['duration'] == 50
        assert StudySession.objects.filter(schedule=study_schedule).count() == 1

    def test_create_session_without_schedule(self, authenticated_client):
        """Testa que a sessão pode existir sem cronograma."""
        response = authenticated_client.post(
            reverse('studysession-list'), {'subject': 'Atualidades', 'duration': 20}, format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['schedule'] is None

    def test_session_detail(self, authenticated_client, study_session):
        """Testa consulta de uma sessão."""
        response = authenticated_client.get(reverse('studysession-detail', args=[study_session.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['subject'] == 'Português'


@pytest.mark.django_db
class TestStudyStatistics:
    """Testes das estatísticas de estudo."""

    def test_statistics_without_sessions(self, authenticated_client):
        response = authenticated_client.get(reverse('study-statistics'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'total_hours': 0, 'completed_sessions': 0, 'current_streak': 0}

    @pytest.mark.parametrize('streak', [1, 3, 7])
    def test_statistics_streak_of_n_days(self, authenticated_client, user, streak):
        """Sessões nos últimos n dias e um buraco antes deles."""
        now = timezone.now()
        for days_ago in range(streak):
            StudySession.objects.create(
                user=user, subject='Português', duration=60, completed_at=now - timedelta(days=days_ago),
            )
        StudySession.objects.create(
            user=user, subject='Português', duration=60, completed_at=now - timedelta(days=streak + 1),
        )

        response = authenticated_client.get(reverse('study-statistics'))

        assert response.data['current_streak'] == streak
        assert response.data['completed_sessions'] == streak + 1
        assert response.data['total_hours'] == streak + 1
