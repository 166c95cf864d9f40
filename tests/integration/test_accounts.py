# tests/integration/test_accounts.py
import pytest
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework import status

User = get_user_model()

@pytest.mark.django_db
class TestUserAuthentication:
    """Testes de autenticação e registro de usuários."""

    def test_user_registration_flow(self, api_client):
        """Testa o fluxo completo de registro de usuário."""
        url = reverse('user-list')
        data = {
            'username': 'newuser',
            'password': 'strongpass123',
        }

        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.filter(username='newuser').exists()
        assert User.objects.get(username='newuser').check_password('strongpass123')

    def test_user_login_with_username(self, api_client, user):
        """Testa login usando o nome de usuário."""
        response = api_client.post(
            reverse('jwt-create'),
            {'username': user.username, 'password': 'testpass123'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data

    def test_user_login_invalid_credentials(self, api_client, user):
        """Testa login com credenciais inválidas."""
        response = api_client.post(
            reverse('jwt-create'),
            {'username': user.username, 'password': 'wrongpassword'},
            format='json',
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_jwt_token_gives_access_to_own_data(self, authenticated_client, study_schedule):
        """Testa que o token identifica o usuário em vez de um id fixo."""
        response = authenticated_client.get(reverse('studyschedule-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [item['id'] for item in response.data] == [study_schedule.id]

    def test_unauthenticated_access_is_denied(self, api_client):
        """Testa que os endpoints exigem autenticação."""
        for name in ('studyschedule-list', 'studysession-list', 'pdfdocument-list', 'study-statistics'):
            response = api_client.get(reverse(name))
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
