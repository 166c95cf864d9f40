from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

User = get_user_model()


class UserModelTests(TestCase):
    def test_password_is_hashed_on_create(self):
        user = User.objects.create_user(username="joao", password="senha-forte-123")
        self.assertNotEqual(user.password, "senha-forte-123")
        self.assertTrue(user.check_password("senha-forte-123"))


class AccountsAPITests(APITestCase):
    def test_register_then_obtain_jwt(self):
        register = self.client.post(
            reverse("user-list"),
            {"username": "maria", "password": "Concurso#2025"},
            format="json",
        )
        self.assertEqual(register.status_code, status.HTTP_201_CREATED)
        self.assertEqual(register.data["username"], "maria")
        self.assertNotIn("password", register.data)

        login = self.client.post(
            reverse("jwt-create"),
            {"username": "maria", "password": "Concurso#2025"},
            format="json",
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        self.assertIn("access", login.data)
        self.assertIn("refresh", login.data)

    def test_duplicate_username_is_rejected(self):
        User.objects.create_user(username="maria", password="Concurso#2025")
        response = self.client.post(
            reverse("user-list"),
            {"username": "maria", "password": "Outra#Senha99"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_protected_endpoint_requires_token(self):
        response = self.client.get(reverse("studyschedule-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_endpoint_returns_authenticated_user(self):
        user = User.objects.create_user(username="ana", password="Concurso#2025")
        self.client.force_authenticate(user)
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"id": user.id, "username": "ana"})
