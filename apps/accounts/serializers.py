"""Serializers for the accounts application."""

from djoser.serializers import (
    UserCreateSerializer as BaseUserCreateSerializer,
    UserSerializer as BaseUserSerializer,
)

from .models import User


class UserSerializer(BaseUserSerializer):
    """Dados públicos do usuário autenticado."""

    class Meta(BaseUserSerializer.Meta):
        model = User
        fields = ["id", "username"]
        read_only_fields = ["id", "username"]


class UserCreateSerializer(BaseUserCreateSerializer):
    class Meta(BaseUserCreateSerializer.Meta):
        model = User
        fields = ["id", "username", "password"]
