from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """Modelo de usuário principal do sistema.

    A identidade vem do login (JWT); nenhuma rota usa um id de usuário fixo.
    """

    class Meta:
        verbose_name = "Usuário"
        verbose_name_plural = "Usuários"

    def __str__(self) -> str:  # pragma: no cover - representação simples
        return self.username
