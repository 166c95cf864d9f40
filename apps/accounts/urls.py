# apps/accounts/urls.py

from django.urls import path, include

urlpatterns = [
    # URLs geradas pelo Djoser para autenticação
    # Ex: /api/accounts/auth/jwt/create/ (login), /api/accounts/auth/users/ (registro)
    path('auth/', include('djoser.urls')),
    path('auth/', include('djoser.urls.jwt')),
]
