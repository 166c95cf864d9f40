"""
URL configuration for config project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
# config/urls.py

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView


urlpatterns = [
    # 1. Rota para a interface de administração do Django
    path('admin/', admin.site.urls),

    # 2. Registro e autenticação JWT (prefixo: /api/accounts/)
    path('api/accounts/', include('apps.accounts.urls')),

    # 3. PDFs enviados pelo usuário (prefixo: /api/documents/)
    path('api/documents/', include('apps.documents.urls')),

    # 4. Cronogramas, sessões de estudo, estatísticas e geração por IA
    # (prefixo: /api/scheduling/)
    path('api/scheduling/', include('apps.scheduling.urls')),

    # Documentação da API com drf-spectacular
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

# Serve os PDFs enviados em ambiente de desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
