# apps/scheduling/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    StudyScheduleViewSet,
    StudySessionViewSet,
    StudyStatisticsAPIView,
)

router = DefaultRouter()
router.register(r'schedules', StudyScheduleViewSet, basename='studyschedule')
router.register(r'sessions', StudySessionViewSet, basename='studysession')

urlpatterns = [
    path('statistics/', StudyStatisticsAPIView.as_view(), name='study-statistics'),

    # Inclui as URLs para gerenciar Cronogramas e Sessões (CRUD + ai-generate)
    path('', include(router.urls)),
]
