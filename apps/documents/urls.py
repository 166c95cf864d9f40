# apps/documents/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PdfDocumentViewSet

router = DefaultRouter()
router.register(r'pdfs', PdfDocumentViewSet, basename='pdfdocument')

urlpatterns = [
    path('', include(router.urls)),
]
