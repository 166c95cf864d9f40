# tests/integration/test_documents.py
import pytest
from django.urls import reverse
from rest_framework import status

from apps.documents.models import PdfDocument

@pytest.mark.django_db
class TestPdfDocumentViewSet:
    """Testes do ViewSet de PDFs."""

    def test_upload_and_list(self, authenticated_client, user, edital_upload):
        url = reverse('pdfdocument-list')

        upload = authenticated_client.post(url, {'pdf': edital_upload('lei_8112.pdf')}, format='multipart')
        listing = authenticated_client.get(url)

        assert upload.status_code == status.HTTP_201_CREATED
        assert listing.status_code == status.HTTP_200_OK
        assert [item['filename'] for item in listing.data] == ['lei_8112.pdf']
        assert PdfDocument.objects.get(user=user).last_read_page == 1

    def test_save_reading_progress(self, authenticated_client, pdf_document):
        url = reverse('pdfdocument-detail', args=[pdf_document.id])

        response = authenticated_client.patch(url, {'last_read_page': 12}, format='json')

        assert response.status_code == status.HTTP_200_OK
        pdf_document.refresh_from_db()
        assert pdf_document.last_read_page == 12

    def test_delete_pdf_keeps_schedule(self, authenticated_client, pdf_document, study_schedule):
        study_schedule.edital_pdf = pdf_document
        study_schedule.save()

        response = authenticated_client.delete(reverse('pdfdocument-detail', args=[pdf_document.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        study_schedule.refresh_from_db()
        assert study_schedule.edital_pdf is None

    def test_other_user_pdf_not_found(self, api_client, other_user, pdf_document):
        api_client.force_authenticate(other_user)

        response = api_client.get(reverse('pdfdocument-detail', args=[pdf_document.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
