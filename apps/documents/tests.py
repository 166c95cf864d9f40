# apps/documents/tests.py

import shutil
import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.documents.models import PdfDocument

User = get_user_model()

PDF_BYTES = b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n%%EOF"
MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class PdfDocumentAPITests(APITestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.user = User.objects.create_user("leitor", password="p")
        self.client.force_authenticate(self.user)
        self.other = User.objects.create_user("outro", password="p")
        self.list_url = reverse("pdfdocument-list")

    def test_upload_defaults_title_to_filename(self):
        upload = SimpleUploadedFile("apostila.pdf", PDF_BYTES, content_type="application/pdf")
        resp = self.client.post(self.list_url, {"pdf": upload}, format="multipart")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["title"], "apostila.pdf")
        self.assertEqual(resp.data["filename"], "apostila.pdf")
        self.assertEqual(resp.data["last_read_page"], 1)
        document = PdfDocument.objects.get(id=resp.data["id"])
        self.assertEqual(document.user, self.user)
        self.assertTrue(document.file.name.startswith("pdfs/"))

    def test_upload_with_title(self):
        upload = SimpleUploadedFile("a.pdf", PDF_BYTES, content_type="application/pdf")
        resp = self.client.post(self.list_url, {"pdf": upload, "title": "Lei 8.112"}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["title"], "Lei 8.112")

    def test_upload_without_file_returns_400(self):
        resp = self.client.post(self.list_url, {"title": "Sem arquivo"}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("pdf", resp.data)

    def test_upload_rejects_non_pdf(self):
        upload = SimpleUploadedFile("foto.png", b"\x89PNG", content_type="image/png")
        resp = self.client.post(self.list_url, {"pdf": upload}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(MAX_PDF_UPLOAD_SIZE=10)
    def test_upload_rejects_oversized_pdf(self):
        upload = SimpleUploadedFile("grande.pdf", PDF_BYTES, content_type="application/pdf")
        resp = self.client.post(self.list_url, {"pdf": upload}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("tamanho máximo", str(resp.data))

    def test_update_last_read_page(self):
        document = PdfDocument.objects.create(user=self.user, title="Apostila", filename="apostila.pdf")
        url = reverse("pdfdocument-detail", args=[document.id])

        resp = self.client.patch(url, {"last_read_page": 42}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["last_read_page"], 42)

        invalid = self.client.patch(url, {"last_read_page": 0}, format="json")
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filename_is_read_only(self):
        document = PdfDocument.objects.create(user=self.user, title="Apostila", filename="apostila.pdf")
        url = reverse("pdfdocument-detail", args=[document.id])
        self.client.patch(url, {"filename": "outro.pdf"}, format="json")
        document.refresh_from_db()
        self.assertEqual(document.filename, "apostila.pdf")

    def test_list_and_access_are_scoped_to_user(self):
        own = PdfDocument.objects.create(user=self.user, title="Meu", filename="meu.pdf")
        alheio = PdfDocument.objects.create(user=self.other, title="Alheio", filename="alheio.pdf")

        resp = self.client.get(self.list_url)
        self.assertEqual([item["id"] for item in resp.data], [own.id])

        detail = reverse("pdfdocument-detail", args=[alheio.id])
        self.assertEqual(self.client.get(detail).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(detail).status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        document = PdfDocument.objects.create(user=self.user, title="Apostila", filename="apostila.pdf")
        resp = self.client.delete(reverse("pdfdocument-detail", args=[document.id]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PdfDocument.objects.filter(id=document.id).exists())
