# apps/documents/views.py

from rest_framework import status, viewsets
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import PdfDocument
from .serializers import PdfDocumentSerializer, PdfUploadSerializer


class PdfDocumentViewSet(viewsets.ModelViewSet):
    """
    API para os PDFs do usuário.
    O upload é multipart (campo 'pdf'); PUT/PATCH atualizam título e última página lida.
    """
    serializer_class = PdfDocumentSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def get_queryset(self):
        return PdfDocument.objects.for_user(self.request.user)

    def get_serializer_class(self):
        if self.action == 'create':
            return PdfUploadSerializer
        return PdfDocumentSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = serializer.save()

        response_serializer = PdfDocumentSerializer(document, context={'request': request})
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)
