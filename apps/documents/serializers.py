# apps/documents/serializers.py

from rest_framework import serializers

from .models import PdfDocument
from .validators import validate_pdf_upload


class PdfDocumentSerializer(serializers.ModelSerializer):
    """Leitura e atualização de um PDF (título e página atual)."""

    class Meta:
        model = PdfDocument
        fields = ['id', 'title', 'filename', 'file', 'uploaded_at', 'last_read_page']
        read_only_fields = ['id', 'filename', 'file', 'uploaded_at']


class PdfUploadSerializer(serializers.Serializer):
    """Entrada do upload: o arquivo em 'pdf' e um título opcional."""

    pdf = serializers.FileField(validators=[validate_pdf_upload])
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def create(self, validated_data):
        uploaded = validated_data['pdf']
        return PdfDocument.objects.create(
            user=self.context['request'].user,
            title=validated_data.get('title') or uploaded.name,
            filename=uploaded.name,
            file=uploaded,
        )
