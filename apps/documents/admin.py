# apps/documents/admin.py

from django.contrib import admin
from .models import PdfDocument

@admin.register(PdfDocument)
class PdfDocumentAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'filename', 'uploaded_at', 'last_read_page')
    list_filter = ('user',)
    search_fields = ('title', 'filename')
