# apps/scheduling/admin.py

from django.contrib import admin
from .models import StudySchedule, StudySession

@admin.register(StudySchedule)
class StudyScheduleAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'start_date', 'end_date', 'hours_per_day', 'is_ai_generated')
    list_filter = ('user', 'is_ai_generated')
    search_fields = ('title', 'description')

@admin.register(StudySession)
class StudySessionAdmin(admin.ModelAdmin):
    list_display = ('user', 'subject', 'duration', 'completed_at', 'schedule')
    list_filter = ('user', 'completed_at')
    search_fields = ('subject',)
