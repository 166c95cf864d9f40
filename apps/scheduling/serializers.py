# apps/scheduling/serializers.py

import math

from django.utils import timezone
from rest_framework import serializers

from apps.documents.serializers import PdfDocumentSerializer
from apps.documents.validators import validate_pdf_upload

from .models import StudySchedule, StudySession


def validate_weekly_plan(value):
    """Formato: {"Segunda": [{"subject": str, "topics": [str], "hours": número}], ...}"""
    if value is None:
        return value
    if not isinstance(value, dict):
        raise serializers.ValidationError("O plano semanal deve ser um objeto com os dias da semana.")
    for day, blocks in value.items():
        if not isinstance(blocks, list):
            raise serializers.ValidationError(f"O plano de '{day}' deve ser uma lista de blocos de estudo.")
        for block in blocks:
            if not isinstance(block, dict) or not isinstance(block.get('subject'), str):
                raise serializers.ValidationError(f"Bloco de estudo inválido em '{day}'.")
            topics = block.get('topics', [])
            if not isinstance(topics, list) or not all(isinstance(topic, str) for topic in topics):
                raise serializers.ValidationError(f"Os tópicos de '{day}' devem ser uma lista de textos.")
            hours = block.get('hours')
            if isinstance(hours, bool) or not isinstance(hours, (int, float)) or not math.isfinite(hours) or hours < 0:
                raise serializers.ValidationError(f"As horas de '{day}' devem ser um número positivo.")
    return value


class StudyScheduleSerializer(serializers.ModelSerializer):
    """
    Serializador para o modelo StudySchedule (Cronogramas de Estudo).
    """
    subjects = serializers.ListField(
        child=serializers.CharField(max_length=200),
        allow_empty=False,
    )
    weekly_plan = serializers.JSONField(
        required=False,
        allow_null=True,
        validators=[validate_weekly_plan],
    )

    class Meta:
        model = StudySchedule
        fields = [
            'id',
            'title',
            'description',
            'subjects',
            'start_date',
            'end_date',
            'hours_per_day',
            'created_at',
            'exam_date',
            'edital_pdf',
            'weekly_plan',
            'is_ai_generated',
        ]
        # O usuário é pego do contexto; a flag de IA só é definida pela geração automática
        read_only_fields = ['id', 'created_at', 'is_ai_generated']

    def validate_subjects(self, value):
        cleaned = [subject.strip() for subject in value if subject.strip()]
        if not cleaned:
            raise serializers.ValidationError("Informe ao menos uma matéria.")
        return cleaned

    def validate_edital_pdf(self, value):
        user = self.context['request'].user
        if value is not None and value.user != user:
            raise serializers.ValidationError("Você só pode vincular seus próprios PDFs.")
        return value

    def validate(self, data):
        start_date = data.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = data.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({"end_date": "A data de término deve ser posterior à data de início."})

        if self.instance is not None and self.instance.is_ai_generated:
            weekly_plan = data.get('weekly_plan', self.instance.weekly_plan)
            exam_date = data.get('exam_date', self.instance.exam_date)
            if not weekly_plan or not exam_date:
                raise serializers.ValidationError(
                    "Cronogramas gerados por IA precisam manter o plano semanal e a data da prova."
                )
        return data


class StudySessionSerializer(serializers.ModelSerializer):
    """
    Serializador para o modelo StudySession (Sessões de Estudo Concluídas).
    """
    class Meta:
        model = StudySession
        fields = ['id', 'schedule', 'subject', 'duration', 'completed_at']
        read_only_fields = ['id', 'completed_at']

    def validate_schedule(self, value):
        user = self.context['request'].user
        if value is not None and value.user != user:
            raise serializers.ValidationError("Você só pode registrar sessões nos seus próprios cronogramas.")
        return value


class StudySessionFilterSerializer(serializers.Serializer):
    """Valida o parâmetro ?limit= da listagem de sessões recentes."""
    limit = serializers.IntegerField(required=False, default=10, min_value=1, max_value=100)


class AIScheduleRequestSerializer(serializers.Serializer):
    """Entrada da geração de cronograma a partir do PDF de um edital."""

    edital_pdf = serializers.FileField(
        validators=[validate_pdf_upload],
        error_messages={'required': "PDF do edital é obrigatório."},
    )
    exam_date = serializers.DateField(
        input_formats=['%Y-%m-%d'],
        error_messages={
            'required': "Data do concurso é obrigatória.",
            'invalid': "Data do concurso inválida. Use o formato AAAA-MM-DD.",
        },
    )
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate_exam_date(self, value):
        if value <= timezone.localdate():
            raise serializers.ValidationError("Data do concurso deve ser futura.")
        return value


class AIScheduleAnalysisSerializer(serializers.Serializer):
    subjects = serializers.ListField(child=serializers.CharField())
    topics = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))
    days_until_exam = serializers.IntegerField()
    total_estimated_hours = serializers.FloatField()
    edital_pdf = PdfDocumentSerializer()
    source = serializers.CharField()


class AIScheduleResponseSerializer(serializers.Serializer):
    schedule = StudyScheduleSerializer()
    analysis = AIScheduleAnalysisSerializer()


class UserStatsSerializer(serializers.Serializer):
    total_hours = serializers.IntegerField()
    completed_sessions = serializers.IntegerField()
    current_streak = serializers.IntegerField()
