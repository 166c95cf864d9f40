# apps/scheduling/services.py

import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.core.exceptions import EditalAnalysisError, ProcessingError
from apps.core.services import edital_analyzer, llm_service
from apps.documents.models import PdfDocument

from .models import StudySchedule, StudySession

logger = logging.getLogger(__name__)

MAX_AI_HOURS_PER_DAY = 12
STREAK_LOOKBACK_DAYS = 30

SOURCE_AI = 'ia'
SOURCE_HEURISTIC = 'heuristica'


def days_until(exam_date: date, today: Optional[date] = None) -> int:
    """Dias inteiros entre hoje e a prova. A prova precisa ser no futuro."""
    today = today or timezone.localdate()
    days = (exam_date - today).days
    if days <= 0:
        raise ValidationError({"exam_date": "Data do concurso deve ser futura."})
    return days


def calculate_hours_per_day(total_hours: float, days_until_exam: int) -> int:
    """Horas diárias necessárias, limitadas a 12h (e nunca abaixo de 1h)."""
    return max(1, min(math.ceil(total_hours / days_until_exam), MAX_AI_HOURS_PER_DAY))


def synthesize_schedule(
    user,
    analysis: Dict[str, Any],
    exam_date: date,
    title: Optional[str] = None,
    edital_pdf: Optional[PdfDocument] = None,
    today: Optional[date] = None,
    description_prefix: str = '',
) -> Tuple[StudySchedule, Dict[str, Any]]:
    """
    Transforma uma análise de edital em um cronograma salvo.

    Returns:
        O cronograma criado e um resumo com 'subjects', 'topics',
        'days_until_exam' e 'total_estimated_hours'.

    Raises:
        ValidationError: a data da prova não é futura.
        django.core.exceptions.ValidationError: o cronograma fere as regras do modelo.
    """
    today = today or timezone.localdate()
    days_until_exam = days_until(exam_date, today)

    total_estimated_hours = sum(analysis['hours_per_subject'].values())
    hours_per_day = calculate_hours_per_day(total_estimated_hours, days_until_exam)

    subjects = analysis['subjects']
    max_title = StudySchedule._meta.get_field('title').max_length
    title = (title or f"Cronograma - {', '.join(subjects)}")[:max_title]
    description = (
        f"{description_prefix}Cronograma gerado automaticamente baseado no edital. "
        f"{days_until_exam} dias até o concurso."
    )

    schedule = StudySchedule(
        user=user,
        title=title,
        description=description,
        subjects=subjects,
        start_date=today,
        end_date=exam_date,
        hours_per_day=hours_per_day,
        exam_date=exam_date,
        edital_pdf=edital_pdf,
        weekly_plan=analysis['weekly_plan'],
        is_ai_generated=True,
    )
    schedule.full_clean()
    schedule.save()

    summary = {
        "subjects": subjects,
        "topics": analysis['topics'],
        "days_until_exam": days_until_exam,
        "total_estimated_hours": total_estimated_hours,
    }
    return schedule, summary


def analyze_edital_with_fallback(pdf_bytes: bytes, filename: str, exam_date: date) -> Tuple[Dict[str, Any], str]:
    """
    Tenta a análise pelo modelo de linguagem; em qualquer falha dele,
    usa a análise heurística pelo nome do arquivo. Sem novas tentativas.
    """
    try:
        text = llm_service.extract_text(pdf_bytes)
        analysis = llm_service.analyze_edital(text, exam_date)
        return analysis, SOURCE_AI
    except EditalAnalysisError as e:
        logger.warning("Análise por IA indisponível (%s). Usando análise heurística para '%s'.", e, filename)
        return edital_analyzer.generate_basic_analysis(filename, exam_date), SOURCE_HEURISTIC


def generate_schedule_from_edital(user, edital_file, exam_date: date, title: Optional[str] = None) -> Dict[str, Any]:
    """
    Fluxo completo: lê o PDF do edital, analisa (IA ou heurística),
    salva o PDF e o cronograma numa única transação.

    Returns:
        {"schedule": StudySchedule, "analysis": {..., "edital_pdf": PdfDocument, "source": str}}
    """
    today = timezone.localdate()
    days_until(exam_date, today)

    filename = edital_file.name
    try:
        edital_file.seek(0)
        pdf_bytes = edital_file.read()
        edital_file.seek(0)

        analysis, source = analyze_edital_with_fallback(pdf_bytes, filename, exam_date)
        description_prefix = ''
        if source == SOURCE_HEURISTIC:
            description_prefix = f"{edital_analyzer.describe_edital_filename(filename)} "

        with transaction.atomic():
            edital_pdf = PdfDocument.objects.create(
                user=user,
                title=title or f"Edital - {filename}",
                filename=filename,
                file=edital_file,
            )
            schedule, summary = synthesize_schedule(
                user,
                analysis,
                exam_date,
                title=title,
                edital_pdf=edital_pdf,
                today=today,
                description_prefix=description_prefix,
            )
    except ValidationError:
        raise
    except Exception as e:
        logger.error("Erro na geração de cronograma por IA: %s", e, exc_info=True)
        raise ProcessingError() from e

    logger.info(
        "Cronograma %s gerado (%s) para o usuário %s com %d matérias.",
        schedule.id, source, user.pk, len(summary["subjects"]),
    )
    summary.update({"edital_pdf": edital_pdf, "source": source})
    return {"schedule": schedule, "analysis": summary}


def compute_user_stats(user, today: Optional[date] = None) -> Dict[str, int]:
    """
    Total de horas estudadas, número de sessões e sequência atual de dias
    seguidos com estudo (terminando hoje, limitada a 30 dias).
    """
    today = today or timezone.localdate()
    sessions = StudySession.objects.for_user(user)

    total_minutes = 0
    completed_sessions = 0
    study_dates = set()
    for duration, completed_at in sessions.values_list('duration', 'completed_at'):
        total_minutes += duration
        completed_sessions += 1
        study_dates.add(timezone.localtime(completed_at).date())

    current_streak = 0
    cursor = today
    while current_streak < STREAK_LOOKBACK_DAYS and cursor in study_dates:
        current_streak += 1
        cursor -= timedelta(days=1)

    return {
        "total_hours": math.floor(total_minutes / 60 + 0.5),
        "completed_sessions": completed_sessions,
        "current_streak": current_streak,
    }
