# apps/core/services/llm_service.py

import base64
import json
import logging
import math
from datetime import date
from typing import Any, Dict, List

import requests
from django.conf import settings

from apps.core.exceptions import AnalysisError, ExtractionError

logger = logging.getLogger(__name__)

# --- Configuração Central da API ---

SYSTEM_PROMPT = (
    "Você é um especialista em concursos públicos brasileiros. "
    "Analise editais e crie cronogramas de estudo eficientes."
)

EXTRACTION_PROMPT = (
    "Extraia todo o texto deste PDF de edital de concurso público. Mantenha a formatação e "
    "estrutura original. Foque especialmente em seções sobre matérias, conteúdo programático, "
    "e requisitos da prova."
)


def _headers() -> Dict[str, str]:
    # Lido a cada chamada para respeitar override_settings nos testes
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.LLM_API_KEY}",
    }


# --- Função Auxiliar Genérica para Chamadas à API ---

def _call_llm_api(messages: List[Dict[str, Any]], is_json_output: bool = False, **options) -> str:
    """
    Faz uma única chamada ao endpoint de chat completions e devolve o conteúdo
    da primeira escolha. Não há novas tentativas: quem chama decide o fallback.

    Raises:
        requests.RequestException: erro de rede, timeout ou status HTTP de erro.
        ValueError: corpo que não é JSON ou sem o campo de conteúdo.
    """
    payload = {
        "model": settings.LLM_MODEL,
        "messages": messages,
        **options,
    }
    if is_json_output:
        payload["response_format"] = {"type": "json_object"}

    response = requests.post(
        settings.LLM_API_URL,
        headers=_headers(),
        json=payload,
        timeout=settings.LLM_TIMEOUT,
    )
    response.raise_for_status()

    try:
        body = response.json()
        return body['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Resposta da API sem conteúdo: {e}") from e


# --- Implementação dos Serviços Específicos ---

def extract_text(pdf_bytes: bytes) -> str:
    """
    Extrai o texto de um PDF enviando o arquivo (em base64) ao modelo.

    Raises:
        ExtractionError: chave ausente, falha na chamada ou texto vazio.
    """
    if not settings.LLM_API_KEY:
        raise ExtractionError("Chave da API do modelo de linguagem não configurada.")

    encoded = base64.b64encode(pdf_bytes).decode('ascii')
    messages = [{
        "role": "user",
        "content": [
            {"type": "text", "text": EXTRACTION_PROMPT},
            {"type": "image_url", "image_url": {"url": f"data:application/pdf;base64,{encoded}"}},
        ],
    }]

    try:
        content = _call_llm_api(messages, max_tokens=4000)
    except (requests.RequestException, ValueError) as e:
        logger.error("Erro na extração de texto do PDF: %s", e)
        raise ExtractionError("Falha ao extrair texto do PDF.") from e

    if not content or not content.strip():
        raise ExtractionError("Não foi possível extrair texto do PDF.")

    return content


def _build_analysis_prompt(text: str, exam_date: date) -> str:
    return f"""
Analise este edital de concurso público em português e extraia as seguintes informações:

1. MATÉRIAS: Liste todas as matérias/disciplinas cobradas
2. TÓPICOS: Para cada matéria, liste os principais tópicos/conteúdos
3. CRONOGRAMA: Considerando a data da prova ({exam_date.isoformat()}), crie um plano de estudos distribuído pelos dias da semana

EDITAL:
{text}

Responda APENAS em formato JSON válido com esta estrutura:
{{
  "subjects": ["matéria1", "matéria2"],
  "topics": {{"matéria1": ["tópico1", "tópico2"]}},
  "priority": ["matéria com maior peso"],
  "hoursPerSubject": {{"matéria1": 20, "matéria2": 15}},
  "weeklyPlan": {{
    "Segunda": [{{"subject": "matéria", "topics": ["tópico1"], "hours": 2}}],
    "Sábado": [{{"subject": "Revisão Geral", "topics": ["revisão geral"], "hours": 4}}],
    "Domingo": [{{"subject": "Simulados", "topics": ["testes práticos"], "hours": 3}}]
  }}
}}

IMPORTANTE:
- Foque apenas em matérias realmente cobradas no edital
- Distribua o estudo de forma equilibrada de Segunda a Domingo
- Considere fins de semana para revisão e simulados
- Seja específico com os tópicos de cada matéria
"""


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _is_hours(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


def validate_analysis(data: Any) -> Dict[str, Any]:
    """
    Confere a estrutura devolvida pelo modelo e normaliza as chaves para snake_case.

    Raises:
        AnalysisError: estrutura inválida ou nenhuma matéria encontrada.
    """
    if not isinstance(data, dict):
        raise AnalysisError("Análise inválida: a resposta não é um objeto JSON.")

    subjects = data.get('subjects')
    if not _is_string_list(subjects) or not subjects:
        raise AnalysisError("Análise inválida: nenhuma matéria encontrada.")
    if not all(subject.strip() for subject in subjects):
        raise AnalysisError("Análise inválida: matéria sem nome.")

    topics = data.get('topics', {})
    if not isinstance(topics, dict) or not all(_is_string_list(items) for items in topics.values()):
        raise AnalysisError("Análise inválida: tópicos mal formados.")

    priority = data.get('priority', subjects[:3])
    if not _is_string_list(priority):
        raise AnalysisError("Análise inválida: prioridades mal formadas.")

    # json.loads aceita Infinity e NaN; horas precisam ser finitas e não negativas
    hours = data.get('hoursPerSubject')
    if not isinstance(hours, dict) or not all(_is_hours(value) for value in hours.values()):
        raise AnalysisError("Análise inválida: horas por matéria mal formadas.")

    weekly_plan = data.get('weeklyPlan')
    if not isinstance(weekly_plan, dict):
        raise AnalysisError("Análise inválida: plano semanal ausente.")
    for day, blocks in weekly_plan.items():
        if not isinstance(blocks, list):
            raise AnalysisError(f"Análise inválida: plano de '{day}' não é uma lista.")
        for block in blocks:
            if not (
                isinstance(block, dict)
                and isinstance(block.get('subject'), str)
                and block['subject'].strip()
                and _is_string_list(block.get('topics'))
                and _is_hours(block.get('hours'))
            ):
                raise AnalysisError(f"Análise inválida: bloco de estudo mal formado em '{day}'.")
    if not any(weekly_plan.values()):
        raise AnalysisError("Análise inválida: plano semanal vazio.")

    return {
        'subjects': subjects,
        'topics': topics,
        'priority': priority,
        'hours_per_subject': hours,
        'weekly_plan': weekly_plan,
    }


def analyze_edital(text: str, exam_date: date) -> Dict[str, Any]:
    """
    Pede ao modelo as matérias, tópicos e a distribuição semanal do edital.

    Returns:
        Dicionário com 'subjects', 'topics', 'priority', 'hours_per_subject'
        e 'weekly_plan'.

    Raises:
        AnalysisError: falha na chamada, JSON ilegível ou estrutura inválida.
    """
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": _build_analysis_prompt(text, exam_date)},
    ]

    try:
        content = _call_llm_api(messages, is_json_output=True, temperature=0.3)
        data = json.loads(content)
    except (requests.RequestException, ValueError) as e:
        # json.JSONDecodeError é subclasse de ValueError
        logger.error("Erro na análise do edital: %s", e)
        raise AnalysisError("Falha ao analisar o edital.") from e

    return validate_analysis(data)
