# apps/core/services/edital_analyzer.py
"""
Análise heurística de editais, usada quando o modelo de linguagem
não está disponível ou devolve dados inválidos.

Tudo aqui é determinístico e sem I/O: as matérias são inferidas
apenas pelo nome do arquivo.
"""

import unicodedata
from datetime import date
from typing import Any, Dict, List, Tuple

BASELINE_SUBJECTS = ['Português', 'Matemática', 'Atualidades']

# Avaliadas em ordem; a primeira regra com alguma palavra-chave no nome do arquivo vence.
KEYWORD_RULES: Tuple[Tuple[Tuple[str, ...], List[str]], ...] = (
    (('trt', 'trabalho'), ['Direito do Trabalho', 'Direito Constitucional', 'Direito Administrativo']),
    (('trf', 'federal'), ['Direito Constitucional', 'Direito Administrativo', 'Direito Civil']),
    (('tecnico',), ['Informática', 'Raciocínio Lógico']),
    (('analista',), ['Direito Constitucional', 'Direito Administrativo', 'Informática', 'Raciocínio Lógico']),
)
DEFAULT_SUBJECTS = ['Informática', 'Raciocínio Lógico', 'Direito Constitucional']

SUBJECT_TOPICS: Dict[str, List[str]] = {
    'Português': [
        'Interpretação de textos',
        'Gramática',
        'Ortografia',
        'Sintaxe',
        'Semântica',
        'Redação oficial',
    ],
    'Matemática': [
        'Aritmética',
        'Álgebra',
        'Geometria',
        'Estatística',
        'Matemática financeira',
        'Razão e proporção',
    ],
    'Raciocínio Lógico': [
        'Lógica proposicional',
        'Sequências',
        'Análise combinatória',
        'Probabilidade',
        'Problemas aritméticos',
    ],
    'Informática': [
        'Windows',
        'Word',
        'Excel',
        'PowerPoint',
        'Internet',
        'Segurança da informação',
    ],
    'Direito Constitucional': [
        'Princípios fundamentais',
        'Direitos e garantias fundamentais',
        'Organização do Estado',
        'Administração Pública',
        'Controle de constitucionalidade',
    ],
    'Direito Administrativo': [
        'Princípios administrativos',
        'Atos administrativos',
        'Processo administrativo',
        'Licitações e contratos',
        'Servidores públicos',
    ],
}
GENERIC_TOPICS = ['Conteúdo programático', 'Exercícios práticos']

WEEK_DAYS = ['Segunda', 'Terça', 'Quarta', 'Quinta', 'Sexta', 'Sábado', 'Domingo']
WORK_DAYS = WEEK_DAYS[:5]

PRIORITY_COUNT = 3
CORE_SUBJECT_HOURS = 25
PRIORITY_SUBJECT_HOURS = 20
OTHER_SUBJECT_HOURS = 15
WEEKDAY_BLOCK_HOURS = 3
TOPICS_PER_DAY = 2

SATURDAY_BLOCK = {
    'subject': 'Revisão Geral',
    'topics': ['Revisão das matérias da semana', 'Resolução de exercícios'],
    'hours': 4,
}
SUNDAY_BLOCK = {
    'subject': 'Simulados',
    'topics': ['Simulados e provas anteriores', 'Análise de desempenho'],
    'hours': 3,
}

# Órgãos e cargos reconhecidos no nome do arquivo, usados só para descrever o edital.
INSTITUTION_HINTS = (
    ('trt', 'Tribunal Regional do Trabalho'),
    ('trf', 'Tribunal Regional Federal'),
    ('tjsp', 'Tribunal de Justiça de São Paulo'),
    ('prefeitura', 'Prefeitura Municipal'),
    ('governo', 'Governo do Estado'),
    ('federal', 'Órgão Federal'),
)
POSITION_HINTS = (
    ('analista', 'Cargo: Analista'),
    ('tecnico', 'Cargo: Técnico'),
    ('auxiliar', 'Cargo: Auxiliar'),
    ('escriturario', 'Cargo: Escriturário'),
)


def _normalize(filename: str) -> str:
    decomposed = unicodedata.normalize('NFKD', filename.lower())
    return ''.join(char for char in decomposed if not unicodedata.combining(char))


def infer_subjects(filename: str) -> List[str]:
    """Matérias básicas + as da primeira regra que casar com o nome do arquivo, sem repetição."""
    normalized = _normalize(filename)

    subjects = list(BASELINE_SUBJECTS)
    for keywords, extra_subjects in KEYWORD_RULES:
        if any(keyword in normalized for keyword in keywords):
            subjects.extend(extra_subjects)
            break
    else:
        subjects.extend(DEFAULT_SUBJECTS)

    return list(dict.fromkeys(subjects))


def estimate_hours(subjects: List[str], priority: List[str]) -> Dict[str, int]:
    hours = {}
    for subject in subjects:
        if subject in ('Português', 'Matemática'):
            hours[subject] = CORE_SUBJECT_HOURS
        elif subject in priority:
            hours[subject] = PRIORITY_SUBJECT_HOURS
        else:
            hours[subject] = OTHER_SUBJECT_HOURS
    return hours


def build_weekly_plan(subjects: List[str], topics: Dict[str, List[str]]) -> Dict[str, List[Dict[str, Any]]]:
    """Uma matéria por dia útil em rodízio; sábado de revisão e domingo de simulados."""
    weekly_plan: Dict[str, List[Dict[str, Any]]] = {day: [] for day in WEEK_DAYS}

    for day_index, day in enumerate(WORK_DAYS):
        subject = subjects[day_index % len(subjects)]
        topic_index = day_index // len(subjects)
        selected = topics.get(subject, [])[topic_index:topic_index + TOPICS_PER_DAY]
        weekly_plan[day].append({
            'subject': subject,
            'topics': selected or ['Estudo geral'],
            'hours': WEEKDAY_BLOCK_HOURS,
        })

    weekly_plan['Sábado'].append(dict(SATURDAY_BLOCK, topics=list(SATURDAY_BLOCK['topics'])))
    weekly_plan['Domingo'].append(dict(SUNDAY_BLOCK, topics=list(SUNDAY_BLOCK['topics'])))
    return weekly_plan


def generate_basic_analysis(filename: str, exam_date: date) -> Dict[str, Any]:
    """
    Gera uma análise completa a partir apenas do nome do arquivo.

    Args:
        filename: Nome original do PDF do edital.
        exam_date: Data da prova. Não altera a análise; a distribuição de
                   horas pelo período é feita na síntese do cronograma.

    Returns:
        Dicionário com 'subjects', 'topics', 'priority', 'hours_per_subject'
        e 'weekly_plan'.
    """
    subjects = infer_subjects(filename)
    topics = {subject: list(SUBJECT_TOPICS.get(subject, GENERIC_TOPICS)) for subject in subjects}
    priority = subjects[:PRIORITY_COUNT]

    return {
        'subjects': subjects,
        'topics': topics,
        'priority': priority,
        'hours_per_subject': estimate_hours(subjects, priority),
        'weekly_plan': build_weekly_plan(subjects, topics),
    }


def describe_edital_filename(filename: str) -> str:
    """Ex: 'Edital de concurso público. Tribunal Regional do Trabalho. Cargo: Técnico.'"""
    normalized = _normalize(filename)
    detected = [label for keyword, label in INSTITUTION_HINTS + POSITION_HINTS if keyword in normalized]
    if not detected:
        return 'Edital de concurso público.'
    return f"Edital de concurso público. {'. '.join(detected)}."
