"""Funções auxiliares para customização do schema OpenAPI via drf-spectacular."""
from __future__ import annotations

from typing import Any, Dict

# Prefixo de rota -> tag exibida no Swagger/Redoc
PATH_TAGS = (
    ('/api/accounts/auth/jwt/', 'Autenticação JWT'),
    ('/api/accounts/', 'Contas'),
    ('/api/documents/', 'PDFs'),
    ('/api/scheduling/schedules/ai-generate/', 'Cronogramas gerados por IA'),
    ('/api/scheduling/schedules/', 'Cronogramas'),
    ('/api/scheduling/sessions/', 'Sessões de estudo'),
    ('/api/scheduling/statistics/', 'Estatísticas'),
)


def tag_for_path(path: str) -> str | None:
    for prefix, tag in PATH_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def tag_schema_paths(result: Dict[str, Any], generator: Any, request: Any | None, public: bool) -> Dict[str, Any]:
    """Substitui as tags automáticas pelo agrupamento funcional da API."""
    paths = result.get('paths', {})
    for path, path_item in paths.items():
        tag = tag_for_path(path)
        if tag is None or not isinstance(path_item, dict):
            continue

        for operation in path_item.values():
            if not isinstance(operation, dict):
                continue
            operation['tags'] = [tag]

    return result
