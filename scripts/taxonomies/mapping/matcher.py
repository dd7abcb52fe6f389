"""
Búsqueda de categorías por texto.

Puntuación por niveles (no acumulables):
- 100: el nombre coincide exactamente con la consulta
- 50: el nombre empieza por la consulta
- 30: el nombre contiene la consulta
- 10: solo la ruta completa contiene la consulta

Más un bonus de hasta 20 puntos que favorece las rutas cortas.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..models import FlatCategory, ScoredCandidate

EXACT_SCORE = 100
PREFIX_SCORE = 50
CONTAINS_SCORE = 30
PATH_SCORE = 10
MAX_PATH_BONUS = 20

DEFAULT_LIMIT = 10

_SEGMENT_RE = re.compile(r"\s*[|>]\s*")


def path_segments(full_path: str) -> int:
    """Número de niveles de una ruta ("A | B" o "A > B")."""
    return len([part for part in _SEGMENT_RE.split(full_path) if part])


def path_bonus(full_path: str) -> int:
    """Bonus por ruta corta: 20 menos 2 puntos por cada nivel extra."""
    segments = max(1, path_segments(full_path))
    return max(0, MAX_PATH_BONUS - 2 * (segments - 1))


def score_category(category: FlatCategory, query: str) -> int:
    """
    Calcula la puntuación de una categoría para una consulta.

    Args:
        category: Categoría candidata.
        query: Consulta ya normalizada (minúsculas, sin espacios extremos).

    Returns:
        Puntuación (0 si no hay coincidencia).
    """
    if not query:
        return 0

    name = category.name.lower()

    if name == query:
        score = EXACT_SCORE
    elif name.startswith(query):
        score = PREFIX_SCORE
    elif query in name:
        score = CONTAINS_SCORE
    elif query in category.full_path.lower():
        score = PATH_SCORE
    else:
        return 0

    return score + path_bonus(category.full_path)


def rank_categories(
    categories: Iterable[FlatCategory],
    query: str,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[ScoredCandidate]:
    """
    Ordena las categorías por relevancia para la consulta.

    El orden es estable: a igual puntuación se respeta el orden original.

    Args:
        categories: Categorías donde buscar.
        query: Texto a buscar.
        limit: Máximo de resultados (None = sin límite).

    Returns:
        Candidatas con puntuación > 0, de mayor a menor.
    """
    query = (query or "").lower().strip()
    if not query:
        return []

    results = []
    for category in categories:
        score = score_category(category, query)
        if score > 0:
            results.append(ScoredCandidate(category=category, score=score))

    # Ordenar por score descendente
    results.sort(key=lambda c: c.score, reverse=True)
    return results if limit is None else results[:limit]


def search(
    categories: Iterable[FlatCategory],
    query: str,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[FlatCategory]:
    """
    Busca categorías por nombre o ruta.

    Args:
        categories: Categorías donde buscar.
        query: Texto a buscar.
        limit: Máximo de resultados.

    Returns:
        Lista de categorías ordenadas por relevancia.
    """
    return [c.category for c in rank_categories(categories, query, limit)]
