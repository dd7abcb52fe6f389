"""
Módulo de mapeo de productos a categorías de las plataformas.

Proporciona búsqueda por texto, verificación con IA y mapeo por lotes.
"""

from .matcher import rank_categories, score_category, search
from .pipeline import BatchMapper, batch_map_products, find_candidates
from .service import (
    MappingResult,
    MappingStats,
    list_categories,
    map_products,
    search_categories,
)
from .verifier import CategoryVerifier, OpenAIVerifier, get_verifier

__all__ = [
    "rank_categories",
    "score_category",
    "search",
    "BatchMapper",
    "batch_map_products",
    "find_candidates",
    "MappingResult",
    "MappingStats",
    "list_categories",
    "map_products",
    "search_categories",
    "CategoryVerifier",
    "OpenAIVerifier",
    "get_verifier",
]
