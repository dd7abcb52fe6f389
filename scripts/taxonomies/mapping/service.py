"""
Servicio de mapeo de categorías.

Punto de entrada para la capa que sube los ficheros de productos:
valida la petición, obtiene las taxonomías de la caché, filtra los
productos ya mapeados, ejecuta el pipeline y calcula estadísticas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..cache import TaxonomyCache
from ..errors import MappingError
from ..models import FlatCategory, MappedProduct
from ..validators import filter_products_needing_mapping, validate_platforms, validate_request
from .matcher import DEFAULT_LIMIT, search
from .pipeline import DEFAULT_AI_TIMEOUT, BatchMapper
from .progress import ProgressCallback
from .verifier import CategoryVerifier

logger = logging.getLogger(__name__)


@dataclass
class MappingStats:
    """Estadísticas de una ejecución de mapeo."""

    total: int
    processed: int
    mapped: Dict[str, int] = field(default_factory=dict)
    unavailable: List[str] = field(default_factory=list)
    interrupted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "mapped": dict(self.mapped),
            "unavailable": list(self.unavailable),
            "interrupted": self.interrupted,
        }


@dataclass
class MappingResult:
    """Productos mapeados más estadísticas."""

    products: List[MappedProduct]
    stats: MappingStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "products": [p.to_dict() for p in self.products],
            "stats": self.stats.to_dict(),
        }


def compute_stats(
    total: int,
    mapped_products: Sequence[MappedProduct],
    platforms: Sequence[str],
) -> MappingStats:
    """Cuenta los productos con categoría en cada plataforma."""
    return MappingStats(
        total=total,
        processed=len(mapped_products),
        mapped={
            platform: sum(1 for p in mapped_products if p.category_id(platform) is not None)
            for platform in platforms
        },
    )


def map_products(
    products: Any,
    platforms: Any,
    cache: TaxonomyCache,
    use_ai: bool = True,
    overwrite_existing: bool = False,
    verifier: Optional[CategoryVerifier] = None,
    on_progress: Optional[ProgressCallback] = None,
    ai_timeout: float = DEFAULT_AI_TIMEOUT,
    time_budget: Optional[float] = None,
) -> MappingResult:
    """
    Mapea una petición completa de productos.

    Args:
        products: Productos (diccionarios o ProductForMapping).
        platforms: Plataformas a mapear.
        cache: Caché de taxonomías de la aplicación.
        use_ai: Si True, las decisiones dudosas se consultan a la IA.
        overwrite_existing: Si True, se remapean productos ya mapeados.
        verifier: Capacidad de verificación con IA.
        on_progress: Callback (procesados, total).
        ai_timeout: Timeout por consulta a la IA.
        time_budget: Segundos disponibles para el lote.

    Returns:
        Productos mapeados y estadísticas.

    Raises:
        InvalidRequestError: Si la petición está mal formada.
        MappingError: Si el lote falla de forma inesperada.
    """
    products, platforms = validate_request(products, platforms)

    taxonomies = cache.get(platforms)
    unavailable = [p for p in platforms if not taxonomies.get(p)]
    for platform in unavailable:
        logger.warning(
            f"Taxonomía de {platform} no disponible "
            f"({cache.status(platform)}: {cache.last_error(platform) or 'sin categorías'})"
        )

    to_map = filter_products_needing_mapping(products, platforms, overwrite_existing)
    logger.info(f"Productos a mapear: {len(to_map)}/{len(products)}")

    mapper = BatchMapper(
        taxonomies,
        platforms,
        use_ai=use_ai,
        verifier=verifier,
        ai_timeout=ai_timeout,
    )

    try:
        mapped = mapper.map_products(to_map, on_progress=on_progress, time_budget=time_budget)
    except Exception as e:
        logger.exception("Error en el mapeo de categorías")
        raise MappingError("Error interno en el mapeo de categorías", detail=str(e)) from e

    stats = compute_stats(len(products), mapped, platforms)
    stats.unavailable = unavailable
    stats.interrupted = mapper.interrupted

    logger.info(
        f"Mapeados: {stats.processed}/{stats.total} | "
        + " | ".join(f"{p}: {n}" for p, n in stats.mapped.items())
    )
    return MappingResult(products=mapped, stats=stats)


def list_categories(cache: TaxonomyCache, platform: str) -> List[FlatCategory]:
    """Categorías de una plataforma (descarga si no están en caché)."""
    platform = validate_platforms([platform])[0]
    return cache.get([platform])[platform]


def search_categories(
    cache: TaxonomyCache,
    platform: str,
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> List[FlatCategory]:
    """Búsqueda puntual de categorías (p. ej. para corrección manual)."""
    return search(list_categories(cache, platform), query, limit)
