"""
Descarga concurrente de taxonomías.

Cada plataforma se descarga en su propio hilo y falla de forma
independiente: un error en una no bloquea ni cancela a las demás.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from .http_client import HttpClient
from .models import PLATFORMS, FetchResult, FlatCategory
from .sources import get_source

logger = logging.getLogger(__name__)


def fetch_categories(
    platform: str,
    http_client: Optional[HttpClient] = None,
    url: Optional[str] = None,
) -> List[FlatCategory]:
    """
    Descarga las categorías hoja de una plataforma.

    Raises:
        TaxonomyError: Si la descarga o el parseo fallan.
    """
    return get_source(platform, http_client, url=url).fetch()


def fetch_all(
    platforms: Iterable[str] = PLATFORMS,
    http_client: Optional[HttpClient] = None,
    urls: Optional[Dict[str, str]] = None,
    max_workers: int = 4,
) -> Dict[str, FetchResult]:
    """
    Descarga varias plataformas en paralelo.

    Args:
        platforms: Plataformas a descargar.
        http_client: Cliente HTTP compartido (por defecto uno por fuente).
        urls: URLs alternativas por plataforma.
        max_workers: Hilos de descarga.

    Returns:
        Resultado por plataforma: categorías o error.
    """
    platforms = list(dict.fromkeys(platforms))
    urls = urls or {}
    results: Dict[str, FetchResult] = {}

    if not platforms:
        return results

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(platforms)))) as executor:
        futures = {
            platform: executor.submit(
                fetch_categories, platform, http_client, urls.get(platform)
            )
            for platform in platforms
        }

        for platform, future in futures.items():
            try:
                results[platform] = FetchResult(platform=platform, categories=future.result())
            except Exception as e:
                logger.error(f"Error al obtener categorías de {platform}: {e}")
                results[platform] = FetchResult(platform=platform, error=str(e))

    failed = [p for p, r in results.items() if not r.ok]
    if failed:
        logger.warning(f"Plataformas con error: {', '.join(failed)}")

    return results


def fetch_all_categories(
    platforms: Iterable[str] = PLATFORMS,
    http_client: Optional[HttpClient] = None,
    urls: Optional[Dict[str, str]] = None,
    max_workers: int = 4,
) -> Dict[str, List[FlatCategory]]:
    """
    Descarga varias plataformas; las que fallan quedan como lista vacía.

    Para distinguir "sin categorías" de "descarga fallida" usar `fetch_all`.
    """
    results = fetch_all(platforms, http_client, urls=urls, max_workers=max_workers)
    return {platform: result.categories for platform, result in results.items()}
