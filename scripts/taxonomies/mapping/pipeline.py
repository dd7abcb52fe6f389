"""
Mapeo por lotes de productos a categorías de cada plataforma.

Para cada producto y plataforma:
1. Se buscan candidatas con el matcher (frases más largas primero).
2. Si la mejor candidata es decisiva (o la IA está desactivada) se acepta.
3. Si no, se consulta a la IA con la lista corta de candidatas y solo se
   acepta un ID que esté en esa lista.
4. Si sigue sin decidirse, la plataforma queda sin mapeo.
"""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..models import (
    CategoryAssignment,
    FlatCategory,
    MappedProduct,
    ProductForMapping,
    ScoredCandidate,
)
from .matcher import EXACT_SCORE, rank_categories
from .progress import ProgressCallback, ProgressChannel
from .text import (
    MAX_PHRASE_WORDS,
    candidate_phrases,
    is_excluded_category,
    is_non_product,
    product_text,
    query_fields,
)
from .verifier import CategoryVerifier

logger = logging.getLogger(__name__)

# Puntuación mínima para aceptar sin consultar a la IA
DECISIVE_SCORE = EXACT_SCORE

DEFAULT_CANDIDATE_LIMIT = 20
AI_CANDIDATE_LIMIT = 15
DEFAULT_AI_TIMEOUT = 20.0

MATCHER_CONFIDENCE = 80
AI_CONFIDENCE = 90

_VARIANT_CODE_RE = re.compile(r"^([^/\-]+)[/\-].+$")


def base_product_code(code: str) -> Optional[str]:
    """Código base de una variante ("75/RUZ2" -> "75"), o None."""
    match = _VARIANT_CODE_RE.match(code or "")
    return match.group(1) if match else None


def eligible_categories(categories: Sequence[FlatCategory]) -> List[FlatCategory]:
    """Categorías hoja que no son de temporada ni de marketing."""
    return [
        c for c in categories
        if c.is_leaf and not is_excluded_category(c.full_path)
    ]


def find_candidates(
    categories: Sequence[FlatCategory],
    product: ProductForMapping,
    limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> List[ScoredCandidate]:
    """
    Busca categorías candidatas para un producto.

    Se prueban frases de palabras consecutivas del nombre y de la
    categoría del producto, de la más larga a la más corta. Se usa el
    primer tamaño de frase que encuentra alguna coincidencia, quedándose
    con la mejor puntuación de cada categoría.

    Args:
        categories: Categorías de la plataforma.
        product: Producto a mapear.
        limit: Máximo de candidatas.

    Returns:
        Candidatas ordenadas por puntuación descendente.
    """
    fields = query_fields(product)
    if not fields or not categories:
        return []

    for size in range(MAX_PHRASE_WORDS, 0, -1):
        best: Dict[int, ScoredCandidate] = {}

        for text in fields:
            for phrase in candidate_phrases(text, size):
                for candidate in rank_categories(categories, phrase, limit=None):
                    current = best.get(candidate.category.id)
                    if current is None or candidate.score > current.score:
                        best[candidate.category.id] = candidate

        if best:
            ranked = sorted(best.values(), key=lambda c: c.score, reverse=True)
            return ranked[:limit]

    return []


class BatchMapper:
    """
    Mapea lotes de productos a las categorías de varias plataformas.

    Las taxonomías se tratan como solo lectura durante el lote.
    """

    def __init__(
        self,
        taxonomies: Dict[str, Sequence[FlatCategory]],
        platforms: Sequence[str],
        use_ai: bool = True,
        verifier: Optional[CategoryVerifier] = None,
        ai_timeout: float = DEFAULT_AI_TIMEOUT,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ):
        """
        Inicializa el mapper.

        Args:
            taxonomies: Categorías por plataforma.
            platforms: Plataformas a mapear.
            use_ai: Si True, las decisiones dudosas se consultan a la IA.
            verifier: Capacidad de verificación con IA.
            ai_timeout: Timeout por consulta a la IA en segundos.
            candidate_limit: Máximo de candidatas por plataforma.
        """
        self.platforms = list(dict.fromkeys(platforms))
        self.use_ai = use_ai
        self.verifier = verifier
        self.ai_timeout = ai_timeout
        self.candidate_limit = candidate_limit
        self._categories: Dict[str, List[FlatCategory]] = {}
        self._variant_cache: Dict[str, Dict[str, CategoryAssignment]] = {}
        self._executor: Optional[ThreadPoolExecutor] = None
        self.ai_calls = 0
        self.interrupted = False

        for platform in self.platforms:
            categories = eligible_categories(taxonomies.get(platform) or [])
            if categories:
                self._categories[platform] = categories
            else:
                logger.warning(f"Sin categorías para {platform}: no se mapeará")

        if use_ai and verifier is None:
            logger.warning("IA solicitada sin verificador: las decisiones dudosas quedan sin mapeo")

    def map_products(
        self,
        products: Sequence[ProductForMapping],
        on_progress: Optional[ProgressCallback] = None,
        time_budget: Optional[float] = None,
    ) -> List[MappedProduct]:
        """
        Mapea los productos en el orden recibido.

        Args:
            products: Productos a mapear.
            on_progress: Callback (procesados, total) tras cada producto.
            time_budget: Segundos disponibles; al agotarse se devuelve
                         lo procesado hasta el momento.

        Returns:
            Productos mapeados, en el mismo orden que la entrada.
        """
        total = len(products)
        started = time.monotonic()
        channel = ProgressChannel(on_progress)
        results: List[MappedProduct] = []
        self.interrupted = False

        try:
            for product in products:
                if time_budget is not None and time.monotonic() - started > time_budget:
                    logger.warning(
                        f"Tiempo agotado: {len(results)}/{total} productos procesados"
                    )
                    self.interrupted = True
                    break

                mapping = self.map_product(product)
                results.append(MappedProduct.from_product(product, mapping))
                channel.publish(len(results), total)
        finally:
            channel.close()
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None

        logger.info(
            f"Mapeo completado: {len(results)}/{total} productos, "
            f"{self.ai_calls} consultas a IA"
        )
        return results

    def map_product(self, product: ProductForMapping) -> Dict[str, CategoryAssignment]:
        """Calcula las categorías de un producto en todas las plataformas."""
        # Servicios, vales, propinas...
        if is_non_product(product.name):
            logger.debug(f"Producto no categorizable: {product.name}")
            return {}

        base_code = base_product_code(product.code)
        if base_code and base_code in self._variant_cache:
            return {
                platform: replace(assignment, source="variant")
                for platform, assignment in self._variant_cache[base_code].items()
            }

        mapping: Dict[str, CategoryAssignment] = {}
        for platform, categories in self._categories.items():
            candidates = find_candidates(categories, product, self.candidate_limit)
            assignment = self._decide(product, platform, candidates)
            if assignment:
                mapping[platform] = assignment

        # Reutilizar en variantes del mismo producto
        if mapping:
            self._variant_cache[base_code or product.code] = dict(mapping)

        return mapping

    def _decide(
        self,
        product: ProductForMapping,
        platform: str,
        candidates: List[ScoredCandidate],
    ) -> Optional[CategoryAssignment]:
        """Elige la categoría de una plataforma a partir de las candidatas."""
        if not candidates:
            return None

        top = candidates[0]
        if not self.use_ai:
            return CategoryAssignment.from_category(top.category, MATCHER_CONFIDENCE, "matcher")

        tied = len(candidates) > 1 and candidates[1].score == top.score
        if top.score >= DECISIVE_SCORE and not tied:
            return CategoryAssignment.from_category(top.category, MATCHER_CONFIDENCE, "matcher")

        shortlist = [c.category for c in candidates[:AI_CANDIDATE_LIMIT]]
        chosen_id = self._ask_verifier(product, platform, shortlist)
        if chosen_id is None:
            return None

        for category in shortlist:
            if category.id == chosen_id:
                return CategoryAssignment.from_category(category, AI_CONFIDENCE, "ai")

        logger.warning(
            f"La IA devolvió un ID fuera de las candidatas ({chosen_id}) "
            f"para {product.code} en {platform}"
        )
        return None

    def _ask_verifier(
        self,
        product: ProductForMapping,
        platform: str,
        shortlist: List[FlatCategory],
    ) -> Optional[int]:
        """Consulta a la IA con timeout; errores y timeouts devuelven None."""
        if self.verifier is None:
            return None
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="ai-verifier")

        self.ai_calls += 1
        future = self._executor.submit(
            self.verifier.classify, shortlist, product_text(product)
        )
        try:
            return future.result(timeout=self.ai_timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.warning(f"Timeout de IA para {product.code} en {platform}")
        except Exception as e:
            logger.error(f"Error de IA para {product.code} en {platform}: {e}")
        return None


def batch_map_products(
    products: Sequence[ProductForMapping],
    taxonomies: Dict[str, Sequence[FlatCategory]],
    platforms: Sequence[str],
    on_progress: Optional[ProgressCallback] = None,
    use_ai: bool = True,
    verifier: Optional[CategoryVerifier] = None,
    ai_timeout: float = DEFAULT_AI_TIMEOUT,
    time_budget: Optional[float] = None,
) -> List[MappedProduct]:
    """
    Mapea un lote de productos a las plataformas pedidas.

    Returns:
        Productos mapeados, en el mismo orden que la entrada.
    """
    mapper = BatchMapper(
        taxonomies,
        platforms,
        use_ai=use_ai,
        verifier=verifier,
        ai_timeout=ai_timeout,
    )
    return mapper.map_products(products, on_progress=on_progress, time_budget=time_budget)
