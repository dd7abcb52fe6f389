"""
Validación de peticiones de mapeo.

Rechaza peticiones mal formadas antes de descargar o buscar nada y
decide qué productos necesitan mapeo.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence, Tuple

from .errors import InvalidRequestError
from .models import PLATFORMS, ProductForMapping

logger = logging.getLogger(__name__)


def validate_platforms(platforms: Any) -> List[str]:
    """
    Valida la lista de plataformas.

    Raises:
        InvalidRequestError: Si falta, está vacía o contiene plataformas
            no soportadas.
    """
    if not platforms or not isinstance(platforms, (list, tuple)):
        raise InvalidRequestError("No se ha seleccionado ninguna plataforma")

    unknown = [p for p in platforms if p not in PLATFORMS]
    if unknown:
        raise InvalidRequestError(f"Plataformas no soportadas: {', '.join(map(str, unknown))}")

    return list(dict.fromkeys(platforms))


def validate_products(products: Any) -> List[ProductForMapping]:
    """
    Valida y convierte los productos de entrada.

    Acepta diccionarios (camelCase o snake_case) o ProductForMapping.

    Raises:
        InvalidRequestError: Si falta la lista o está vacía.
    """
    if not products or not isinstance(products, (list, tuple)):
        raise InvalidRequestError("No se han enviado productos")

    valid: List[ProductForMapping] = []
    for index, item in enumerate(products):
        if isinstance(item, ProductForMapping):
            valid.append(item)
        elif isinstance(item, dict):
            valid.append(ProductForMapping.from_dict(item))
        else:
            raise InvalidRequestError(f"Producto {index} no válido: {type(item).__name__}")

    return valid


def validate_request(
    products: Any,
    platforms: Any,
) -> Tuple[List[ProductForMapping], List[str]]:
    """Valida productos y plataformas; devuelve ambos ya normalizados."""
    return validate_products(products), validate_platforms(platforms)


def needs_mapping(product: ProductForMapping, platforms: Sequence[str]) -> bool:
    """True si falta el ID de categoría en alguna de las plataformas."""
    return any(product.existing_category_id(p) is None for p in platforms)


def filter_products_needing_mapping(
    products: Sequence[ProductForMapping],
    platforms: Sequence[str],
    overwrite_existing: bool = False,
) -> List[ProductForMapping]:
    """
    Selecciona los productos a mapear.

    Sin `overwrite_existing`, se omiten los productos que ya tienen
    categoría en todas las plataformas pedidas.

    Args:
        products: Productos de entrada.
        platforms: Plataformas pedidas.
        overwrite_existing: Si True, se mapean todos.

    Returns:
        Productos a mapear, en el orden original.
    """
    if overwrite_existing:
        return list(products)

    selected = [p for p in products if needs_mapping(p, platforms)]
    skipped = len(products) - len(selected)

    if skipped > 0:
        logger.info(f"Productos omitidos (ya mapeados): {skipped}")

    return selected
