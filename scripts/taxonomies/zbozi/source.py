"""
Fuente de categorías de Zboží.cz.

El JSON es un árbol recursivo. Algunos nodos traen la ruta completa
precalculada (categoryText); los nodos sin id solo estructuran el árbol.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from ..base import TaxonomySource
from ..models import Category

PATH_SEPARATOR = " | "


def parse_zbozi_json(document: Union[str, List[Dict[str, Any]]]) -> List[Category]:
    """
    Parsea el árbol JSON de Zboží.

    Args:
        document: Texto JSON o la lista de nodos ya decodificada.

    Returns:
        Categorías raíz con sus hijos anidados.
    """
    data = json.loads(document) if isinstance(document, str) else document

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError("El documento de Zboží no es una lista de categorías")

    return _parse_nodes(data, parent_path="")


def _parse_nodes(nodes: List[Dict[str, Any]], parent_path: str) -> List[Category]:
    result: List[Category] = []

    for node in nodes:
        if not isinstance(node, dict):
            continue

        name = str(node.get("name") or "").strip()
        full_path = node.get("categoryText") or _join_path(parent_path, name)
        children = _parse_nodes(node.get("children") or [], full_path)

        category_id = _to_int(node.get("id"))
        if category_id is None:
            # Nodo estructural: no se emite, sus hijos suben de nivel
            result.extend(children)
            continue

        result.append(
            Category(
                id=category_id,
                name=name,
                full_path=full_path,
                children=children,
            )
        )

    return result


def _join_path(parent_path: str, name: str) -> str:
    if not name:
        return parent_path
    return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name


def _to_int(value: Any) -> Optional[int]:
    """Convierte el id a entero; vacío, 0 o inválido devuelve None."""
    if not value:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ZboziSource(TaxonomySource):
    """Taxonomía de Zboží.cz."""

    PLATFORM = "zbozi"
    URL = "https://www.zbozi.cz/static/categories.json"

    def parse(self, document: str) -> List[Category]:
        return parse_zbozi_json(document)
