"""
Fuente de categorías de Heureka.

El XML de Heureka es un árbol: cada bloque CATEGORY puede contener
otros bloques CATEGORY anidados a cualquier profundidad.
"""

from __future__ import annotations

import logging
from typing import List

from lxml import etree

from ..base import TaxonomySource
from ..models import Category
from ..xml_utils import child_int, child_text, parse_xml

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " | "


def parse_heureka_xml(document: str) -> List[Category]:
    """
    Parsea el XML jerárquico de Heureka.

    Args:
        document: XML de categorías ya decodificado.

    Returns:
        Categorías raíz con sus hijos anidados.
    """
    root = parse_xml(document)
    if root.tag == "CATEGORY":
        return _parse_blocks([root], parent_path="")
    return _parse_blocks(root.iterchildren("CATEGORY"), parent_path="")


def _parse_blocks(blocks, parent_path: str) -> List[Category]:
    """Parsea bloques CATEGORY hermanos y sus descendientes."""
    result: List[Category] = []

    for block in blocks:
        category_id = child_int(block, "CATEGORY_ID")
        name = child_text(block, "CATEGORY_NAME")

        if category_id is None or name is None:
            # Bloque incompleto: sus hijos cuelgan del ancestro más cercano
            logger.debug(f"Bloque CATEGORY incompleto en '{parent_path}'")
            result.extend(_parse_blocks(block.iterchildren("CATEGORY"), parent_path))
            continue

        full_path = f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name
        result.append(
            Category(
                id=category_id,
                name=name,
                full_path=full_path,
                children=_parse_blocks(block.iterchildren("CATEGORY"), full_path),
            )
        )

    return result


class HeurekaSource(TaxonomySource):
    """Taxonomía de Heureka.cz."""

    PLATFORM = "heureka"
    URL = "https://www.heureka.cz/direct/xml-export/shops/heureka-sekce.xml"

    def parse(self, document: str) -> List[Category]:
        return parse_heureka_xml(document)
