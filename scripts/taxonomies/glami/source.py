"""
Fuente de categorías de Glami.

XML plano: cada bloque CATEGORY trae id, nombre y la ruta completa.
"""

from __future__ import annotations

import logging
from typing import List

from ..base import TaxonomySource
from ..models import Category
from ..xml_utils import child_int, child_text, parse_xml

logger = logging.getLogger(__name__)


def parse_glami_xml(document: str) -> List[Category]:
    """
    Parsea el XML plano de Glami.

    Args:
        document: XML de categorías ya decodificado.

    Returns:
        Lista plana de categorías (todas hojas).
    """
    root = parse_xml(document)
    categories: List[Category] = []
    skipped = 0

    for block in root.iter("CATEGORY"):
        category_id = child_int(block, "CATEGORY_ID")
        name = child_text(block, "CATEGORY_NAME")
        full_name = child_text(block, "CATEGORY_FULLNAME")

        if category_id is None or name is None or full_name is None:
            skipped += 1
            continue

        categories.append(Category(id=category_id, name=name, full_path=full_name))

    if skipped:
        logger.debug(f"Bloques CATEGORY de Glami omitidos: {skipped}")

    return categories


class GlamiSource(TaxonomySource):
    """Taxonomía de Glami.cz."""

    PLATFORM = "glami"
    URL = "https://www.glami.cz/category-xml/"

    def parse(self, document: str) -> List[Category]:
        return parse_glami_xml(document)
