"""
Fuente de la taxonomía de productos de Google.

Formato de texto: una categoría por línea, "id - Ruta > Sub > Hoja".
"""

from __future__ import annotations

import re
from typing import List

from ..base import TaxonomySource
from ..models import Category

LINE_RE = re.compile(r"^(\d+)\s*-\s*(.+)$")
PATH_SEPARATOR = " > "


def parse_google_taxonomy(document: str) -> List[Category]:
    """
    Parsea el fichero de taxonomía de Google con IDs.

    Args:
        document: Contenido del fichero de texto.

    Returns:
        Lista plana de categorías.
    """
    categories: List[Category] = []

    for line in document.splitlines():
        line = line.strip()
        # Omitir comentarios y líneas vacías
        if not line or line.startswith("#"):
            continue

        match = LINE_RE.match(line)
        if not match:
            continue

        full_path = match.group(2).strip()
        name = full_path.split(PATH_SEPARATOR)[-1].strip()
        categories.append(
            Category(id=int(match.group(1)), name=name, full_path=full_path)
        )

    return categories


class GoogleSource(TaxonomySource):
    """Taxonomía de Google Merchant (versión cs-CZ)."""

    PLATFORM = "google"
    URL = "https://www.google.com/basepages/producttype/taxonomy-with-ids.cs-CZ.txt"

    def parse(self, document: str) -> List[Category]:
        return parse_google_taxonomy(document)
