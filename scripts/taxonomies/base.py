"""
Clase base abstracta para fuentes de taxonomía.

Define el contrato que todas las plataformas deben implementar:
descargar el documento, parsearlo y aplanarlo.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from lxml import etree

from .errors import FetchError, ParseError
from .flatten import flatten_categories
from .http_client import HttpClient
from .models import Category, FlatCategory

logger = logging.getLogger(__name__)


class TaxonomySource(ABC):
    """
    Clase base para las fuentes de categorías de cada plataforma.

    Cada plataforma debe extender esta clase e implementar `parse`.
    """

    # Nombre de la plataforma (debe sobrescribirse)
    PLATFORM: str = "unknown"

    # URL del documento de categorías (debe sobrescribirse)
    URL: str = ""

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        url: Optional[str] = None,
    ):
        """
        Inicializa la fuente.

        Args:
            http_client: Cliente HTTP a usar. Si no se proporciona,
                        se crea uno con configuración por defecto.
            url: URL alternativa del documento de categorías.
        """
        self.http = http_client or HttpClient()
        self.url = url or self.URL

    @abstractmethod
    def parse(self, document: str) -> List[Category]:
        """
        Convierte el documento descargado en categorías.

        Args:
            document: Documento ya decodificado como texto.

        Returns:
            Árbol de categorías (o lista plana).
        """
        pass

    def fetch(self) -> List[FlatCategory]:
        """
        Descarga, parsea y aplana (solo hojas) la taxonomía.

        Returns:
            Lista de categorías hoja.

        Raises:
            FetchError: Si la descarga falla.
            ParseError: Si el documento no se puede interpretar.
        """
        logger.info(f"Obteniendo categorías de {self.PLATFORM}: {self.url}")

        try:
            document = self.http.get_text(self.url)
        except FetchError as e:
            e.platform = self.PLATFORM
            raise

        try:
            tree = self.parse(document.lstrip("\ufeff"))
        except (etree.XMLSyntaxError, json.JSONDecodeError, ValueError, TypeError) as e:
            raise ParseError(
                f"Documento de {self.PLATFORM} no válido: {e}",
                platform=self.PLATFORM,
            ) from e

        categories = flatten_categories(tree, leaf_only=True)
        logger.info(f"Categorías obtenidas de {self.PLATFORM}: {len(categories)}")
        return categories
