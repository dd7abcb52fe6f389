"""
Excepciones del sistema de mapeo de categorías.

Los errores de descarga y parseo son locales a cada plataforma; los errores
de mapeo se reportan de forma estructurada en el límite del servicio.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TaxonomyError(Exception):
    """Error base al obtener la taxonomía de una plataforma."""

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message)
        self.platform = platform


class FetchError(TaxonomyError):
    """La descarga falló o devolvió un código HTTP no exitoso."""

    def __init__(
        self,
        message: str,
        url: str,
        status: Optional[int] = None,
        platform: Optional[str] = None,
    ):
        super().__init__(message, platform=platform)
        self.url = url
        self.status = status


class ParseError(TaxonomyError):
    """El documento descargado no se pudo interpretar."""


class InvalidRequestError(ValueError):
    """Petición de mapeo mal formada (sin productos, sin plataformas...)."""


class MappingError(Exception):
    """Fallo inesperado durante el mapeo por lotes."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        """Convierte el error a diccionario para la respuesta."""
        return {"error": str(self), "detail": self.detail}
