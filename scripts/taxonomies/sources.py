"""Registro de fuentes de taxonomía por plataforma."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

from .base import TaxonomySource
from .glami import GlamiSource, parse_glami_xml
from .google import GoogleSource, parse_google_taxonomy
from .heureka import HeurekaSource, parse_heureka_xml
from .http_client import HttpClient
from .models import Category
from .zbozi import ZboziSource, parse_zbozi_json

SOURCES: Dict[str, Type[TaxonomySource]] = {
    "heureka": HeurekaSource,
    "zbozi": ZboziSource,
    "glami": GlamiSource,
    "google": GoogleSource,
}

PARSERS: Dict[str, Callable[[str], List[Category]]] = {
    "heureka": parse_heureka_xml,
    "zbozi": parse_zbozi_json,
    "glami": parse_glami_xml,
    "google": parse_google_taxonomy,
}


def get_source(
    platform: str,
    http_client: Optional[HttpClient] = None,
    url: Optional[str] = None,
) -> TaxonomySource:
    """Obtiene la fuente de categorías de una plataforma."""
    if platform not in SOURCES:
        raise ValueError(f"Plataforma no soportada: {platform}")

    return SOURCES[platform](http_client, url=url)


def parse_document(platform: str, document: str) -> List[Category]:
    """Parsea un documento con el parser de la plataforma, sin red."""
    if platform not in PARSERS:
        raise ValueError(f"Plataforma no soportada: {platform}")

    return PARSERS[platform](document)
