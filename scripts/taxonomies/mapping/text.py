"""
Utilidades de texto para construir consultas a partir de productos.
"""

from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

from ..models import ProductForMapping

# Palabras sin valor para categorizar
STOP_WORDS = {
    "pro", "pod", "nad", "pri", "pre", "the", "and", "for", "with", "von", "zur",
    "bio", "pure", "original", "premium", "new", "top", "best",
    "sale", "akce", "sleva", "novinka", "hit",
}

# Palabras genéricas que por sí solas no identifican una categoría
WEAK_WORDS = {
    "set", "sada", "system", "systém", "komplet", "big", "boy", "flow",
    "series", "line", "typ", "type", "model", "edition", "verze", "version",
    "pack", "kit", "bundle", "collection", "kolekce",
}

# Servicios, vales, propinas... no son productos categorizables
NON_PRODUCT_KEYWORDS = [
    "dýško", "dysko", "spropitné",
    "seminář", "seminar", "workshop", "kurz", "školení", "skoleni",
    "poukaz", "voucher", "gift card", "dárková karta",
    "služba", "sluzba", "service", "servis",
    "konzultace", "poradenství",
]

# Categorías de temporada o marketing
EXCLUDED_CATEGORY_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"[🎄🎁🐣🎃🎅🦃🎆🎇💝💘🎉🎊❄☀🌸🍂]",
        r"v[aá]no[cč]",
        r"velikon",
        r"black\s*friday",
        r"v[yý]prodej",
        r"\bakce\b",
        r"slev[ay]",
        r"halloween",
        r"valent[yý]n",
        r"sez[oó]n",
        r"novink",
        r"tipy\s+na",
        r"d[aá]rky\s+(pro|k)\b",
        r"bestseller",
        r"doporu[cč]",
    ]
]

MAX_PHRASE_WORDS = 6
MIN_WORD_LENGTH = 3

_WORD_RE = re.compile(r"\w+", re.UNICODE)
_HTML_TAG_RE = re.compile(r"<[^>]*>?")


def normalize_text(text: str) -> str:
    """Normaliza texto para comparación: minúsculas, sin acentos ni símbolos."""
    text = text.lower()

    # Eliminar acentos
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))

    # Eliminar caracteres especiales
    text = re.sub(r"[^a-z0-9\s]", " ", text)

    return " ".join(text.split())


def is_non_product(name: str) -> bool:
    """True si el nombre corresponde a un servicio, vale, propina..."""
    normalized = f" {normalize_text(name)} "
    return any(
        f" {normalize_text(keyword)} " in normalized
        for keyword in NON_PRODUCT_KEYWORDS
    )


def is_excluded_category(full_path: str) -> bool:
    """True si la categoría es de temporada o de marketing."""
    return any(pattern.search(full_path) for pattern in EXCLUDED_CATEGORY_PATTERNS)


def query_fields(product: ProductForMapping) -> List[str]:
    """Textos del producto usados para buscar, por orden de prioridad."""
    fields = [product.name, product.category_text, product.default_category]
    texts = [str(f).strip() for f in fields if f is not None]
    return [t for t in texts if t]


def build_query(product: ProductForMapping) -> str:
    """Texto de búsqueda del producto."""
    return " ".join(query_fields(product))


def candidate_phrases(text: str, size: int) -> List[str]:
    """
    Frases de `size` palabras consecutivas del texto.

    Las frases de una sola palabra descartan stop words, palabras
    genéricas y palabras demasiado cortas.
    """
    words = [w.lower() for w in _WORD_RE.findall(text)]
    phrases = []

    for start in range(0, len(words) - size + 1):
        window = words[start:start + size]
        if size == 1:
            word = window[0]
            if len(word) < MIN_WORD_LENGTH or word in STOP_WORDS or word in WEAK_WORDS:
                continue
        phrases.append(" ".join(window))

    return phrases


def product_text(product: ProductForMapping, max_length: int = 500) -> str:
    """Texto del producto para la verificación con IA."""
    description = _clean_html(product.description or product.short_description or "")
    parts = [
        f"NAME: {product.name}",
        f"DEFAULT_CAT: {product.category_text or product.default_category or 'N/A'}",
    ]
    if description:
        parts.append(f"DESCRIPTION: {description[:max_length]}")
    return "\n".join(parts)


def _clean_html(text: Optional[str]) -> str:
    if not text:
        return ""
    text = _HTML_TAG_RE.sub("", str(text))
    return " ".join(text.split())
