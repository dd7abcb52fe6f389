"""Helpers de lxml compartidos por los parsers XML."""

from __future__ import annotations

from typing import Optional

from lxml import etree

# El texto ya llega decodificado como UTF-8: se ignora la declaración del documento
_PARSER = etree.XMLParser(
    encoding="utf-8",
    resolve_entities=False,
    no_network=True,
    huge_tree=True,
)


def parse_xml(document: str) -> etree._Element:
    """Parsea un documento XML y devuelve el elemento raíz."""
    return etree.fromstring(document.encode("utf-8"), parser=_PARSER)


def child_text(element: etree._Element, tag: str) -> Optional[str]:
    """Texto limpio de un hijo directo, o None si falta o está vacío."""
    value = element.findtext(tag)
    if value is None:
        return None
    value = value.strip()
    return value or None


def child_int(element: etree._Element, tag: str) -> Optional[int]:
    """Entero de un hijo directo, o None si no es un entero."""
    value = child_text(element, tag)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
