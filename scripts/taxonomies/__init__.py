"""
Módulo de taxonomías de marketplaces.

Cada plataforma tiene su propio submódulo que implementa TaxonomySource.
"""

from .base import TaxonomySource
from .cache import TaxonomyCache
from .errors import FetchError, InvalidRequestError, MappingError, ParseError, TaxonomyError
from .fetcher import fetch_all, fetch_all_categories, fetch_categories
from .flatten import flatten_categories
from .models import (
    PLATFORMS,
    Category,
    CategoryAssignment,
    FlatCategory,
    MappedProduct,
    ProductForMapping,
)
from .sources import get_source, parse_document

__all__ = [
    "TaxonomySource",
    "TaxonomyCache",
    "FetchError",
    "InvalidRequestError",
    "MappingError",
    "ParseError",
    "TaxonomyError",
    "fetch_all",
    "fetch_all_categories",
    "fetch_categories",
    "flatten_categories",
    "PLATFORMS",
    "Category",
    "CategoryAssignment",
    "FlatCategory",
    "MappedProduct",
    "ProductForMapping",
    "get_source",
    "parse_document",
]
