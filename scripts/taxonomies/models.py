"""
Modelos de datos para el mapeo de categorías.

Define el contrato común entre parsers, caché, matcher y pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

# Plataformas soportadas
PLATFORMS: Tuple[str, ...] = ("heureka", "zbozi", "glami", "google")

# Campo del producto con el ID de categoría existente por plataforma
CATEGORY_ID_FIELDS: Dict[str, str] = {
    "heureka": "heureka_category_id",
    "zbozi": "zbozi_category_id",
    "google": "google_category_id",
    "glami": "glami_category_id",
}

# Claves camelCase que envía la capa de carga de ficheros
_CAMEL_CASE_KEYS: Dict[str, str] = {
    "categoryText": "category_text",
    "defaultCategory": "default_category",
    "shortDescription": "short_description",
    "heurekaCategoryId": "heureka_category_id",
    "zboziCategoryId": "zbozi_category_id",
    "googleCategoryId": "google_category_id",
    "glamiCategoryId": "glami_category_id",
}


# Campos de texto libre que se normalizan a str
_TEXT_FIELDS = ("category_text", "default_category", "description", "short_description")

# Claves de salida para la capa de exportación
_OUTPUT_KEYS: Dict[str, str] = {
    snake: camel for camel, snake in _CAMEL_CASE_KEYS.items()
}


@dataclass
class Category:
    """Nodo del árbol de categorías de una plataforma."""

    id: int
    name: str
    full_path: str
    children: List["Category"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        """True si no tiene hijos."""
        return len(self.children) == 0

    def __str__(self) -> str:
        return self.full_path


@dataclass(frozen=True)
class FlatCategory:
    """Categoría sin hijos, unidad que guarda la caché y usa el matcher."""

    id: int
    name: str
    full_path: str
    is_leaf: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaxonomySnapshot:
    """Taxonomía aplanada de una plataforma en un instante dado."""

    platform: str
    categories: Tuple[FlatCategory, ...]
    fetched_at: datetime

    def age(self, now: Optional[datetime] = None) -> float:
        """Segundos transcurridos desde la descarga."""
        now = now or datetime.now(timezone.utc)
        return (now - self.fetched_at).total_seconds()


@dataclass
class FetchResult:
    """Resultado de descargar la taxonomía de una plataforma."""

    platform: str
    categories: List[FlatCategory] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScoredCandidate:
    """Categoría candidata con su puntuación."""

    category: FlatCategory
    score: int


@dataclass
class CategoryAssignment:
    """Categoría asignada a un producto en una plataforma."""

    id: int
    name: str
    full_path: str
    confidence: int
    source: str  # matcher, ai, variant

    @classmethod
    def from_category(
        cls,
        category: FlatCategory,
        confidence: int,
        source: str,
    ) -> "CategoryAssignment":
        return cls(
            id=category.id,
            name=category.name,
            full_path=category.full_path,
            confidence=confidence,
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "fullPath": self.full_path,
            "confidence": self.confidence,
            "source": self.source,
        }


@dataclass
class ProductForMapping:
    """
    Producto de entrada tal como llega de la capa de carga.

    Solo interesan los textos descriptivos y los IDs de categoría
    que ya tenga asignados en cada plataforma.
    """

    code: str
    name: str
    category_text: Optional[str] = None
    default_category: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    heureka_category_id: Optional[str] = None
    zbozi_category_id: Optional[str] = None
    google_category_id: Optional[str] = None
    glami_category_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductForMapping":
        """Crea el producto desde un diccionario (camelCase o snake_case)."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            key = _CAMEL_CASE_KEYS.get(key, key)
            if key in known:
                values[key] = value

        values["code"] = str(values.get("code") or "")
        values["name"] = str(values.get("name") or "")
        # Celdas de hoja de cálculo: números u otros tipos pasan a texto
        for key in _TEXT_FIELDS:
            value = values.get(key)
            if value is not None and not isinstance(value, str):
                values[key] = str(value)
        return cls(**values)

    def existing_category_id(self, platform: str) -> Optional[str]:
        """ID de categoría ya asignado en la plataforma (None si vacío)."""
        value = getattr(self, CATEGORY_ID_FIELDS[platform], None)
        if value is None:
            return None
        value = str(value).strip()
        return value or None


@dataclass
class MappedProduct(ProductForMapping):
    """Producto de entrada más las categorías mapeadas por plataforma."""

    mapped_categories: Dict[str, CategoryAssignment] = field(default_factory=dict)

    @classmethod
    def from_product(
        cls,
        product: ProductForMapping,
        mapped_categories: Dict[str, CategoryAssignment],
    ) -> "MappedProduct":
        """Crea un registro nuevo sin modificar el producto original."""
        values = {f.name: getattr(product, f.name) for f in fields(ProductForMapping)}
        return cls(**values, mapped_categories=dict(mapped_categories))

    def category_id(self, platform: str) -> Optional[int]:
        """ID mapeado en la plataforma o None."""
        assignment = self.mapped_categories.get(platform)
        return assignment.id if assignment else None

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para exportar (claves camelCase)."""
        data = {
            _OUTPUT_KEYS.get(f.name, f.name): getattr(self, f.name)
            for f in fields(ProductForMapping)
        }
        data["mappedCategories"] = {
            platform: assignment.to_dict()
            for platform, assignment in self.mapped_categories.items()
        }
        return data
