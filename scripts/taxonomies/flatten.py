"""
Aplanado de árboles de categorías.

Recorre el árbol en profundidad (padre antes que hijos) respetando el
orden del documento original.
"""

from __future__ import annotations

from typing import Iterable, List

from .models import Category, FlatCategory


def flatten_categories(
    categories: Iterable[Category],
    leaf_only: bool = True,
) -> List[FlatCategory]:
    """
    Aplana un árbol de categorías.

    Args:
        categories: Categorías raíz (o lista ya plana).
        leaf_only: Si True, solo devuelve las hojas; los nodos con hijos
                   se omiten pero se recorren igualmente.

    Returns:
        Lista de categorías planas en pre-orden.
    """
    result: List[FlatCategory] = []
    _collect(categories, leaf_only, result)
    return result


def _collect(
    categories: Iterable[Category],
    leaf_only: bool,
    out: List[FlatCategory],
) -> None:
    for category in categories:
        if not leaf_only or category.is_leaf:
            out.append(
                FlatCategory(
                    id=category.id,
                    name=category.name,
                    full_path=category.full_path,
                    is_leaf=category.is_leaf,
                )
            )
        if category.children:
            _collect(category.children, leaf_only, out)
