"""
Fixtures compartidas de los tests del mapeo de categorías.

Factorías de categorías y productos, un verificador falso y un reloj
controlable para la caché.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from taxonomies.mapping.verifier import CategoryVerifier
from taxonomies.models import FetchResult, FlatCategory, ProductForMapping


@pytest.fixture
def make_category():
    """
    Devuelve una función que crea FlatCategory con valores por defecto.

    Ejemplo:
        category = make_category(502, "Running shoes", "Sports | Shoes | Running shoes")
    """

    def _make_category(
        id: int,
        name: str,
        full_path: Optional[str] = None,
        is_leaf: bool = True,
    ) -> FlatCategory:
        return FlatCategory(id=id, name=name, full_path=full_path or name, is_leaf=is_leaf)

    return _make_category


@pytest.fixture
def make_product():
    """Devuelve una función que crea ProductForMapping; admite cualquier campo."""

    def _make_product(name: str = "Test product", code: str = "P1", **kwargs) -> ProductForMapping:
        return ProductForMapping(code=code, name=name, **kwargs)

    return _make_product


@pytest.fixture
def shoe_categories(make_category) -> List[FlatCategory]:
    """Taxonomía mínima de calzado."""
    return [
        make_category(501, "Shoes", "Sports | Shoes"),
        make_category(502, "Running shoes", "Sports | Shoes | Running shoes"),
    ]


class FakeVerifier(CategoryVerifier):
    """Verificador que devuelve una respuesta fija y registra las llamadas."""

    def __init__(self, answer: Optional[int] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls: List[List[FlatCategory]] = []

    def classify(self, candidates, product_text):
        self.calls.append(list(candidates))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def fake_verifier():
    """Devuelve la clase FakeVerifier para construirla en cada test."""
    return FakeVerifier


class FakeClock:
    """Reloj manual para controlar el TTL de la caché."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_fetcher():
    """
    Devuelve una función que crea un fetcher falso.

    El fetcher recibe una lista de plataformas y devuelve un FetchResult
    por cada una a partir de `data`: una lista de categorías o una
    excepción (que se convierte en error). Registra cada llamada.
    """

    def _make_fetcher(data: Dict[str, object]):
        calls: List[List[str]] = []

        def _fetcher(platforms):
            calls.append(list(platforms))
            results = {}
            for platform in platforms:
                value = data.get(platform, [])
                if isinstance(value, Exception):
                    results[platform] = FetchResult(platform=platform, error=str(value))
                else:
                    results[platform] = FetchResult(platform=platform, categories=list(value))
            return results

        _fetcher.calls = calls
        return _fetcher

    return _make_fetcher
