"""
Caché en memoria de taxonomías con TTL.

La aplicación crea una única instancia y la pasa al servicio de mapeo.
Cada snapshot es inmutable: una descarga correcta lo reemplaza entero y
una descarga fallida conserva el anterior.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

from .fetcher import fetch_all
from .models import FetchResult, FlatCategory, TaxonomySnapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)

Fetcher = Callable[[List[str]], Dict[str, FetchResult]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaxonomyCache:
    """
    Caché de taxonomías aplanadas por plataforma.

    La caducidad es global (un único `last_fetched`), no por plataforma.
    Las plataformas sin snapshot se descargan siempre que se piden; las
    que ya tienen datos solo se vuelven a descargar si se pide
    explícitamente con `refresh_stale` y la caché ha caducado.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Inicializa la caché vacía.

        Args:
            fetcher: Función que descarga una lista de plataformas.
                     Por defecto `fetch_all`.
            ttl: Tiempo de vida de la caché.
            clock: Reloj (inyectable en tests).
        """
        self.fetcher = fetcher or fetch_all
        self.ttl = ttl
        self.clock = clock
        self.last_fetched: Optional[datetime] = None
        self._snapshots: Dict[str, TaxonomySnapshot] = {}
        self._errors: Dict[str, str] = {}
        self._lock = threading.Lock()

    def needs_refresh(self, now: Optional[datetime] = None) -> bool:
        """True si nunca se ha descargado o el TTL ha expirado."""
        if self.last_fetched is None:
            return True
        now = now or self.clock()
        return now - self.last_fetched > self.ttl

    def get(
        self,
        platforms: Iterable[str],
        refresh_stale: bool = False,
    ) -> Dict[str, List[FlatCategory]]:
        """
        Obtiene las categorías de las plataformas pedidas.

        Descarga en paralelo las que faltan. Nunca lanza por fallos de
        descarga: una plataforma sin datos devuelve lista vacía.

        Args:
            platforms: Plataformas pedidas.
            refresh_stale: Si True y la caché ha caducado, también se
                           vuelven a descargar las plataformas con datos.

        Returns:
            Categorías por plataforma.
        """
        platforms = list(dict.fromkeys(platforms))

        with self._lock:
            now = self.clock()
            stale = self.needs_refresh(now)
            to_fetch = [
                p for p in platforms
                if p not in self._snapshots or (refresh_stale and stale)
            ]

            if to_fetch:
                self._refresh(to_fetch, now)

            return {
                platform: list(self._snapshots[platform].categories)
                if platform in self._snapshots else []
                for platform in platforms
            }

    get_cached_categories = get

    def _refresh(self, platforms: List[str], now: datetime) -> None:
        """Descarga y publica snapshots nuevos."""
        logger.info(f"Actualizando caché de categorías: {', '.join(platforms)}")
        results = self.fetcher(platforms)

        for platform in platforms:
            result = results.get(platform)
            if result is None or not result.ok:
                error = result.error if result else "sin resultado"
                self._errors[platform] = error
                if platform in self._snapshots:
                    logger.warning(
                        f"Descarga de {platform} fallida, se conserva el snapshot anterior"
                    )
                continue

            self._snapshots[platform] = TaxonomySnapshot(
                platform=platform,
                categories=tuple(result.categories),
                fetched_at=now,
            )
            self._errors.pop(platform, None)

        self.last_fetched = now

    def snapshot(self, platform: str) -> Optional[TaxonomySnapshot]:
        """Snapshot actual de la plataforma, si existe."""
        return self._snapshots.get(platform)

    def snapshot_age(self, platform: str) -> Optional[timedelta]:
        """Antigüedad del snapshot de la plataforma, o None si no hay."""
        snapshot = self._snapshots.get(platform)
        if snapshot is None:
            return None
        return self.clock() - snapshot.fetched_at

    def status(self, platform: str) -> str:
        """Estado de la plataforma: ok, failed o missing."""
        if platform in self._snapshots:
            return "ok"
        if platform in self._errors:
            return "failed"
        return "missing"

    def last_error(self, platform: str) -> Optional[str]:
        """Último error de descarga de la plataforma."""
        return self._errors.get(platform)

    def invalidate(self, platform: Optional[str] = None) -> None:
        """Elimina el snapshot de una plataforma (o todos)."""
        with self._lock:
            if platform is None:
                self._snapshots.clear()
                self._errors.clear()
                self.last_fetched = None
                logger.debug("Caché de categorías vaciada")
            else:
                self._snapshots.pop(platform, None)
                self._errors.pop(platform, None)
                logger.debug(f"Caché de {platform} invalidada")
