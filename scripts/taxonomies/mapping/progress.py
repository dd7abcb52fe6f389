"""
Canal de progreso del mapeo por lotes.

El pipeline publica eventos en una cola y un único hilo los entrega al
callback en orden, así un callback lento no frena el procesamiento.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

_CLOSE = object()


class ProgressChannel:
    """Cola de un solo consumidor para eventos (procesados, total)."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self.callback = callback
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._last = 0
        self._thread: Optional[threading.Thread] = None

        if callback is not None:
            self._thread = threading.Thread(
                target=self._deliver, name="mapping-progress", daemon=True
            )
            self._thread.start()

    def publish(self, processed: int, total: int) -> None:
        """Publica un evento sin bloquear."""
        if self._thread is None:
            return
        self._queue.put_nowait((processed, total))

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """Cierra el canal y espera (con límite) a que se entreguen los eventos."""
        if self._thread is None:
            return
        self._queue.put_nowait(_CLOSE)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("El callback de progreso no terminó a tiempo")

    def _deliver(self) -> None:
        while True:
            event = self._queue.get()
            if event is _CLOSE:
                return

            processed, total = event
            # Nunca retroceder aunque lleguen eventos desordenados
            if processed < self._last:
                continue
            self._last = processed

            try:
                self.callback(processed, total)
            except Exception as e:
                logger.error(f"Error en callback de progreso: {e}")
