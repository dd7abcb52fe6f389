"""
Cliente HTTP robusto con retry y backoff.

Proporciona una capa de abstracción sobre requests con:
- Timeout configurable
- Reintentos con backoff exponencial
- Manejo de rate limiting (429)
- Decodificación explícita del cuerpo (no se confía en el charset)
- Logging estructurado
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

import requests

from .errors import FetchError

logger = logging.getLogger(__name__)


class HttpClient:
    """Cliente HTTP con retry y backoff."""

    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/118.0.0.0 Safari/537.36"
        ),
        "Accept": "application/json, application/xml, text/plain, */*",
    }

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Inicializa el cliente HTTP.

        Args:
            timeout: Timeout por request en segundos.
            max_retries: Número máximo de reintentos.
            headers: Headers adicionales para las peticiones.
        """
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session = requests.Session()
        self.session.headers.update(self.DEFAULT_HEADERS)
        if headers:
            self.session.headers.update(headers)

    def get_bytes(self, url: str) -> bytes:
        """
        Realiza una petición GET con retry y backoff.

        Args:
            url: URL a consultar.

        Returns:
            Cuerpo de la respuesta en bruto.

        Raises:
            FetchError: Si la respuesta no es exitosa tras los reintentos.
        """
        status: Optional[int] = None
        last_error = "sin respuesta"

        for attempt in range(self.max_retries):
            try:
                logger.debug(f"GET {url} (intento {attempt + 1}/{self.max_retries})")
                response = self.session.get(url, timeout=self.timeout)
                status = response.status_code

                # Rate limiting
                if status == 429:
                    wait_time = 2 ** (attempt + 1)
                    logger.warning(f"Rate limited (429). Esperando {wait_time}s...")
                    last_error = "HTTP 429"
                    self._sleep_before_retry(attempt, wait_time)
                    continue

                # Otros errores de servidor
                if status >= 500:
                    wait_time = 2 ** attempt
                    logger.warning(
                        f"Error de servidor ({status}). "
                        f"Reintentando en {wait_time}s..."
                    )
                    last_error = f"HTTP {status}"
                    self._sleep_before_retry(attempt, wait_time)
                    continue

                # Errores de cliente: no tiene sentido reintentar
                if status >= 400:
                    raise FetchError(f"HTTP {status} en {url}", url=url, status=status)

                return response.content

            except requests.Timeout:
                logger.warning(f"Timeout en {url} (intento {attempt + 1})")
                last_error = "timeout"
                self._sleep_before_retry(attempt, 2 ** attempt)

            except requests.RequestException as e:
                logger.error(f"Error en GET {url}: {e}")
                last_error = str(e)
                self._sleep_before_retry(attempt, 2 ** attempt)

        logger.error(f"Falló después de {self.max_retries} intentos: {url}")
        raise FetchError(
            f"Falló después de {self.max_retries} intentos ({last_error}): {url}",
            url=url,
            status=status,
        )

    def get_text(self, url: str, encoding: str = "utf-8") -> str:
        """
        Descarga un documento de texto y lo decodifica explícitamente.

        Algunas fuentes no envían el charset correcto, así que nunca se
        usa la codificación que propone la respuesta.

        Raises:
            FetchError: Si falla la descarga o el cuerpo no es decodificable.
        """
        content = self.get_bytes(url)
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError as e:
            raise FetchError(
                f"Cuerpo no decodificable como {encoding}: {url}", url=url
            ) from e

        # Algunas exportaciones empiezan con BOM
        return text.lstrip("\ufeff")

    def _sleep_before_retry(self, attempt: int, wait_time: float) -> None:
        """Espera antes del siguiente intento (no tras el último)."""
        if attempt < self.max_retries - 1:
            time.sleep(wait_time)
