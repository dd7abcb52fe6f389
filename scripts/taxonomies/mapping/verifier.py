"""
Verificación de categorías con IA.

La IA solo elige entre las candidatas que se le ofrecen; el pipeline
descarta cualquier ID que no esté en la lista.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import openai

from ..models import FlatCategory

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = """You are an expert in E-commerce Product Categorization.
Map the product to the most strictly accurate category based on its NAME, DESCRIPTION and FUNCTION.

1. Determine the physical entity (what it is) and the usage context (where it is used).
2. Pick the candidate whose full category path matches BOTH the entity and the context.
3. Avoid traps: accessory categories for main items, generic words ("Set", "System", "Pro"),
   materials or brands instead of the product itself.
4. If the item is a service, voucher, seminar or tip, or no candidate fits, answer null.
   Better no category than a wrong one.

Answer with JSON only: {"category_id": <candidate ID as a number or null>}"""


class CategoryVerifier(ABC):
    """Capacidad externa que elige una categoría entre candidatas."""

    @abstractmethod
    def classify(
        self,
        candidates: List[FlatCategory],
        product_text: str,
    ) -> Optional[int]:
        """
        Elige la categoría más adecuada para el producto.

        Args:
            candidates: Categorías candidatas.
            product_text: Nombre, categoría y descripción del producto.

        Returns:
            ID elegido o None si ninguna encaja.
        """
        pass


class OpenAIVerifier(CategoryVerifier):
    """Verificador basado en la API de chat de OpenAI."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 20.0,
        temperature: float = 0.1,
        client: Optional[Any] = None,
    ):
        """
        Inicializa el verificador.

        Args:
            api_key: API key de OpenAI.
            model: Modelo a usar.
            timeout: Timeout por petición en segundos.
            temperature: Temperatura de generación.
            client: Cliente ya construido (para tests).
        """
        self.model = model
        self.temperature = temperature
        self.client = client or openai.OpenAI(
            api_key=api_key, timeout=timeout, max_retries=1
        )

    def classify(
        self,
        candidates: List[FlatCategory],
        product_text: str,
    ) -> Optional[int]:
        if not candidates:
            return None

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(candidates, product_text)},
            ],
            response_format={"type": "json_object"},
            temperature=self.temperature,
        )

        content = response.choices[0].message.content or "{}"
        return parse_answer(content)


def build_prompt(candidates: List[FlatCategory], product_text: str) -> str:
    """Mensaje de usuario con el producto y sus candidatas."""
    lines = [f"- ID {c.id}: {c.full_path or c.name}" for c in candidates]
    return (
        "Please categorize this product:\n\n"
        f"{product_text}\n"
        "CANDIDATES:\n" + "\n".join(lines)
    )


def parse_answer(content: str) -> Optional[int]:
    """Extrae el ID elegido de la respuesta JSON."""
    content = re.sub(r"^```(?:json)?\s*|\s*```$", "", content.strip())

    try:
        data: Dict[str, Any] = json.loads(content)
    except json.JSONDecodeError:
        logger.error(f"Respuesta de IA no es JSON válido: {content[:200]}")
        return None

    if not isinstance(data, dict):
        return None

    value = data.get("category_id")
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_verifier(config: Dict[str, Any]) -> Optional[CategoryVerifier]:
    """
    Crea el verificador a partir de la configuración.

    Returns:
        Verificador o None si no hay API key.
    """
    api_key = config.get("openai_api_key")
    if not api_key:
        logger.warning("OPENAI_API_KEY no configurada: verificación con IA desactivada")
        return None

    return OpenAIVerifier(
        api_key=api_key,
        model=config.get("openai_model") or DEFAULT_MODEL,
        timeout=float(config.get("ai_timeout") or 20.0),
    )
