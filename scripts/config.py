"""
Configuración del mapeo de categorías usando variables de entorno.
"""
import os
from dotenv import load_dotenv

# Cargar variables de entorno desde .env
load_dotenv()

PLATFORM_URL_VARS = {
    'heureka': 'TAXONOMY_URL_HEUREKA',
    'zbozi': 'TAXONOMY_URL_ZBOZI',
    'glami': 'TAXONOMY_URL_GLAMI',
    'google': 'TAXONOMY_URL_GOOGLE',
}


def _get_float(name, default):
    value = os.getenv(name)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Valor no numérico para {name}: {value!r}")


def get_mapper_config():
    """
    Obtiene la configuración del mapeo desde variables de entorno.

    Returns:
        dict: Parámetros de IA, caché, descarga y URLs de las taxonomías
    """
    time_budget = _get_float('MAPPING_TIME_BUDGET', 0)

    return {
        'openai_api_key': os.getenv('OPENAI_API_KEY', ''),
        'openai_model': os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
        'ai_timeout': _get_float('AI_TIMEOUT', 20.0),
        'cache_ttl_hours': _get_float('CATEGORY_CACHE_TTL_HOURS', 24.0),
        'http_timeout': _get_float('HTTP_TIMEOUT', 30.0),
        'http_max_retries': int(_get_float('HTTP_MAX_RETRIES', 3)),
        'fetch_workers': int(_get_float('FETCH_WORKERS', 4)),
        'time_budget': time_budget or None,
        'taxonomy_urls': {
            platform: os.environ[var]
            for platform, var in PLATFORM_URL_VARS.items()
            if os.getenv(var)
        },
    }
