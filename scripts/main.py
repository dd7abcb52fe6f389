#!/usr/bin/env python3
"""
CLI para el mapeo de categorías de productos a marketplaces.

Uso:
    python main.py categories fetch                    # Descargar todas las taxonomías
    python main.py categories fetch heureka google     # Solo algunas plataformas
    python main.py categories search heureka "boty"    # Buscar categorías

    python main.py map productos.json --platforms heureka zbozi
    python main.py map productos.json --platforms google --no-ai --overwrite
    python main.py map productos.json --platforms glami --output mapeados.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from functools import partial

from config import get_mapper_config
from taxonomies import PLATFORMS, TaxonomyCache, fetch_all
from taxonomies.http_client import HttpClient
from taxonomies.mapping import get_verifier, map_products, search_categories
from taxonomies.validators import validate_platforms

# Configuración de logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def build_cache(config: dict) -> TaxonomyCache:
    """Crea la caché de taxonomías de la aplicación."""
    http_client = HttpClient(
        timeout=config["http_timeout"],
        max_retries=config["http_max_retries"],
    )
    fetcher = partial(
        fetch_all,
        http_client=http_client,
        urls=config["taxonomy_urls"],
        max_workers=config["fetch_workers"],
    )
    return TaxonomyCache(
        fetcher=fetcher,
        ttl=timedelta(hours=config["cache_ttl_hours"]),
    )


def cmd_categories_fetch(args):
    """Comando: categories fetch"""
    config = get_mapper_config()
    platforms = validate_platforms(args.platforms) if args.platforms else list(PLATFORMS)

    http_client = HttpClient(
        timeout=config["http_timeout"],
        max_retries=config["http_max_retries"],
    )
    results = fetch_all(
        platforms,
        http_client=http_client,
        urls=config["taxonomy_urls"],
        max_workers=config["fetch_workers"],
    )

    print("\nTaxonomías descargadas:")
    print("=" * 50)
    for platform, result in results.items():
        if result.ok:
            print(f"  {platform:<8} {len(result.categories):>6} categorías")
        else:
            print(f"  {platform:<8} ERROR: {result.error}")

    if not all(r.ok for r in results.values()):
        sys.exit(1)


def cmd_categories_search(args):
    """Comando: categories search"""
    cache = build_cache(get_mapper_config())
    results = search_categories(cache, args.platform, args.query, limit=args.limit)

    if not results:
        print(f"Sin resultados para '{args.query}' en {args.platform}")
        return

    print(f"\nCategorías de {args.platform} para '{args.query}':")
    print("=" * 60)
    for category in results:
        print(f"  {category.id:>8}: {category.full_path}")


def cmd_map(args):
    """Comando: map"""
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = get_mapper_config()

    with open(args.input, "r", encoding="utf-8") as f:
        products = json.load(f)

    use_ai = not args.no_ai
    verifier = get_verifier(config) if use_ai else None

    inicio = datetime.now()
    logger.info(f"Mapeando {len(products)} productos a {', '.join(args.platforms)}...")

    def on_progress(processed, total):
        if processed % 100 == 0 or processed == total:
            logger.info(f"  [{processed}/{total}]")

    result = map_products(
        products,
        args.platforms,
        cache=build_cache(config),
        use_ai=use_ai,
        overwrite_existing=args.overwrite,
        verifier=verifier,
        on_progress=on_progress,
        ai_timeout=config["ai_timeout"],
        time_budget=config["time_budget"],
    )

    duracion = (datetime.now() - inicio).total_seconds()
    stats = result.stats

    # Resumen
    logger.info("")
    logger.info("=" * 50)
    logger.info("RESUMEN")
    logger.info("=" * 50)
    logger.info(f"Productos totales: {stats.total}")
    logger.info(f"Productos procesados: {stats.processed}")
    for platform, count in stats.mapped.items():
        logger.info(f"  - {platform}: {count} mapeados")
    if stats.unavailable:
        logger.info(f"Taxonomías no disponibles: {', '.join(stats.unavailable)}")
    if stats.interrupted:
        logger.info("Lote interrumpido por tiempo: resultados parciales")
    logger.info(f"Duración: {duracion:.1f}s")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info(f"Resultado guardado: {args.output}")


def main(argv=None):
    """Punto de entrada del CLI."""
    parser = argparse.ArgumentParser(
        description="Mapeo de categorías de productos a marketplaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Comandos disponibles")

    # Comando: map
    map_parser = subparsers.add_parser("map", help="Mapear productos de un fichero JSON")
    map_parser.add_argument("input", help="Fichero JSON con la lista de productos")
    map_parser.add_argument(
        "--platforms",
        nargs="+",
        choices=PLATFORMS,
        required=True,
        help="Plataformas a mapear",
    )
    map_parser.add_argument(
        "--no-ai",
        action="store_true",
        help="No consultar a la IA (solo coincidencia de texto)",
    )
    map_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Remapear productos que ya tienen categoría",
    )
    map_parser.add_argument(
        "--output",
        metavar="FICHERO",
        help="Guardar el resultado en un fichero JSON",
    )
    map_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Mostrar información detallada",
    )
    map_parser.set_defaults(func=cmd_map)

    # Comando: categories
    cat_parser = subparsers.add_parser("categories", help="Gestión de taxonomías")
    cat_subparsers = cat_parser.add_subparsers(dest="cat_command")

    # categories fetch
    fetch_parser = cat_subparsers.add_parser(
        "fetch", help="Descargar taxonomías y mostrar el número de categorías"
    )
    fetch_parser.add_argument(
        "platforms",
        nargs="*",
        metavar="PLATAFORMA",
        help=f"Plataformas a descargar (por defecto todas: {', '.join(PLATFORMS)})",
    )
    fetch_parser.set_defaults(func=cmd_categories_fetch)

    # categories search
    search_parser = cat_subparsers.add_parser(
        "search", help="Buscar categorías por texto"
    )
    search_parser.add_argument("platform", choices=PLATFORMS)
    search_parser.add_argument("query", help="Texto a buscar")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        metavar="N",
        help="Máximo de resultados",
    )
    search_parser.set_defaults(func=cmd_categories_search)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "categories" and not args.cat_command:
        cat_parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except KeyboardInterrupt:
        logger.warning("Proceso interrumpido por el usuario")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
