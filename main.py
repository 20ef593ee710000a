# main.py
# Punto de entrada de línea de comandos de El Águila
# ==================================================

"""
Comandos de operación para el backend de El Águila.

Permite revisar la configuración, la salud de la base de datos y ejecutar
a mano las mismas recolecciones que sirven los endpoints (noticias y
eventos), imprimiendo el resultado como JSON.

Uso:
    python main.py health
    python main.py news --category tecnologia --lang en
    python main.py events --city sanjose
    python main.py regional
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from config import ENVIRONMENT, PROJECT_VERSION, validate_config, validate_sources
from src import NewsFeedCollector, get_database_manager, setup_logging
from src.collectors import FetchError
from src.events import InvalidCityError
from src.events.service import EventsService


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def _cmd_health(args: argparse.Namespace) -> int:
    validate_config()
    validate_sources()
    status = get_database_manager().get_health_status()
    _print_json(status)
    return 0 if status.get("status") == "healthy" else 1


def _cmd_news(args: argparse.Namespace) -> int:
    payload = asyncio.run(NewsFeedCollector().collect(args.category, args.lang))
    _print_json(payload)
    return 0


def _cmd_events(args: argparse.Namespace) -> int:
    service = EventsService()
    try:
        payload = asyncio.run(service.core_events(args.city))
    except InvalidCityError as exc:
        print(f"Ciudad inválida: {exc.slug}", file=sys.stderr)
        return 2
    _print_json(payload)
    return 0


def _cmd_regional(args: argparse.Namespace) -> int:
    _print_json(asyncio.run(EventsService().regional_rss_events()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="El Águila backend")
    subparsers = parser.add_subparsers(dest="command", required=True)

    health = subparsers.add_parser("health", help="Validar configuración y base de datos")
    health.set_defaults(handler=_cmd_health)

    news = subparsers.add_parser("news", help="Recolectar titulares")
    news.add_argument("--category", default=None)
    news.add_argument("--lang", default=None)
    news.set_defaults(handler=_cmd_news)

    events = subparsers.add_parser("events", help="Eventos principales de una ciudad")
    events.add_argument("--city", default=None)
    events.set_defaults(handler=_cmd_events)

    regional = subparsers.add_parser("regional", help="Eventos de feeds regionales")
    regional.set_defaults(handler=_cmd_regional)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging_system = setup_logging()
    logging_system.log_system_startup(
        PROJECT_VERSION, {"command": args.command, "environment": ENVIRONMENT}
    )
    try:
        return args.handler(args)
    except FetchError as exc:
        logging_system.log_error_with_context(exc, {"command": args.command, "url": exc.url})
        print(f"Error de red: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Ejecución interrumpida por usuario", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
