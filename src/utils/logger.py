# src/utils/logger.py
# Sistema de logging para el backend de El Águila
# ===============================================

"""
Configura loguru una sola vez para todo el proceso: un handler de consola
(colorido en desarrollo, compacto en producción) y un archivo rotativo
comprimido. Cada módulo obtiene su propio logger con ``create_module_logger``
para que los registros queden etiquetados con su origen.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from config.settings import DEBUG, LOGGING_CONFIG


class CommunityMediaLogger:
    """
    Configurador centralizado de logging.

    Los colectores, proveedores de eventos y la capa de persistencia piden
    aquí sus loggers de módulo; la configuración de handlers ocurre una vez.
    """

    def __init__(self):
        self.is_configured = False
        self.log_file_path: Optional[Path] = None

    def configure_logging(self, config: Optional[Dict[str, Any]] = None, *, force: bool = False):
        """
        Instala los handlers de consola y archivo.

        Args:
            config: Configuración de logging. Si no se proporciona se usa
                    ``LOGGING_CONFIG`` de settings.py.
            force: Reconfigura aunque ya se haya configurado antes.
        """
        if self.is_configured and not force:
            return

        config = config or LOGGING_CONFIG

        logger.remove()
        self._configure_console_handler(config)
        if config.get("file_path"):
            self._configure_file_handler(config)

        self.is_configured = True
        logger.debug("Logging configurado: nivel={}", config.get("level", "INFO"))

    def _configure_console_handler(self, config: Dict[str, Any]):
        if DEBUG:
            console_format = (
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{extra[module]}</cyan> | "
                "<level>{message}</level>"
            )
            console_level = "DEBUG"
        else:
            console_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]} | {message}"
            console_level = config.get("level", "INFO")

        logger.configure(extra={"module": "app"})
        logger.add(
            sys.stdout,
            format=console_format,
            level=console_level,
            colorize=DEBUG,
            backtrace=DEBUG,
            diagnose=DEBUG,
            filter=_drop_library_noise,
        )

    def _configure_file_handler(self, config: Dict[str, Any]):
        """
        Archivo rotativo con retención configurable; los archivos viejos se
        comprimen en gz.
        """
        self.log_file_path = Path(config["file_path"])
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(self.log_file_path),
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {process.id: <6} | "
                "{extra[module]} | {name}:{function}:{line} | {message}"
            ),
            level=config.get("level", "INFO"),
            rotation=config.get("max_file_size", "10 MB"),
            retention=config.get("retention", "30 days"),
            compression="gz",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    def create_module_logger(self, module_name: str) -> Any:
        """
        Devuelve un logger ligado al módulo indicado (ej: 'collectors.news').
        """
        if not self.is_configured:
            self.configure_logging()
        return logger.bind(module=module_name)

    def log_system_startup(self, version: str, config_summary: Optional[Dict[str, Any]] = None):
        """Marca el inicio de un proceso del servidor en los logs."""
        startup = logger.bind(module="app")
        startup.info("El Águila backend {} iniciado (debug={})", version, DEBUG)
        for key, value in (config_summary or {}).items():
            startup.info("  {}: {}", key, value)
        if self.log_file_path:
            startup.info("Logs guardándose en: {}", self.log_file_path)

    def log_error_with_context(self, error: Exception, context: Optional[Dict[str, Any]] = None):
        """
        Registra un error junto con el contexto que ayuda a reproducirlo.
        """
        logger.bind(module="app", **(context or {})).opt(exception=error).error(
            "Error: {}", error
        )


def _drop_library_noise(record) -> bool:
    # httpx y sqlalchemy son muy verbosos en DEBUG/INFO.
    name = record["name"] or ""
    if name.startswith(("httpx", "httpcore")) and record["level"].no < 20:
        return False
    if name.startswith("sqlalchemy") and record["level"].no <= 20:
        return False
    return True


# Instancia global del configurador de logging
# ============================================
_logger_instance: Optional[CommunityMediaLogger] = None


def get_logger() -> CommunityMediaLogger:
    """
    Devuelve el configurador compartido, configurándolo la primera vez.
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = CommunityMediaLogger()
        _logger_instance.configure_logging()
    return _logger_instance


def setup_logging(config: Optional[Dict[str, Any]] = None) -> CommunityMediaLogger:
    """
    Configura logging al arrancar; con ``config`` fuerza la reconfiguración.
    """
    logger_instance = get_logger()
    if config:
        logger_instance.configure_logging(config, force=True)
    return logger_instance
