# src/storage/database.py
# Manejador de base de datos para El Águila
# =========================================

"""
Capa de acceso a la base de datos. Oculta SQLAlchemy al resto del sistema:
los servicios de dominio sólo piden una sesión transaccional con
``get_session()`` y el manejador decide si hablar con SQLite o PostgreSQL.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from config.settings import DATABASE_CONFIG

from ..utils.logger import get_logger
from .models import Base, Listing, SweepstakesEntry, VideoEntry, Winner


class DatabaseManager:
    """
    Dueño del engine, la fábrica de sesiones y el esquema.

    Acepta el diccionario ``DATABASE_CONFIG`` (``type`` + ``path`` para
    SQLite; ``host``/``port``/``user``/``password``/``name`` para PostgreSQL).
    """

    def __init__(self, database_config: Optional[Dict[str, Any]] = None):
        self.config = dict(database_config or DATABASE_CONFIG)
        self.engine = None
        self.SessionLocal = None
        self.module_logger = get_logger().create_module_logger("storage.database")
        self._setup_database()

    def _database_url(self) -> str:
        db_type = self.config.get("type")
        if db_type == "sqlite":
            db_path = Path(self.config["path"])
            db_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{db_path}"
        if db_type == "postgresql":
            return (
                f"postgresql://{self.config['user']}:{self.config.get('password') or ''}"
                f"@{self.config['host']}:{self.config['port']}/{self.config.get('name', 'elaguila')}"
            )
        raise ValueError(f"Tipo de base de datos no soportado: {db_type}")

    def _setup_database(self):
        """
        Crea el engine, la fábrica de sesiones y todas las tablas.
        """
        database_url = self._database_url()
        try:
            if self.config["type"] == "sqlite":
                self.engine = create_engine(
                    database_url,
                    echo=False,
                    connect_args={"check_same_thread": False, "timeout": 20},
                    pool_pre_ping=True,
                )
            else:
                self.engine = create_engine(
                    database_url,
                    echo=False,
                    pool_size=self.config.get("pool_size", 5),
                    max_overflow=self.config.get("max_overflow", 10),
                    pool_pre_ping=True,
                    connect_args={"connect_timeout": self.config.get("connect_timeout", 10)},
                )

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine,
                expire_on_commit=False,
            )
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            self.module_logger.error(
                {"event": "storage.setup.failed", "backend": self.config["type"], "error": str(exc)}
            )
            raise

        self.module_logger.info(
            {"event": "storage.setup.completed", "backend": self.config["type"]}
        )

    @contextmanager
    def get_session(self) -> Session:
        """
        Sesión transaccional: commit al salir, rollback ante cualquier error.

        Uso::

            with db_manager.get_session() as session:
                session.add(entry)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> None:
        """Ejecuta ``SELECT 1``; propaga el error si la base no responde."""
        with self.get_session() as session:
            session.execute(text("SELECT 1"))

    def get_health_status(self) -> Dict[str, Any]:
        """
        Conteos básicos por tabla y estado general de la conexión.
        """
        try:
            with self.get_session() as session:
                counts = {
                    "listings": session.query(func.count(Listing.id)).scalar(),
                    "sweepstakes_entries": session.query(func.count(SweepstakesEntry.id)).scalar(),
                    "video_entries": session.query(func.count(VideoEntry.id)).scalar(),
                    "winners": session.query(func.count(Winner.id)).scalar(),
                }
        except SQLAlchemyError as exc:
            self.module_logger.warning({"event": "storage.health.failed", "error": str(exc)})
            return {
                "status": "error",
                "database_type": self.config["type"],
                "error": str(exc),
            }
        return {"status": "healthy", "database_type": self.config["type"], **counts}


# Instancia global
# ================

_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """
    Devuelve el ``DatabaseManager`` compartido, creándolo la primera vez.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
