# cofinance/database/__init__.py
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from cofinance import config

# Declarative base disponible desde la importación para que los modelos la usen
Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.rstrip("/").endswith(":memory:") or url in ("sqlite://", "sqlite+pysqlite://"))


class Database:
    """
    Engine + fábrica de sesiones de la base local.

    Ya no es un singleton de módulo: cada RecordStore recibe (o crea) su
    propia instancia.
    """

    def __init__(self, url: str | None = None, echo: bool | None = None):
        self.engine = None
        self.SessionLocal = None
        self.url = None
        self.echo = False
        self._initialized = False
        if url is not None or echo is not None:
            self.init_app(url, echo)

    def init_app(self, db_url: str | None = None, echo: bool | None = None, **engine_kwargs):
        """
        Inicializa engine y SessionLocal. Sin URL se usa DATABASE_URL o la
        base SQLite por defecto.
        """
        if db_url is None:
            db_url = config.get_database_url()
        if echo is None:
            echo = config.get_db_echo()

        # Si ya estaba inicializado con la misma URL, no la recreamos
        if self.url == db_url and self.engine is not None:
            self.echo = echo
            return

        if _is_memory_sqlite(db_url):
            # una única conexión compartida, si no cada sesión vería una base vacía
            engine_kwargs.setdefault("poolclass", StaticPool)
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        elif db_url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            # pool_pre_ping ayuda a reconectar conexiones muertas
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.url = db_url
        self.echo = echo
        self.engine = create_engine(db_url, echo=echo, **engine_kwargs)
        self.SessionLocal = scoped_session(sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False))
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    def session(self):
        if self.SessionLocal is None:
            raise RuntimeError("DB no inicializada. Llama a init_app() primero.")
        return self.SessionLocal()

    def remove_session(self):
        """Descarta la sesión del hilo actual."""
        if self.SessionLocal is not None:
            self.SessionLocal.remove()

    def create_all(self):
        if self.engine is None:
            raise RuntimeError("DB no inicializada. Llama a init_app() primero.")
        # importar los modelos registra sus tablas en Base.metadata
        import cofinance.models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def check_connection(self) -> tuple[bool, str | None]:
        """
        Ejecuta una consulta mínima contra el engine actual.
        Devuelve (True, None) o (False, mensaje_error).
        """
        if self.engine is None:
            return False, "No hay base de datos inicializada."
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True, None
        except SQLAlchemyError as exc:
            return False, str(exc)

    def close_all(self):
        """
        Cierra sesiones y engine (útil para reconfigurar).
        """
        if self.SessionLocal is not None:
            self.SessionLocal.remove()
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
        self.url = None
        self._initialized = False


__all__ = ["Base", "Database"]
