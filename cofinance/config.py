# cofinance/config.py
"""
Configuración de la aplicación.

Todo se lee de variables de entorno; el fichero .env (si existe) se carga
al importar este módulo, igual que hace la app de escritorio.
"""
import os
from datetime import date, datetime

from dotenv import load_dotenv, set_key

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///cofinance.db"
DEFAULT_DATE_FORMAT = "dd/MM/yyyy"

_TRUE_VALUES = ("1", "true", "yes")


def _env_flag(name: str, default: str = "False") -> bool:
    return os.environ.get(name, default).strip().lower() in _TRUE_VALUES


def get_database_url() -> str:
    """DATABASE_URL o la base SQLite local por defecto"""
    url = os.environ.get("DATABASE_URL", "").strip()
    return url or DEFAULT_DATABASE_URL


def get_db_echo() -> bool:
    return _env_flag("DB_ECHO")


def link_balances_enabled() -> bool:
    """Si está activo, las transacciones mueven el saldo de su cuenta."""
    return _env_flag("COFINANCE_LINK_BALANCES")


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def get_log_json() -> bool:
    return _env_flag("LOG_JSON")


def get_date_format():
    """Retorna el formato de fecha configurado en .env o 'dd/MM/yyyy' por defecto"""
    formato = os.environ.get("DATE_FORMAT", DEFAULT_DATE_FORMAT).strip()
    if not formato:
        formato = DEFAULT_DATE_FORMAT
    return formato


def to_strftime(formato: str) -> str:
    # dd/MM/yyyy -> %d/%m/%Y
    # MM/dd/yyyy -> %m/%d/%Y
    # yyyy-MM-dd -> %Y-%m-%d
    return formato.replace('dd', '%d').replace('MM', '%m').replace('yyyy', '%Y').replace('yy', '%y')


def date_to_string(fecha_obj, formato=None):
    """Convierte un objeto date a string usando el formato configurado"""
    if formato is None:
        formato = get_date_format()

    if not isinstance(fecha_obj, (date, datetime)):
        return str(fecha_obj)

    if isinstance(fecha_obj, datetime):
        fecha_obj = fecha_obj.date()

    return fecha_obj.strftime(to_strftime(formato))


def save_setting(key: str, value: str, env_path: str | None = None) -> str:
    """
    Persiste una clave en el .env (lo crea si no existe) y la aplica
    también en memoria. Devuelve la ruta del fichero escrito.
    """
    if env_path is None:
        env_path = os.path.join(os.getcwd(), ".env")
    if not os.path.exists(env_path):
        open(env_path, "a", encoding="utf-8").close()
    set_key(env_path, key, value)
    os.environ[key] = value
    return env_path
