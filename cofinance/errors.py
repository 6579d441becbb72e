# cofinance/errors.py
"""Errores del almacén de registros."""


class StoreError(Exception):
    """Base de todos los errores del almacén."""


class PersistenceError(StoreError):
    """Fallo del almacenamiento subyacente al leer, escribir o abrir."""


class StoreInitializationError(PersistenceError):
    """No se pudo abrir la base de datos local. Aborta el arranque."""


class NotFoundError(StoreError, LookupError):
    """Se pidió un registro por id y no existe."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} no encontrado")
