# viewmodels/base.py
import structlog

from cofinance.errors import PersistenceError

logger = structlog.get_logger(__name__)

IDLE = "idle"
FETCHING = "fetching"


class ViewModel:
    """
    Se suscribe al notifier del almacén al crearse y, en cada aviso, vuelve
    a leer su instantánea y recalcula todo desde cero.

    Si la lectura falla se guarda el mensaje en `error_message` y se
    conserva la instantánea anterior. No hay reintentos.
    """

    what = "data"

    def __init__(self, store):
        self.store = store
        self.state = IDLE
        self.error_message = None
        self.version = 0  # número de recálculos hechos
        self._token = store.notifier.subscribe(self.refresh)
        self.refresh()

    def _load(self):
        raise NotImplementedError

    def _recompute(self):
        raise NotImplementedError

    def refresh(self):
        self.state = FETCHING
        try:
            self._load()
            self.error_message = None
        except PersistenceError as exc:
            self.error_message = f"Error loading {self.what}: {exc}"
            logger.warning("viewmodel_fetch_failed", viewmodel=type(self).__name__, error=str(exc))
        finally:
            self.state = IDLE
        self._recompute()
        self.version += 1

    @property
    def is_loading(self) -> bool:
        return self.state == FETCHING

    @property
    def subscribed(self) -> bool:
        return self._token is not None

    def close(self):
        if self._token is not None:
            self.store.notifier.unsubscribe(self._token)
            self._token = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
