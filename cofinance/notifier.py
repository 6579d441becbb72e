# cofinance/notifier.py
"""
Aviso de "el almacén ha cambiado".

Sin payload: los suscriptores vuelven a leer lo que necesiten. El
RecordStore solo publica después de que el commit haya terminado.
"""
import itertools
import queue
import threading
from typing import Callable, Dict

import structlog

logger = structlog.get_logger(__name__)

Handler = Callable[[], None]


def call_now(callback: Callable[[], None]) -> None:
    """Dispatcher por defecto: entrega síncrona en el hilo que escribe."""
    callback()


class QueuedDispatcher:
    """
    Lleva las entregas al hilo de la UI.

    Los escritores (cualquier hilo) encolan; el hilo propietario llama a
    process_pending() en su bucle para ejecutarlas.
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()
        self.owner = threading.get_ident()

    def __call__(self, callback: Callable[[], None]) -> None:
        if threading.get_ident() == self.owner:
            callback()
        else:
            self._queue.put(callback)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def process_pending(self) -> int:
        """Ejecuta todo lo encolado. Solo desde el hilo propietario."""
        if threading.get_ident() != self.owner:
            raise RuntimeError("process_pending() debe llamarse desde el hilo propietario")
        done = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return done
            callback()
            done += 1


class ChangeNotifier:
    def __init__(self, dispatcher: Callable[[Callable[[], None]], None] | None = None):
        self._dispatch = dispatcher or call_now
        self._subscribers: Dict[int, Handler] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, handler: Handler) -> int:
        """Registra `handler` para todos los cambios futuros. Devuelve el token."""
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = handler
        return token

    def unsubscribe(self, token: int) -> None:
        # idempotente: un token desconocido o ya retirado no es un error
        with self._lock:
            self._subscribers.pop(token, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify(self) -> None:
        with self._lock:
            handlers = list(self._subscribers.items())
        for token, handler in handlers:
            self._dispatch(self._deliverer(token, handler))

    def _deliverer(self, token: int, handler: Handler) -> Callable[[], None]:
        def deliver():
            # puede haberse dado de baja mientras la entrega estaba encolada
            if token not in self._subscribers:
                return
            try:
                handler()
            except Exception:
                logger.exception("subscriber_failed", token=token)

        return deliver

    def close(self) -> None:
        with self._lock:
            self._subscribers.clear()
