"""Persistor lifecycle: connect and register on start, unregister and close on stop."""
import logging
from typing import Any, Self

from persistor.bus import EventBus
from persistor.connection import connect
from persistor.handler import RequestHandler
from persistor.options import PersistorOptions

__all__ = [
    'Persistor',
]

logger = logging.getLogger(__name__)


class Persistor:
    """The persistor module bound to one bus address.

    Parameters:
        bus: EventBus the handler is registered on. When omitted, `start()`
            builds one with `options.workers` worker threads and `stop()`
            closes it.
        options: PersistorOptions; defaults apply when omitted.
        session: Optional already connected session. An injected session is
            used as is and left open by `stop()`; otherwise `start()` connects
            and `stop()` closes what it opened.
    """

    def __init__(self, bus: EventBus | None = None, options: PersistorOptions | None = None,
                 session: Any | None = None) -> None:
        self.bus = bus
        self.options = options or PersistorOptions()
        self.session = session
        self.handler: RequestHandler | None = None
        self._owns_bus = bus is None
        self._owns_session = session is None

    def __enter__(self) -> Self:
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def address(self) -> str:
        return self.options.address

    @property
    def running(self) -> bool:
        return self.handler is not None

    def start(self) -> Self:
        """Connect to the cluster and register the handler at the address.

        Whatever this call opened is closed again when registration fails.
        """
        if self.running:
            return self
        logger.info('[Cassandra Persistor] Booting up...')
        try:
            if self.bus is None:
                self.bus = EventBus.from_options(self.options)
            if self.session is None:
                self.session = connect(self.options)
            handler = RequestHandler(self.session)
            self.bus.register_handler(self.address, handler)
        except Exception:
            logger.error(f'[Cassandra Persistor] Could not boot at {self.address}')
            self._release()
            raise
        self.handler = handler
        logger.info(f'[Cassandra Persistor] ...booted at {self.address}!')
        return self

    def stop(self) -> None:
        """Unregister the handler, then close the session and bus this persistor opened."""
        try:
            if self.handler is not None:
                self.bus.unregister_handler(self.address, self.handler)
                self.handler = None
        finally:
            self._release()

    def _release(self) -> None:
        try:
            if self._owns_session and self.session is not None:
                session, self.session = self.session, None
                session.close()
                logger.info('[Cassandra Persistor] Stopped')
        finally:
            if self._owns_bus and self.bus is not None:
                bus, self.bus = self.bus, None
                bus.close()
