"""In-process request/reply bus with worker thread dispatch.

Handlers are registered at string addresses. `send()` delivers a body to one
handler at the address (round-robin when several are registered) on a
ThreadPoolExecutor worker and returns a Future completed by the handler's
reply.

INVARIANT: Every message is handled on its own; the bus shares nothing between
messages except the handler objects themselves.
"""
import itertools
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, InvalidStateError, ThreadPoolExecutor
from typing import Any, Self

from persistor.exceptions import NoHandlerFound

__all__ = [
    'EventBus',
    'Message',
]

logger = logging.getLogger(__name__)

Handler = Callable[['Message'], None]


class Message:
    """A delivered request and the means to answer it.

    Attributes:
        address: Address the message was sent to.
        body: Request document.
    """

    def __init__(self, address: str, body: Any, future: Future) -> None:
        self.address = address
        self.body = body
        self._future = future

    @property
    def replied(self) -> bool:
        return self._future.done()

    def reply(self, body: Any = None) -> None:
        """Complete the sender's future with `body`. Only the first reply counts."""
        if self._future.done():
            logger.warning(f'Ignoring second reply to message on {self.address}')
            return
        try:
            self._future.set_result(body)
        except InvalidStateError:
            # Lost a race with a concurrent reply
            logger.warning(f'Ignoring second reply to message on {self.address}')


class EventBus:
    """Addressable request/reply dispatch via ThreadPoolExecutor.

    Parameters:
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self.max_workers = max_workers
        self._handlers: dict[str, list[Handler]] = {}
        self._cursors: dict[str, itertools.count] = {}
        self._lock = threading.RLock()
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='persistor-bus')

    @classmethod
    def from_options(cls, options: Any) -> Self:
        """Build a bus sized by `options.workers`."""
        return cls(max_workers=options.workers)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_handler(self, address: str, handler: Handler) -> None:
        """Register `handler` to receive messages sent to `address`."""
        with self._lock:
            self._handlers.setdefault(address, []).append(handler)
            self._cursors.setdefault(address, itertools.count())
        logger.debug(f'Registered handler at {address}')

    def unregister_handler(self, address: str, handler: Handler) -> None:
        """Remove `handler` from `address`; unknown handlers are ignored."""
        with self._lock:
            handlers = self._handlers.get(address, [])
            if handler in handlers:
                handlers.remove(handler)
                logger.debug(f'Unregistered handler at {address}')
            if not handlers:
                self._handlers.pop(address, None)
                self._cursors.pop(address, None)

    def handlers(self, address: str) -> list[Handler]:
        with self._lock:
            return list(self._handlers.get(address, []))

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def send(self, address: str, body: Any) -> Future:
        """Deliver `body` to one handler at `address`.

        Returns a Future holding the reply. It fails with NoHandlerFound when
        nothing is registered at the address, and with the handler's exception
        when the handler raises.
        """
        future: Future = Future()
        with self._lock:
            if self._executor is None:
                raise RuntimeError('EventBus is closed')
            handlers = self._handlers.get(address)
            if not handlers:
                future.set_exception(NoHandlerFound(address))
                return future
            handler = handlers[next(self._cursors[address]) % len(handlers)]
            message = Message(address, body, future)
            self._executor.submit(self._deliver, handler, message)
        return future

    def request(self, address: str, body: Any, timeout: float | None = None) -> Any:
        """Send and block for the reply body."""
        return self.send(address, body).result(timeout=timeout)

    def close(self) -> None:
        """Shutdown the worker pool, waiting for messages in flight."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
            logger.debug('EventBus closed')

    @staticmethod
    def _deliver(handler: Handler, message: Message) -> None:
        try:
            handler(message)
        except Exception as e:
            logger.exception(f'Handler at {message.address} failed')
            if not message.replied:
                message._future.set_exception(e)
            return
        if not message.replied:
            message.reply(None)
