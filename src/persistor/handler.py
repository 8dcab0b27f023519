"""
Request handling for the persistor bus address.

Requests are dispatched on their `action`:

    raw   - execute `statement` or the batch in `statements` and reply with
            the rows as a list of documents

Replies are one of:

    [{'col': value, ...}, ...]                     rows
    {'status': 'ok'}                               success without rows
    {'status': 'error', 'message': '...'}          failure

A failed request gets exactly one error reply and never partial rows.
"""
import logging
import time
from collections.abc import Mapping
from typing import Any

from persistor.adapters.column_info import Column
from persistor.adapters.row import translate_rows
from persistor.bus import Message
from persistor.exceptions import ExecutionFailure, MissingAction
from persistor.exceptions import PersistorError, UnknownAction
from persistor.statement import build_statement

__all__ = [
    'RequestHandler',
    'ERROR_PREFIX',
    'ok_reply',
    'error_reply',
]

logger = logging.getLogger(__name__)

ERROR_PREFIX = '[Cassandra Persistor]'


def ok_reply() -> dict[str, str]:
    """Success acknowledgment without payload"""
    return {'status': 'ok'}


def error_reply(error: Exception | str) -> dict[str, str]:
    """Error payload carrying a human readable message"""
    return {'status': 'error', 'message': f'{ERROR_PREFIX} {error}'}


def _has_rows(result_set: Any) -> bool:
    """Whether the first page of the result set holds any row."""
    if result_set is None:
        return False
    current_rows = getattr(result_set, 'current_rows', None)
    if current_rows is None:
        return False
    return len(current_rows) > 0


class RequestHandler:
    """Bus handler executing CQL requests against one session.

    The session is injected and shared by every request; the handler never
    mutates it, only calls `execute`. It is the driver `Session` or a
    `CassandraConnection` wrapping one.
    """

    def __init__(self, session: Any) -> None:
        self.session = session
        self.calls = 0
        self.time = 0
        self._actions = {
            'raw': self.raw,
        }

    def __call__(self, message: Message) -> None:
        self.handle(message)

    def handle(self, message: Message) -> None:
        """Handle one bus message and reply to it."""
        message.reply(self.handle_request(message.body))

    def handle_request(self, request: Any) -> list[dict[str, Any]] | dict[str, str]:
        """Dispatch a request document and return the reply document.

        Never raises: every failure becomes an error reply.
        """
        start = time.time()
        try:
            action = self.dispatch(request)
            return action(request)
        except PersistorError as e:
            logger.info(f'Request failed: {e}')
            return error_reply(e)
        except Exception as e:
            logger.exception(f'Unexpected error handling request: {e}')
            return error_reply(e)
        finally:
            self.addcall(time.time() - start)

    def addcall(self, elapsed: float) -> None:
        self.time += elapsed
        self.calls += 1

    def dispatch(self, request: Any):
        """Resolve the action callable for a request.

        Raises
            MissingAction: the request has no action
            UnknownAction: no handler is defined for the action
        """
        action = request.get('action') if isinstance(request, Mapping) else None
        if action is None:
            raise MissingAction()
        try:
            return self._actions[action]
        except (KeyError, TypeError):
            raise UnknownAction(action) from None

    def raw(self, request: Mapping[str, Any]) -> list[dict[str, Any]] | dict[str, str]:
        """Execute raw CQL statement(s) and return the rows, if any, as documents."""
        statement = build_statement(request)

        try:
            result_set = self.session.execute(statement)
        except Exception as e:
            raise ExecutionFailure(str(e)) from e

        if not _has_rows(result_set):
            return ok_reply()

        columns = Column.from_result_set(result_set)
        documents = translate_rows(result_set, columns)
        logger.debug(f'Statement returned {len(documents)} rows')
        return documents
