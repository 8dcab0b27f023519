"""
Cassandra persistor: CQL over a request/reply bus.

Requests sent to the persistor's bus address describe one CQL statement or a
batch of them; the reply carries the result rows translated into plain
documents (lists, dicts, numbers, strings, booleans and bytes).

    with EventBus() as bus, Persistor(bus, PersistorOptions()) as p:
        rows = bus.request(p.address, {'action': 'raw', 'statement': 'SELECT ...'})

The building blocks can be used directly as well:
- translate_value(value): driver value to document value
- translate_row(row, columns): driver row to document
- build_statement(request): request to driver statement
"""
__version__ = '0.1.0'

from persistor.adapters import Column, Skipped, Translated, ValueKind
from persistor.adapters import classify, translate_row, translate_rows
from persistor.adapters import translate_value
from persistor.bus import EventBus, Message
from persistor.connection import CassandraConnection, connect
from persistor.exceptions import ConnectionFailure, ExecutionFailure
from persistor.exceptions import MalformedRequest, MissingAction
from persistor.exceptions import NoHandlerFound, PersistorError
from persistor.exceptions import TranslationWarning, UnknownAction
from persistor.handler import RequestHandler
from persistor.options import PersistorOptions
from persistor.persistor import Persistor
from persistor.statement import build_statement

__all__ = [
    'Persistor',
    'PersistorOptions',
    'EventBus',
    'Message',
    'RequestHandler',
    'CassandraConnection',
    'connect',
    'build_statement',
    'Column',
    'ValueKind',
    'Translated',
    'Skipped',
    'classify',
    'translate_value',
    'translate_row',
    'translate_rows',
    'PersistorError',
    'MissingAction',
    'UnknownAction',
    'MalformedRequest',
    'ExecutionFailure',
    'ConnectionFailure',
    'NoHandlerFound',
    'TranslationWarning',
]
