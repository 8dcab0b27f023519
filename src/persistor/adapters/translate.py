"""
Translation of driver values into document values.

The driver has already deserialized every column into a Python object. This
module maps those objects onto the small document type system used for
replies: numbers, strings, booleans, `bytes`, lists and dicts.

It provides:
1. `classify()`, which tags a native value with its `ValueKind`
2. `translate_value()`, a total match over `ValueKind` returning either
   `Translated(value)` or `Skipped(reason)`
3. `render_temporal()`, the canonical string form of dates and times

Kinds are checked in a fixed priority order and the first match wins:

    NUMBER, TEXT, BOOLEAN, TEMPORAL, UUID, BYTES, COLLECTION, MAP, UNKNOWN

Collections and maps recurse through the same rules, so a `map<text,
frozen<list<uuid>>>` becomes a dict of lists of UUID strings. Values that
cannot be represented are skipped and logged rather than failing the row.

Usage:
    result = translate_value(value)
    if result.ok:
        document[name] = result.value

>>> translate_value(42)
Translated(value=42)
>>> translate_value({1: ['a', 'b']}).value
{'1': ['a', 'b']}
"""
import datetime
import enum
import logging
import numbers
import uuid
from collections.abc import Mapping, Set
from dataclasses import dataclass
from typing import Any

import numpy as np
from cassandra.util import Date, SortedSet, Time

from persistor.exceptions import TranslationWarning

logger = logging.getLogger(__name__)

COLLECTION_TYPES = (list, tuple, Set, SortedSet)
BYTES_TYPES = (bytes, bytearray, memoryview)
TEMPORAL_TYPES = (datetime.datetime, datetime.date, datetime.time, Date, Time)


class ValueKind(enum.Enum):
    """Document category of a native driver value"""

    NUMBER = 'number'
    TEXT = 'text'
    BOOLEAN = 'boolean'
    TEMPORAL = 'temporal'
    UUID = 'uuid'
    BYTES = 'bytes'
    COLLECTION = 'collection'
    MAP = 'map'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class Translated:
    """A value that made it into the document"""

    value: Any
    ok = True


@dataclass(frozen=True)
class Skipped:
    """A value left out of the document, with the reason why"""

    reason: str
    category = TranslationWarning
    ok = False


def _is_udt(value: Any) -> bool:
    """User-defined type values come back as namedtuple-like objects."""
    return isinstance(value, tuple) and hasattr(value, '_asdict')


def classify(value: Any) -> ValueKind:
    """Tag a native value with its document category.

    `bool` is an `int` subclass, so it is kept out of NUMBER explicitly.

    >>> classify(True)
    <ValueKind.BOOLEAN: 'boolean'>
    >>> classify(3.5)
    <ValueKind.NUMBER: 'number'>
    >>> classify(frozenset({1}))
    <ValueKind.COLLECTION: 'collection'>
    """
    if isinstance(value, numbers.Number) and not isinstance(value, bool | np.bool_):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, bool | np.bool_):
        return ValueKind.BOOLEAN
    if isinstance(value, TEMPORAL_TYPES):
        return ValueKind.TEMPORAL
    if isinstance(value, uuid.UUID):
        return ValueKind.UUID
    if isinstance(value, BYTES_TYPES):
        return ValueKind.BYTES
    if _is_udt(value):
        return ValueKind.MAP
    if isinstance(value, COLLECTION_TYPES):
        return ValueKind.COLLECTION
    if isinstance(value, Mapping):
        return ValueKind.MAP
    return ValueKind.UNKNOWN


def render_temporal(value: Any) -> str:
    """Render a date/time value as an ISO 8601 string.

    CQL timestamps are UTC; the driver returns them naive, so naive datetimes
    are taken as UTC and every datetime is rendered with an explicit offset at
    millisecond precision.

    >>> render_temporal(datetime.datetime(2023, 5, 15, 14, 30, 45))
    '2023-05-15T14:30:45.000+00:00'
    >>> render_temporal(datetime.date(2023, 5, 15))
    '2023-05-15'
    >>> render_temporal(datetime.time(14, 30, 45))
    '14:30:45'
    """
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.UTC)
        else:
            value = value.astimezone(datetime.UTC)
        return value.isoformat(timespec='milliseconds')
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    if isinstance(value, Date):
        try:
            return value.date().isoformat()
        except ValueError:
            # Outside the range of datetime.date, keep the day count
            return str(value)
    if isinstance(value, Time):
        return value.time().isoformat()
    raise TypeError(f'Not a temporal value: {type(value).__name__}')


def _translate_number(value):
    if isinstance(value, np.generic):
        return Translated(value.item())
    return Translated(value)


def _translate_collection(value):
    items = []
    for element in value:
        if element is None:
            continue
        result = translate_value(element)
        if result.ok:
            items.append(result.value)
        else:
            logger.warning(f'Could not add collection element: {result.reason}')
    return Translated(items)


def _translate_map(value):
    if _is_udt(value):
        value = value._asdict()
    document = {}
    for key, element in value.items():
        if element is None:
            continue
        result = translate_value(element)
        if result.ok:
            # Keys rendering to the same string overwrite earlier entries
            document[str(key)] = result.value
        else:
            logger.warning(f'Could not add value of map key {key}: {result.reason}')
    return Translated(document)


def _translate_unknown(value):
    if hasattr(value, 'tolist'):
        try:
            listed = value.tolist()
        except (TypeError, ValueError) as e:
            return Skipped(f'{type(value).__name__} could not be listed: {e}')
        # 0-d arrays list to a bare scalar
        if not isinstance(listed, list):
            return translate_value(listed)
        return _translate_collection(listed)
    return Skipped(f'unsupported type {type(value).__name__}')


def translate_value(value: Any) -> Translated | Skipped:
    """Translate one native value into its document representation.

    Returns
        Translated with the document value, or Skipped with a reason when the
        value has no document representation
    """
    kind = classify(value)
    match kind:
        case ValueKind.NUMBER:
            return _translate_number(value)
        case ValueKind.TEXT:
            return Translated(value)
        case ValueKind.BOOLEAN:
            return Translated(bool(value))
        case ValueKind.TEMPORAL:
            return Translated(render_temporal(value))
        case ValueKind.UUID:
            return Translated(str(value))
        case ValueKind.BYTES:
            return Translated(bytes(value))
        case ValueKind.COLLECTION:
            return _translate_collection(value)
        case ValueKind.MAP:
            return _translate_map(value)
        case _:
            return _translate_unknown(value)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
