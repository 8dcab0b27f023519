"""Row translation: one driver row in, one output document out."""
import logging
from collections.abc import Iterable
from typing import Any

from persistor.adapters.column_info import Column, describe_column
from persistor.adapters.structure import create_row_adapter
from persistor.adapters.translate import translate_value

logger = logging.getLogger(__name__)


def translate_row(row: Any, columns: list[Column] | None = None) -> dict[str, Any]:
    """Translate a row into a document keyed by column name.

    Null columns are left out of the document entirely. Values without a
    document representation are left out as well and logged.

    Args:
        row: Driver row (namedtuple, tuple or dict)
        columns: Result set columns, used for column order and diagnostics

    Returns
        Dictionary mapping column names to translated values
    """
    column_names = Column.get_names(columns) if columns else None
    document = {}
    for name, value in create_row_adapter(row, column_names).items():
        if value is None:
            continue
        result = translate_value(value)
        if result.ok:
            document[name] = result.value
        else:
            logger.warning(f'[{result.category.__name__}] Could not add value of column '
                           f'{describe_column(columns, name)}: {result.reason}')
    return document


def translate_rows(rows: Iterable[Any], columns: list[Column] | None = None) -> list[dict[str, Any]]:
    """Translate rows in order, one document per row.
    """
    return [translate_row(row, columns) for row in rows]
