"""
Statement building from request documents.

A request names either one CQL statement or an ordered list of them:

    {'action': 'raw', 'statement': 'SELECT * FROM ks.t'}
    {'action': 'raw', 'statements': ['INSERT ...', 'UPDATE ...']}

The text is passed to the driver verbatim. It is neither parsed nor validated
here; the database rejects invalid statements at execution.
"""
import logging
from collections.abc import Mapping
from typing import Any

from cassandra.query import BatchStatement, SimpleStatement, Statement

from persistor.exceptions import MalformedRequest

__all__ = [
    'build_statement',
]

logger = logging.getLogger(__name__)


def _read_statement(request: Mapping[str, Any]) -> str | None:
    statement = request.get('statement')
    if statement is not None and not isinstance(statement, str):
        raise TypeError(f'statement must be a string, got {type(statement).__name__}')
    return statement


def _read_statements(request: Mapping[str, Any]) -> list[str]:
    statements = request.get('statements')
    if statements is None:
        return []
    if not isinstance(statements, list | tuple):
        raise TypeError(f'statements must be a list, got {type(statements).__name__}')
    for i, stmt in enumerate(statements):
        if not isinstance(stmt, str):
            raise TypeError(f'statements[{i}] must be a string, got {type(stmt).__name__}')
    return list(statements)


def build_statement(request: Mapping[str, Any]) -> Statement:
    """Build the executable statement a request describes.

    A non-null `statement` wins and yields a `SimpleStatement`. Otherwise
    `statements` yields a `BatchStatement` with one sub-statement per entry, in
    order; no entries yields an empty batch.

    Raises
        MalformedRequest: the statement fields have the wrong shape
    """
    try:
        statement = _read_statement(request)
        if statement is not None:
            logger.debug(f'Built statement {statement!r}')
            return SimpleStatement(statement)

        texts = _read_statements(request)
        batch = BatchStatement()
        for text in texts:
            batch.add(SimpleStatement(text))
        logger.debug(f'Built batch of {len(texts)}: {texts}')
        return batch
    except Exception as e:
        logger.debug(f'Could not build statement: {e}')
        raise MalformedRequest() from e
