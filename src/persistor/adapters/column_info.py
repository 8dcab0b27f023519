"""
Column definitions for driver result sets.
"""
import logging
from typing import Any, Self

logger = logging.getLogger(__name__)


class Column:
    """Name and CQL type of one result column

    The driver resolves and deserializes values itself, so the type is kept
    only to describe the column (e.g. in diagnostics for skipped values).
    Column types are the driver's `cassandra.cqltypes` classes, which
    render themselves as CQL through `cql_parameterized_type()`.
    """

    def __init__(self, name: str, cql_type: Any = None):
        self.name = name
        self.cql_type = cql_type

    def __repr__(self):
        return f'Column(name={self.name!r}, type={self.type_name})'

    def __eq__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return self.name == other.name and self.cql_type == other.cql_type

    def __hash__(self):
        return hash((self.name, self.cql_type))

    @property
    def type_name(self) -> str | None:
        """CQL rendering of the column type, e.g. `map<text, list<uuid>>`."""
        if self.cql_type is None:
            return None
        if hasattr(self.cql_type, 'cql_parameterized_type'):
            return self.cql_type.cql_parameterized_type()
        return getattr(self.cql_type, 'typename', None) or str(self.cql_type)

    @classmethod
    def from_result_set(cls, result_set: Any) -> list[Self]:
        """Build columns from `ResultSet.column_names` and `column_types`.

        Returns an empty list when the result set carries no metadata
        (e.g. for statements that return no rows).
        """
        names = getattr(result_set, 'column_names', None) or []
        types = getattr(result_set, 'column_types', None) or []
        if types and len(types) != len(names):
            logger.debug(f'Column type count {len(types)} does not match name count {len(names)}')
            types = []
        if not types:
            return [cls(name) for name in names]
        return [cls(name, cql_type) for name, cql_type in zip(names, types)]

    @staticmethod
    def get_names(columns: list['Column']) -> list[str]:
        """Get column names from a list of Columns"""
        return [c.name for c in columns]

    @staticmethod
    def get_column_by_name(columns: list['Column'], name: str) -> 'Column | None':
        """Find a column by name"""
        for column in columns:
            if column.name == name:
                return column
        return None


def describe_column(columns: list[Column] | None, name: str) -> str:
    """Column name with its CQL type when known, for log messages.
    """
    column = Column.get_column_by_name(columns or [], name)
    if column is None or column.type_name is None:
        return name
    return f'{name} ({column.type_name})'
