"""
Row structure adapters to provide one interface over the driver's row factories.

The driver hands rows back as namedtuples (the default `named_tuple_factory`),
plain tuples (`tuple_factory`) or dicts (`dict_factory`, `ordered_dict_factory`).
These adapters only map a row onto ordered `(column name, value)` pairs. They do
NOT convert values; that is the job of the value translator.
"""
from collections.abc import Iterator, Mapping
from typing import Any


def create_row_adapter(row, column_names=None):
    """
    Factory function for creating row adapters.

    Args:
        row: Driver row to adapt
        column_names: Column names in result order, needed for plain tuple rows

    Returns
        Appropriate row adapter instance
    """
    return RowStructureAdapter.create(row, column_names)


class RowStructureAdapter:
    """Base adapter for driver row objects providing a consistent interface"""

    @staticmethod
    def create(row, column_names=None):
        """Factory method to create the appropriate adapter for the row type"""
        if isinstance(row, Mapping):
            return MappingRowAdapter(row, column_names)
        if hasattr(row, '_fields'):
            return NamedTupleRowAdapter(row, column_names)
        return SequenceRowAdapter(row, column_names)

    def __init__(self, row: Any, column_names: list[str] | None = None):
        self.row = row
        self.column_names = column_names

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield `(column name, value)` pairs in column order"""
        raise NotImplementedError('Subclasses must implement items method')

    def to_dict(self) -> dict[str, Any]:
        """Convert row to a dictionary without converting values"""
        return dict(self.items())


class MappingRowAdapter(RowStructureAdapter):
    """Adapter for dict rows from `dict_factory` / `ordered_dict_factory`

    Dict rows keep insertion order, which is the result column order. When
    column names are supplied they decide the order instead.
    """

    def items(self) -> Iterator[tuple[str, Any]]:
        if self.column_names is None:
            yield from self.row.items()
            return
        for name in self.column_names:
            yield name, self.row.get(name)


class NamedTupleRowAdapter(RowStructureAdapter):
    """Adapter for rows from the driver's default `named_tuple_factory`

    The namedtuple field names are cleaned up versions of the column names
    (the driver rewrites names that are not valid identifiers), so the
    result set's column names are preferred when given.
    """

    def items(self) -> Iterator[tuple[str, Any]]:
        names = self.column_names or self.row._fields
        yield from zip(names, self.row)


class SequenceRowAdapter(RowStructureAdapter):
    """Adapter for plain tuple rows from `tuple_factory`"""

    def items(self) -> Iterator[tuple[str, Any]]:
        if self.column_names is None:
            # No metadata, name columns by position
            yield from ((f'column_{i}', v) for i, v in enumerate(self.row))
            return
        yield from zip(self.column_names, self.row)
