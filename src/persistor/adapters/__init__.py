"""
Result adapters package.

This package provides the following components:

- column_info: Column definitions (name and CQL type) of a result set
- structure: Row structure mapping over the driver's row factories (no conversion)
- translate: Native driver value to document value translation
- row: Row to document translation built on the two above

Translation principles:
1. Driver → Python: handled SOLELY by the driver's deserializers
2. Python → document: handled by `translate_value`, one priority-ordered
   match over the value's kind, recursing into collections and maps
"""

from persistor.adapters.column_info import Column
from persistor.adapters.row import translate_row, translate_rows
from persistor.adapters.structure import RowStructureAdapter, create_row_adapter
from persistor.adapters.translate import Skipped, Translated, ValueKind
from persistor.adapters.translate import classify, render_temporal, translate_value

__all__ = [
    'Column',
    'RowStructureAdapter',
    'create_row_adapter',
    'ValueKind',
    'Translated',
    'Skipped',
    'classify',
    'render_temporal',
    'translate_value',
    'translate_row',
    'translate_rows',
]
