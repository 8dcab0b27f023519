"""
Native value fixtures for persistor tests.

Values are shaped as the driver deserializes each CQL type, so translation is
tested against what a real result set carries.
"""
import datetime
import decimal
import uuid

import pytest
from cassandra.util import Date, Duration, OrderedMap, SortedSet
from cassandra.util import Time


@pytest.fixture(scope='module')
def value_dict():
    """Return a dictionary of native values for the major CQL types"""
    return {
        # Numbers
        'int_value': 42,
        'bigint_value': 9223372036854775807,  # Max int64
        'varint_value': 2 ** 100,
        'double_value': 3.141592653589793,
        'decimal_value': decimal.Decimal('123456.789123'),

        # Text
        'text_value': 'Lorem ipsum dolor sit amet',
        'inet_value': '10.0.0.1',

        # Boolean
        'bool_true': True,
        'bool_false': False,

        # Date and time
        'timestamp_value': datetime.datetime(2023, 5, 15, 14, 30, 45, 123000),
        'date_value': Date(datetime.date(2023, 5, 15)),
        'time_value': Time(datetime.time(14, 30, 45)),

        # Identifiers
        'uuid_value': uuid.UUID('123e4567-e89b-12d3-a456-426614174000'),
        'timeuuid_value': uuid.UUID('d2177dd0-eaa2-11de-a572-001b779c76e3'),

        # Binary data
        'blob_value': b'\x00\x01\x02\xff',

        # Collections
        'list_value': [1, 2, 3],
        'set_value': SortedSet(['a', 'b', 'c']),
        'map_value': OrderedMap([('x', 1), ('y', 2)]),

        # Unsupported
        'duration_value': Duration(1, 2, 3),
    }
