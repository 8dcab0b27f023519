"""
Fixtures for Cassandra integration tests.

Tests here need a node at the `cassandra` setting in tests/config.py and are
skipped when none is reachable.
"""
import time

import config
import pytest
from persistor import EventBus, Persistor
from persistor.connection import connect
from persistor.exceptions import ConnectionFailure
from persistor.options import PersistorOptions


@pytest.fixture(scope='module')
def cs_options():
    return PersistorOptions(**config.cassandra)


@pytest.fixture(scope='module')
def cs_conn(cs_options):
    """Connected session, or skip when no node answers."""
    try:
        cn = connect(cs_options)
    except ConnectionFailure as e:
        pytest.skip(f'Cassandra not reachable: {e}')
    keyspace = cs_options.keyspace
    cn.execute(f"CREATE KEYSPACE IF NOT EXISTS {keyspace} WITH replication = "
               "{'class': 'SimpleStrategy', 'replication_factor': 1}")
    yield cn
    cn.execute(f'DROP KEYSPACE IF EXISTS {keyspace}')
    cn.close()


@pytest.fixture
def cs_persistor(cs_conn, cs_options):
    """Persistor on a fresh bus, sharing the module's session."""
    with EventBus.from_options(cs_options) as bus, \
            Persistor(bus, cs_options, session=cs_conn) as persistor:
        yield bus, persistor


@pytest.fixture
def test_table(cs_options):
    """Unique table name for isolation."""
    return f'{cs_options.keyspace}.type_test_{int(time.time() * 1000)}'
