import logging
import pathlib
import site

import pytest
from persistor import connection

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def clear_cluster_registry():
    """Forget tracked clusters before and after each test to ensure test isolation."""
    connection._cluster_registry.clear()
    yield
    connection._cluster_registry.clear()


@pytest.fixture
def caplog_warnings(caplog):
    """Capture persistor warnings and above."""
    caplog.set_level(logging.WARNING, logger='persistor')
    return caplog


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
]
