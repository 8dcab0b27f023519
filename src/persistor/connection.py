"""
Cassandra connection handling.

This module provides:
1. The `connect()` function for creating a connected session
2. The `CassandraConnection` class that wraps a driver `Session`
3. Cluster creation and tracking through a thread-safe registry, so clusters
   still open at interpreter exit are shut down

The driver's `Session` pools connections to every host and is safe to share
between threads, so one connection serves all concurrent requests.
"""
import atexit
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import fields
from typing import Any, Self

from cassandra.cluster import Cluster, Session

from persistor.exceptions import ConnectionFailure
from persistor.options import PersistorOptions

from libb import load_options

__all__ = [
    'CassandraConnection',
    'connect',
    'create_cluster',
    'shutdown_all_clusters',
]

logger = logging.getLogger(__name__)

_cluster_registry: dict[int, Cluster] = {}
_cluster_registry_lock = threading.RLock()


def create_cluster(options: PersistorOptions,
                   cluster_factory: Callable[..., Cluster] | None = None,
                   **kwargs: Any) -> Cluster:
    """Create a driver Cluster for the given options and track it.
    """
    cluster_kwargs: dict[str, Any] = {
        'contact_points': list(options.hosts),
        'port': options.port,
        'connect_timeout': options.connect_timeout,
    }
    if options.protocol_version is not None:
        cluster_kwargs['protocol_version'] = options.protocol_version
    cluster_kwargs.update(kwargs)

    try:
        cluster = (cluster_factory or Cluster)(**cluster_kwargs)
    except Exception as e:
        logger.error(f'Cannot add hosts {options.hosts}: {e}')
        raise ConnectionFailure(f'Cannot add hosts {options.hosts}: {e}') from e

    with _cluster_registry_lock:
        _cluster_registry[id(cluster)] = cluster
    logger.debug(f'Created new cluster for {options.hosts}:{options.port}')

    return cluster


def _shutdown_cluster(cluster: Cluster) -> None:
    with _cluster_registry_lock:
        _cluster_registry.pop(id(cluster), None)
    cluster.shutdown()


def shutdown_all_clusters() -> None:
    """Shutdown all clusters still open.
    """
    with _cluster_registry_lock:
        clusters = list(_cluster_registry.values())
        _cluster_registry.clear()
    for cluster in clusters:
        cluster.shutdown()
    logger.debug('All clusters shut down')


atexit.register(shutdown_all_clusters)


def log_cluster_metadata(cluster: Cluster) -> None:
    """Log the cluster name and the datacenter and rack of every known host.
    """
    metadata = cluster.metadata
    logger.info(f'Connected to cluster: {metadata.cluster_name}')
    for host in metadata.all_hosts():
        logger.info(f'DC: {host.datacenter} - Host: {host.address} - Rack: {host.rack}')


class CassandraConnection:
    """Wraps a driver Session to track calls and execution time

    This class provides a thin wrapper around the driver session that:
    1. Tracks statement execution counts and timing
    2. Supports context manager protocol for explicit resource management
    3. Delegates attribute access to the driver session
    """

    def __init__(self, session: Session, cluster: Cluster | None = None,
                 options: PersistorOptions | None = None) -> None:
        self.session = session
        self.cluster = cluster if cluster is not None else getattr(session, 'cluster', None)
        self.options = options
        self.calls = 0
        self.time = 0
        self._closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        """Delegate attribute access to the driver session.
        """
        return getattr(self.session, name)

    @property
    def closed(self) -> bool:
        return self._closed

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    def execute(self, statement: Any, *args: Any, **kwargs: Any) -> Any:
        """Execute a statement and return the driver ResultSet.
        """
        start = time.time()
        try:
            return self.session.execute(statement, *args, **kwargs)
        finally:
            self.addcall(time.time() - start)

    def close(self) -> None:
        """Shutdown the session, then its cluster.
        """
        if self.closed:
            return
        self._closed = True
        try:
            self.session.shutdown()
        finally:
            if self.cluster is not None:
                _shutdown_cluster(self.cluster)
        logger.debug(f'Connection closed: {self.calls} statements in {self.time:.2f}s '
                     f'(avg: {self.time/max(1, self.calls):.3f}s per statement)')


@load_options(cls=PersistorOptions)
def connect(options: PersistorOptions | dict[str, Any] | str,
            config: Any | None = None, **kw: Any) -> CassandraConnection:
    """Connect to a Cassandra cluster

    Args:
        options: Can be:
                - PersistorOptions object
                - String name of a setting in the configuration
                - Dictionary of options
                - Options specified as keyword arguments
        config: Configuration object (for loading from config files)
        **kw: Additional keyword arguments to override options

    Returns
        CassandraConnection wrapping the connected session

    Raises
        ConnectionFailure: the cluster could not be built or reached
    """
    if isinstance(options, PersistorOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options_func = load_options(cls=PersistorOptions)(lambda o, c: o)
        options = options_func(options, config, **kw)

    cluster = create_cluster(options)

    keyspace = options.keyspace if options.bind_keyspace else None
    try:
        session = cluster.connect(keyspace)
    except Exception as e:
        logger.error(f'Cannot connect/get session from Cassandra: {e}')
        _shutdown_cluster(cluster)
        raise ConnectionFailure(f'Cannot connect/get session from Cassandra: {e}') from e

    log_cluster_metadata(cluster)
    return CassandraConnection(session, cluster, options)
