from dataclasses import dataclass, field

from libb import ConfigOptions

__all__ = [
    'PersistorOptions',
    'DEFAULT_ADDRESS',
]

DEFAULT_ADDRESS = 'vertx.cassandra.persistor'


@dataclass
class PersistorOptions(ConfigOptions):
    """Options

    Bus options:
    - address: Bus address the request handler is registered at
    - workers: Number of bus worker threads handling requests (default: 4)

    Cluster options:
    - hosts: Contact points used to discover the cluster
    - port: Native protocol port (default: 9042)
    - keyspace: Keyspace name (default: `vertxpersistor`)
    - bind_keyspace: Set the keyspace on the session when connecting (default: False)
    - protocol_version: Native protocol version, negotiated by the driver when None
    - connect_timeout: Seconds to wait when opening connections (default: 5)
    """
    address: str = DEFAULT_ADDRESS
    hosts: list[str] = field(default_factory=lambda: ['127.0.0.1'])
    port: int = 9042
    keyspace: str = 'vertxpersistor'
    bind_keyspace: bool = False
    protocol_version: int = None
    connect_timeout: float = 5
    workers: int = 4

    def __post_init__(self):
        if not self.address:
            raise ValueError('address must be a non-empty string')
        if isinstance(self.hosts, str):
            self.hosts = [h.strip() for h in self.hosts.split(',') if h.strip()]
        self.hosts = list(self.hosts or [])
        if not self.hosts:
            raise ValueError('hosts must name at least one contact point')
        if not 0 < int(self.port) < 65536:
            raise ValueError(f'port must be between 1 and 65535, got {self.port}')
        self.port = int(self.port)
        if self.workers < 1:
            raise ValueError(f'workers must be at least 1, got {self.workers}')
