"""
The main kubewire module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual names.

from kubewire.clients.dispatching import (
    Operation,
    ResourceFactory,
    materialize,
    run_operation,
)
from kubewire.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APITransportError,
)
from kubewire.clients.watching import (
    WatchCallback,
    WatchEvent,
    stream_events,
    watch,
)
from kubewire.cluster import (
    KubernetesCluster,
    UnversionedClusterError,
    VersionProbeError,
)
from kubewire.engines.loggers import (
    LogFormat,
    ResourceLogger,
    configure,
)
from kubewire.helpers.typedefs import (
    Logger,
)
from kubewire.helpers.versions import (
    version as __version__,
)
from kubewire.kinds.base import (
    ClusterlessResourceError,
    Resource,
)
from kubewire.kinds.jobs import (
    Job,
)
from kubewire.kinds.traits import (
    HasAnnotations,
    HasLabels,
    HasSpec,
    HasStatus,
)
from kubewire.structs.bodies import (
    RawBody,
    RawInput,
    RawList,
    RawMeta,
)
from kubewire.structs.configuration import (
    ClientSettings,
    NetworkingSettings,
    WatchingSettings,
)
from kubewire.structs.lists import (
    ResourceList,
)
from kubewire.structs.versions import (
    InvalidVersionError,
    SemanticVersion,
)

__all__ = [
    'KubernetesCluster', 'UnversionedClusterError', 'VersionProbeError',
    'Operation', 'ResourceFactory', 'materialize', 'run_operation',
    'WatchCallback', 'WatchEvent', 'stream_events', 'watch',
    'APIError', 'APIClientError', 'APIServerError', 'APITransportError',
    'APIUnauthorizedError', 'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'configure', 'LogFormat', 'ResourceLogger', 'Logger',
    'Resource', 'ClusterlessResourceError', 'ResourceList', 'Job',
    'HasLabels', 'HasAnnotations', 'HasSpec', 'HasStatus',
    'RawBody', 'RawMeta', 'RawList', 'RawInput',
    'ClientSettings', 'NetworkingSettings', 'WatchingSettings',
    'SemanticVersion', 'InvalidVersionError',
]
