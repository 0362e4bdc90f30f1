"""
The operations on the resources and their mapping to the HTTP requests.

Every operation is identified by its name (see `Operation`) and is performed
on an API path (e.g. ``/api/v1/namespaces/default/pods/pod1``), optionally
with a payload: a serialized JSON document for the creations & replacements,
or a callback for the watching.

The responses are materialized into typed resources of the kind requested:
the dispatcher itself is kind-agnostic, the kinds provide their own factories.
The resources that come from the server are marked as "synced", i.e. as having
the same state in memory as the server has confirmed -- unlike the resources
built locally and never sent to the server yet.

The watch-streams are served by `kubewire.clients.watching`, but the watched
resources are NOT marked as synced: they were not created or replaced by us.
"""
import enum
import logging
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, TypeVar, Union

from typing_extensions import Protocol

from kubewire.clients import api, errors, watching
from kubewire.structs import bodies, lists

if TYPE_CHECKING:
    from kubewire.cluster import KubernetesCluster

logger = logging.getLogger(__name__)


class SyncableResource(Protocol):
    def synced(self) -> Any: ...


_R = TypeVar('_R', bound=SyncableResource)

ResourceFactory = Callable[["KubernetesCluster", Any], _R]


class Operation(str, enum.Enum):
    """ Named operations, as requested by the callers. """
    GET = 'get'
    CREATE = 'create'
    REPLACE = 'replace'
    DELETE = 'delete'
    WATCH = 'watch'


VERBS: Mapping[Operation, str] = {
    Operation.GET: 'GET',
    Operation.CREATE: 'POST',
    Operation.REPLACE: 'PUT',
    Operation.DELETE: 'DELETE',
    Operation.WATCH: 'GET',  # but served by the watch-streams, not by the regular requests.
}


def parse_operation(operation: Union[str, Operation]) -> Optional[Operation]:
    """ Recognise the operation by its name, or return ``None`` if unknown. """
    if isinstance(operation, Operation):
        return operation
    try:
        return Operation(str(operation).lower())
    except ValueError:
        return None


def resolve_verb(operation: Union[str, Operation]) -> str:
    """
    Get the HTTP verb of the operation.

    The unknown operations fall back to the GET operation's verb:
    this is a defined default, not an error.
    """
    parsed = parse_operation(operation)
    if parsed is None:
        logger.debug(f"Unknown operation {operation!r}; using the verb of {Operation.GET.value!r}.")
        return VERBS[Operation.GET]
    return VERBS[parsed]


def materialize(
        factory: ResourceFactory[_R],
        cluster: "KubernetesCluster",
        body: Union[None, str, bytes],
) -> Union[_R, lists.ResourceList[_R]]:
    """
    Turn the raw body of a response into a typed resource or a list of them.

    The decoding is lenient: the malformed JSON is treated as an absent document
    (``None``), and the factory decides how to build a resource from nothing.

    If the document has the ``items`` field, it is a list, and every item
    becomes a resource on its own. Otherwise, the document is one resource.
    Either way, all the resources are marked as synced with the server.
    """
    data = body.encode('utf-8') if isinstance(body, str) else body or b''
    document = errors.decode_leniently(data)
    if document is None and data.strip():
        logger.debug(f"Undecodable response body is treated as absent: {data[:100]!r}")

    if bodies.is_list(document):
        resources = []
        for item in bodies.items_of(document):
            resource = factory(cluster, item)
            resource.synced()
            resources.append(resource)
        metadata = document.get('metadata')
        return lists.ResourceList(resources, metadata=metadata if isinstance(metadata, Mapping) else None)

    resource = factory(cluster, document)
    resource.synced()
    return resource


async def run_operation(
        cluster: "KubernetesCluster",
        operation: Union[str, Operation],
        path: str,
        payload: Union[None, str, watching.WatchCallback[_R, Any]] = None,
        *,
        factory: ResourceFactory[_R],
        query: Optional[Mapping[str, Any]] = None,
) -> Any:
    """
    Run an operation on an API path with a payload.

    For the watch-operation, the payload is a callback, and the result is
    either the callback's first non-``None`` result, or ``False`` if the stream
    is over (see `watching.watch`). No regular request is made in that case.

    For all other operations, the payload is an optional serialized document,
    and the result is the materialized response: a resource or a list of them.
    """
    url = cluster.get_callable_url(path, query)

    if parse_operation(operation) is Operation.WATCH:
        if not callable(payload):
            raise TypeError(f"Watching requires a callback, got {payload!r}.")
        return await watching.watch(cluster, factory, url, payload)

    if callable(payload):
        raise TypeError(f"Only watching accepts callbacks, got {payload!r} for {operation!r}.")

    verb = resolve_verb(operation)
    body = await api.read(
        method=verb,
        url=url,
        payload=payload,
        session=cluster.session,
        settings=cluster.settings,
    )
    return materialize(factory, cluster, body)
