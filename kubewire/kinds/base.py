import copy
import json
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, MutableMapping, Optional, TypeVar

from kubewire.clients import watching
from kubewire.structs import dicts, lists

if TYPE_CHECKING:
    from kubewire.cluster import KubernetesCluster

_R = TypeVar('_R', bound="Resource")


class ClusterlessResourceError(Exception):
    """ Raised when an API operation is requested on a resource without a cluster. """


class Resource:
    """
    A generic resource of a kind, built from a raw document.

    The resources built locally are not "synced": they have no state confirmed
    by the server yet. The resources received from the server via the regular
    operations are marked as synced, i.e. their last known server state is
    the same as the in-memory state (until it is modified locally).
    """

    kind: ClassVar[Optional[str]] = None
    default_version: ClassVar[str] = 'v1'
    plural: ClassVar[Optional[str]] = None
    namespaceable: ClassVar[bool] = False

    def __init__(
            self,
            cluster: Optional["KubernetesCluster"] = None,
            attributes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__()
        self.cluster = cluster
        self._attributes: Dict[str, Any] = (
            copy.deepcopy(dict(attributes)) if isinstance(attributes, Mapping) else {})
        self._synced_attributes: Optional[Dict[str, Any]] = None
        if self.kind is not None:
            self._attributes.setdefault('kind', self.kind)
        self._attributes.setdefault('apiVersion', self.default_version)
        if self.namespaceable:
            if not isinstance(self._attributes.get('metadata'), MutableMapping):
                self._attributes['metadata'] = {}  # absent, null, or garbage
            self._attributes['metadata'].setdefault('namespace', 'default')

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.namespace or ""}/{self.name or ""}>'

    #
    # Synchronisation with the server.
    #

    def synced(self: _R) -> _R:
        """ Remember the current state as the last state confirmed by the server. """
        self._synced_attributes = copy.deepcopy(self._attributes)
        return self

    @property
    def is_synced(self) -> bool:
        return self._synced_attributes is not None

    @property
    def is_modified(self) -> bool:
        """ Whether the resource was changed locally since it was last synced. """
        return self._synced_attributes != self._attributes

    #
    # Attributes.
    #

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._attributes)

    def to_json(self) -> str:
        return json.dumps(self._attributes)

    def get_attribute(self, field: dicts.FieldSpec, default: Any = None) -> Any:
        return dicts.resolve(self._attributes, field, default)

    def set_attribute(self: _R, field: dicts.FieldSpec, value: Any) -> _R:
        dicts.ensure(self._attributes, field, value)
        return self

    def remove_attribute(self: _R, field: dicts.FieldSpec) -> _R:
        dicts.remove(self._attributes, field)
        return self

    @property
    def api_version(self) -> str:
        return self._attributes.get('apiVersion', self.default_version)

    @property
    def name(self) -> Optional[str]:
        return self.get_attribute('metadata.name')

    @property
    def namespace(self) -> Optional[str]:
        return self.get_attribute('metadata.namespace') if self.namespaceable else None

    @property
    def identifier(self) -> Optional[str]:
        return self.name

    @property
    def resource_version(self) -> Optional[str]:
        return self.get_attribute('metadata.resourceVersion')

    def set_name(self: _R, name: str) -> _R:
        return self.set_attribute('metadata.name', name)

    def set_namespace(self: _R, namespace: str) -> _R:
        if not self.namespaceable:
            raise TypeError(f"{self.__class__.__name__} is not namespaced.")
        return self.set_attribute('metadata.namespace', namespace)

    #
    # API paths.
    #

    def _api_prefix(self) -> str:
        # The core API group has no group name: "v1". Others are "group/version".
        return f'/api/{self.api_version}' if '/' not in self.api_version else f'/apis/{self.api_version}'

    def _plural(self) -> str:
        if self.plural is not None:
            return self.plural
        if self.kind is None:
            raise TypeError(f"{self.__class__.__name__} has neither a kind nor a plural name.")
        return f'{self.kind.lower()}s'

    def _namespace_part(self) -> str:
        return f'/namespaces/{self.namespace}' if self.namespaceable else ''

    def all_resources_path(self) -> str:
        return f'{self._api_prefix()}{self._namespace_part()}/{self._plural()}'

    def resource_path(self) -> str:
        return f'{self.all_resources_path()}/{self.identifier}'

    def all_resources_watch_path(self) -> str:
        return f'{self._api_prefix()}/watch/{self._plural()}'

    def resource_watch_path(self) -> str:
        return f'{self._api_prefix()}/watch{self._namespace_part()}/{self._plural()}/{self.identifier}'

    #
    # API operations.
    #

    def _require_cluster(self) -> "KubernetesCluster":
        if self.cluster is None:
            raise ClusterlessResourceError(f"{self!r} is not bound to any cluster.")
        return self.cluster

    async def get(self: _R, *, query: Optional[Mapping[str, Any]] = None) -> _R:
        cluster = self._require_cluster()
        return await cluster.run_operation('get', self.resource_path(),
                                           factory=type(self), query=query)

    async def all(self: _R, *, query: Optional[Mapping[str, Any]] = None) -> lists.ResourceList[_R]:
        cluster = self._require_cluster()
        return await cluster.run_operation('get', self.all_resources_path(),
                                           factory=type(self), query=query)

    async def create(self: _R, *, query: Optional[Mapping[str, Any]] = None) -> _R:
        cluster = self._require_cluster()
        return await cluster.run_operation('create', self.all_resources_path(), self.to_json(),
                                           factory=type(self), query=query)

    async def replace(self: _R, *, query: Optional[Mapping[str, Any]] = None) -> _R:
        cluster = self._require_cluster()
        return await cluster.run_operation('replace', self.resource_path(), self.to_json(),
                                           factory=type(self), query=query)

    async def delete(self: _R, *, query: Optional[Mapping[str, Any]] = None) -> Any:
        cluster = self._require_cluster()
        return await cluster.run_operation('delete', self.resource_path(),
                                           factory=type(self), query=query)

    async def watch(
            self: _R,
            callback: watching.WatchCallback[_R, Any],
            *,
            query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        cluster = self._require_cluster()
        return await cluster.run_operation('watch', self.resource_watch_path(), callback,
                                           factory=type(self), query=query)

    async def watch_all(
            self: _R,
            callback: watching.WatchCallback[_R, Any],
            *,
            query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        cluster = self._require_cluster()
        return await cluster.run_operation('watch', self.all_resources_watch_path(), callback,
                                           factory=type(self), query=query)
