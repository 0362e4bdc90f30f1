"""
The cluster context: where the API is, how to talk to it, and its version.

The context is created once per API server and is shared by reference
by all the operations and the resources of that server. It keeps an HTTP
session open for all the requests, so it must be closed when not needed::

    async with KubernetesCluster('http://127.0.0.1', 8080) as cluster:
        pod = await cluster.run_operation('get', '/api/v1/namespaces/default/pods/pod1',
                                          factory=Pod)

The remote version is probed once, either explicitly via `load_version`,
or implicitly when entering the context manager or via `KubernetesCluster.connect`.
If the probe fails, the cluster remains "unversioned" (unless the probing is strict):
the regular operations still work, but the version comparisons raise errors.
"""
import asyncio
import logging
import urllib.parse
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Type, TypeVar, Union

import aiohttp

from kubewire.clients import api, dispatching, errors, watching
from kubewire.structs import bodies, configuration, versions

logger = logging.getLogger(__name__)

_R = TypeVar('_R', bound=dispatching.SyncableResource)
_C = TypeVar('_C', bound="KubernetesCluster")


class VersionProbeError(Exception):
    """ Raised when the cluster's version cannot be retrieved or parsed (strict mode only). """


class UnversionedClusterError(Exception):
    """ Raised when the version is needed, but the cluster's version is unknown. """


class KubernetesCluster:
    """
    A context for the operations on one API server.

    The HTTP session is created on the first request (it needs a running loop)
    unless provided explicitly; the explicitly provided sessions are not closed
    by the cluster, since they belong to the caller.
    """

    def __init__(
            self,
            url: str,
            port: int = 8080,
            *,
            settings: Optional[configuration.ClientSettings] = None,
            session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__()
        self.url = url.rstrip('/')
        self.port = port
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self._session = session
        self._owns_session = session is None
        self._version: Optional[versions.SemanticVersion] = None
        self._probed = False
        self._probe_lock: Optional[asyncio.Lock] = None

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.get_api_url()} version={self._version}>'

    @classmethod
    async def connect(
            cls: Type[_C],
            url: str,
            port: int = 8080,
            *,
            settings: Optional[configuration.ClientSettings] = None,
            strict: bool = False,
    ) -> _C:
        """ Create a cluster context with the version probed (or failed to be probed). """
        cluster = cls(url, port, settings=settings)
        try:
            await cluster.load_version(strict=strict)
        except BaseException:
            await cluster.close()
            raise
        return cluster

    async def __aenter__(self: _C) -> _C:
        await self.load_version()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def get_api_url(self) -> str:
        return f'{self.url}:{self.port}'

    def get_callable_url(
            self,
            path: str,
            query: Optional[Mapping[str, Any]] = None,
    ) -> str:
        query = query if query is not None else self.settings.networking.default_query
        url = self.get_api_url() + path
        return f'{url}?{urllib.parse.urlencode(query, doseq=True)}' if query else url

    #
    # Operations.
    #

    async def run_operation(
            self,
            operation: Union[str, dispatching.Operation],
            path: str,
            payload: Union[None, str, watching.WatchCallback[_R, Any]] = None,
            *,
            factory: dispatching.ResourceFactory[_R],
            query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        return await dispatching.run_operation(
            self, operation, path, payload,
            factory=factory,
            query=query,
        )

    def stream_events(
            self,
            path: str,
            *,
            factory: Callable[["KubernetesCluster", Any], Any],
            query: Optional[Mapping[str, Any]] = None,
            stopper: Optional["asyncio.Future[object]"] = None,
    ) -> AsyncIterator[watching.WatchEvent]:
        url = self.get_callable_url(path, query)
        return watching.stream_events(self, factory, url, stopper=stopper)

    #
    # Versions.
    #

    @property
    def version(self) -> Optional[versions.SemanticVersion]:
        return self._version

    @property
    def is_versioned(self) -> bool:
        return self._version is not None

    async def load_version(self, *, strict: bool = False) -> Optional[versions.SemanticVersion]:
        """
        Probe the cluster's version once; keep it for all later comparisons.

        In the strict mode, a failed probe raises `VersionProbeError` and can be retried.
        Otherwise, it is logged, and the cluster remains unversioned for good.
        """
        if self._probe_lock is None:
            self._probe_lock = asyncio.Lock()
        async with self._probe_lock:
            if not self._probed:
                try:
                    self._version = await self._probe_version()
                except VersionProbeError as e:
                    if strict:
                        raise
                    logger.warning(f"The cluster {self.get_api_url()} remains unversioned: {e}")
                else:
                    logger.debug(f"The cluster {self.get_api_url()} is of version {self._version}.")
                self._probed = True
        return self._version

    async def _probe_version(self) -> versions.SemanticVersion:
        url = f'{self.get_api_url()}/version'
        try:
            body = await api.read('get', url, session=self.session, settings=self.settings)
        except (errors.APIError, errors.APITransportError) as e:
            raise VersionProbeError(f"Failed to probe the version at {url}: {e!r}") from e

        info: Optional[bodies.RawVersionInfo] = errors.decode_leniently(body)
        git_version = info.get('gitVersion') if isinstance(info, Mapping) else None
        if git_version is None:
            raise VersionProbeError(f"No gitVersion reported by {url}: {body[:100]!r}")

        try:
            return versions.SemanticVersion.parse(git_version)
        except versions.InvalidVersionError as e:
            raise VersionProbeError(f"Unparseable gitVersion reported by {url}: {e}") from e

    def _require_version(self) -> versions.SemanticVersion:
        if self._version is None:
            raise UnversionedClusterError(f"The version of {self.get_api_url()} is unknown.")
        return self._version

    def newer_than(self, version: versions.VersionLike) -> bool:
        """ Check if the cluster's version is the same as or newer than the specified one. """
        return self._require_version() >= versions.SemanticVersion.parse(version)

    def older_than(self, version: versions.VersionLike) -> bool:
        """ Check if the cluster's version is older than the specified one. """
        return self._require_version() < versions.SemanticVersion.parse(version)
