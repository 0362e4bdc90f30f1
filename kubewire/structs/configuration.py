"""
All configuration flags, options, settings to fine-tune the client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are optional, some are not (but all of them have
reasonable defaults). The settings are created once per cluster context
and are read by the transport and the watch-streams on every request,
so they can be adjusted at runtime between the requests.
"""
import dataclasses
from typing import Any, Mapping, Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole of a single request-response exchange, in seconds.
    Set to ``None`` to wait forever.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a connection to the API server, in seconds.
    If ``None``, then only the ``request_timeout`` applies.
    """

    default_query: Mapping[str, Any] = dataclasses.field(default_factory=lambda: {'pretty': 1})
    """
    The query parameters added to every request unless overridden per call.
    """


@dataclasses.dataclass
class WatchingSettings:

    client_timeout: Optional[float] = None
    """
    An HTTP/HTTPS session timeout to use in watch requests.
    If ``None`` (the default), the stream is awaited until the server closes it.
    """

    connect_timeout: Optional[float] = None
    """
    An HTTP/HTTPS connection timeout to use in watch requests.
    If ``None``, the networking's connect timeout is used.
    """

    chunk_size: int = 1024 * 1024
    """
    How many bytes to read from the stream at once before splitting them into lines.
    The lines can be much longer than this, they are accumulated in a buffer.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    watching: WatchingSettings = dataclasses.field(default_factory=WatchingSettings)
