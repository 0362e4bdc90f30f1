"""
Watching and streaming the watch-events.

A watch-stream is one long-lived GET request, where the server sends
the changes of the resources as they happen: one JSON object per line,
in the form of ``{"type": "ADDED", "object": {...}}``.

The stream is consumed incrementally, line by line, and every line is turned
into a `WatchEvent` with a typed resource built by the kind's factory.
These resources are NOT marked as synced (unlike those from the regular
operations), since they were not created or replaced by this client.

There are two ways to consume the stream:

* `stream_events` is a lazy, unbounded, non-restartable async iterator;
  the consumer stops watching by simply stopping the iteration.
* `watch` feeds the events to a callback until it returns anything but ``None``,
  which is then returned as the result of watching.

There is no reconnection, no resuming from the last seen resource version,
and no backoff: once the connection is lost, the watching is over.
The callers that need durability must watch again with their own logic.
"""
import asyncio
import collections.abc
import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Awaitable, Callable, NamedTuple, Optional, \
                   TypeVar, Union

import aiohttp

from kubewire.clients import api
from kubewire.engines import loggers
from kubewire.structs import bodies

if TYPE_CHECKING:
    from kubewire.cluster import KubernetesCluster

logger = logging.getLogger(__name__)

_R = TypeVar('_R')
_T = TypeVar('_T')

WatchCallback = Callable[[str, _R], Union[Optional[_T], Awaitable[Optional[_T]]]]


class WatchEvent(NamedTuple):
    type: str
    object: Any  # a typed resource, as built by the factory


def parse_event(line: bytes) -> Optional[bodies.RawInput]:
    """
    Decode one line of the stream, or return ``None`` if it is not a valid event.

    The invalid lines are logged and skipped rather than raised: one bad line
    must not abort the long-lived watching of all other resources.
    """
    try:
        raw_input = json.loads(line.decode('utf-8'))
    except (ValueError, UnicodeDecodeError) as e:  # incl. json.JSONDecodeError
        logger.warning(f"Skipping an undecodable line in the watch-stream: {line[:100]!r} ({e})")
        return None

    if not isinstance(raw_input, collections.abc.Mapping):
        logger.warning(f"Skipping a non-object line in the watch-stream: {raw_input!r}")
        return None

    if 'type' not in raw_input or 'object' not in raw_input:
        logger.warning(f"Skipping a malformed event in the watch-stream: {raw_input!r}")
        return None

    return bodies.RawInput(type=raw_input['type'], object=raw_input['object'])


async def stream_events(
        cluster: "KubernetesCluster",
        factory: Callable[["KubernetesCluster", Any], _R],
        url: str,
        *,
        stopper: Optional["asyncio.Future[object]"] = None,
) -> AsyncIterator[WatchEvent]:
    """
    Stream the watch-events of a URL until the stream is over.

    The stream is over when the server closes the connection, when the connection
    is lost, or when the optional ``stopper`` future is done (e.g. cancelled).
    The errors of opening the stream (`APIError`, `APITransportError`)
    are escalated to the caller as with any other request.
    """
    settings = cluster.settings
    connect_timeout = (
        settings.watching.connect_timeout if settings.watching.connect_timeout is not None else
        settings.networking.connect_timeout if settings.networking.connect_timeout is not None else
        settings.networking.request_timeout
    )
    timeout = aiohttp.ClientTimeout(
        total=settings.watching.client_timeout,
        sock_connect=connect_timeout,
    )

    logger.debug(f"Starting the watch-stream for {url}.")
    lines = api.stream(
        url=url,
        session=cluster.session,
        settings=settings,
        timeout=timeout,
        stopper=stopper,
    )
    try:
        async for line in lines:
            raw_input = parse_event(line)
            if raw_input is None:
                continue

            raw_type = raw_input['type']
            raw_object = raw_input['object']
            if raw_type == 'ERROR':
                logger.warning(f"Error in the watch-stream for {url}: {raw_object!r}")
            else:
                loggers.ResourceLogger(raw_object).debug(f"Received the {raw_type} event.")

            yield WatchEvent(type=raw_type, object=factory(cluster, raw_object))

    except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as e:
        logger.debug(f"The watch-stream for {url} is disconnected: {e!r}")
    finally:
        await lines.aclose()  # type: ignore
        logger.debug(f"Stopping the watch-stream for {url}.")


async def watch(
        cluster: "KubernetesCluster",
        factory: Callable[["KubernetesCluster", Any], _R],
        url: str,
        callback: WatchCallback[_R, _T],
        *,
        stopper: Optional["asyncio.Future[object]"] = None,
) -> Union[_T, bool]:
    """
    Feed the watch-events to a callback until it says it is enough.

    The callback is called with the event's type and the typed resource,
    and can be either sync or async. If it returns anything but ``None``,
    the watching stops immediately, no more lines are read from the stream,
    and that value is returned. If the stream is over before that,
    ``False`` is returned.
    """
    events = stream_events(cluster, factory, url, stopper=stopper)
    try:
        async for event in events:
            result = callback(event.type, event.object)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                return result
    finally:
        await events.aclose()  # type: ignore
    return False
