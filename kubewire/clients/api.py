"""
The low-level transport: one HTTP request per call, no retries.

The transport knows nothing about the resources and the operations.
It only sends the requests to the absolute URLs given, checks the responses
for errors (see `errors.check_response`), and returns the raw bodies.

The JSON documents are sent as they are given: already serialized strings.
The parsing of the responses is the callers' job, since it can be lenient
(for the resources) or strict (for the watch-stream lines).
"""
import asyncio
import logging
from typing import AsyncIterator, Dict, Mapping, Optional

import aiohttp

from kubewire.clients import errors
from kubewire.helpers import versions
from kubewire.structs import configuration

logger = logging.getLogger(__name__)


def default_headers() -> Dict[str, str]:
    return {
        'Content-Type': 'application/json',
        'User-Agent': f'kubewire/{versions.version or "unknown"}',  # self-identify a bit
    }


async def request(
        method: str,
        url: str,
        *,
        session: aiohttp.ClientSession,
        settings: configuration.ClientSettings,
        payload: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
) -> aiohttp.ClientResponse:
    """
    Send a single request and return the response, unparsed and unread.

    The responses with errors are never returned: they are raised as `APIError`.
    The connectivity issues are raised as `APITransportError`.
    """
    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    logger.debug(f"Requesting: {what}")
    try:
        response = await session.request(
            method=method.upper(),
            url=url,
            data=payload if payload else None,
            headers=dict(default_headers(), **(headers or {})),
            timeout=timeout,
        )
    except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
        logger.debug(f"Request failed: {what} -> {e!r}")
        raise errors.APITransportError(f"Request failed: {what}") from e

    await errors.check_response(response)  # but do not parse it!
    return response


async def read(
        method: str,
        url: str,
        *,
        session: aiohttp.ClientSession,
        settings: configuration.ClientSettings,
        payload: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
) -> bytes:
    """
    Send a single request and return the whole body of the response as is.
    """
    response = await request(
        method=method,
        url=url,
        payload=payload,
        headers=headers,
        timeout=timeout,
        session=session,
        settings=settings,
    )
    try:
        async with response:
            return await response.read()
    except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as e:
        raise errors.APITransportError(f"Reading failed: {method.upper()} {url}") from e


async def stream(
        url: str,
        *,
        session: aiohttp.ClientSession,
        settings: configuration.ClientSettings,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        stopper: Optional["asyncio.Future[object]"] = None,
) -> AsyncIterator[bytes]:
    """
    Stream the non-empty lines of a long-lived response, as they arrive.

    The stream ends when the server closes the connection. The consumer
    can stop it earlier by breaking the iteration (or closing the generator),
    or by resolving/cancelling the ``stopper`` future (e.g. from another task):
    in both cases, the underlying connection is closed.
    """
    response = await request(
        method='get',
        url=url,
        headers=headers,
        timeout=timeout,
        session=session,
        settings=settings,
    )
    response_close_callback = lambda _: response.close()  # to remove the positional arg.
    if stopper is not None:
        stopper.add_done_callback(response_close_callback)
    try:
        async with response:
            async for line in iter_jsonlines(response.content, settings.watching.chunk_size):
                yield line
    except aiohttp.ClientConnectionError:
        if stopper is not None and stopper.done():
            pass
        else:
            raise
    finally:
        if stopper is not None:
            stopper.remove_done_callback(response_close_callback)


async def iter_jsonlines(
        content: aiohttp.StreamReader,
        chunk_size: int = 1024 * 1024,
) -> AsyncIterator[bytes]:
    """
    Iterate line by line over the response's content.

    Usage::

        async for line in iter_jsonlines(response.content):
            pass

    This is an equivalent of::

        async for line in response.content:
            pass

    Except that the aiohttp's line iteration fails if the accumulated buffer
    length is above 2**17 bytes, i.e. 128 KB (`aiohttp.streams.DEFAULT_LIMIT`
    for the buffer's low-watermark, multiplied by 2 for the high-watermark).
    Kubernetes secrets and other fields can be much longer, up to MBs in length.

    The empty lines are skipped. The last line is yielded even if it is not
    terminated by a newline when the stream is over.
    """

    # Minimize the memory footprint by keeping at most 2 copies of a yielded line in memory
    # (in the buffer and as a yielded value), and at most 1 copy of other lines (in the buffer).
    buffer = b''
    async for data in content.iter_chunked(chunk_size):
        buffer += data
        del data

        start = 0
        index = buffer.find(b'\n', start)
        while index >= 0:
            line = buffer[start:index]
            if line.strip():
                yield line
            del line
            start = index + 1
            index = buffer.find(b'\n', start)

        if start > 0:
            buffer = buffer[start:]

    if buffer.strip():
        yield buffer
