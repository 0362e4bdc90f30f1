"""
K8s API errors.

The underlying client library (now, ``aiohttp``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code of the library
and of its users. Hence, we have our own hierarchy of exceptions for API errors.

The original errors of the client library are chained as the causes of our own
specialised errors -- for better explainability of errors in the stack traces.

Some selected reasons of K8s API errors are made into their own classes,
so that they could be intercepted and handled by the callers.
All other reasons are raised as the base error classes (for the client-side
and the server-side errors) and are indistinguishable from each other
except via the exception's fields.

Unlike the underlying client library's errors, the K8s API errors contain more
information about the reasons -- as provided by K8s API in its response bodies,
not guessed only by HTTP statuses alone. If the response body cannot be decoded,
the error is raised anyway, but with no message and no details.

Low-level errors, such as the connectivity issues or timeouts, are wrapped
into `APITransportError`. None of the errors is retried: they are escalated
to the immediate caller of the failed operation.
"""
import asyncio
import collections.abc
import json
from typing import Any, Collection, Optional

import aiohttp
from typing_extensions import TypedDict


class RawStatusCause(TypedDict, total=False):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict, total=False):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict, total=False):
    apiVersion: str
    kind: str
    code: int
    status: str
    reason: str
    message: str
    details: RawStatusDetails


class APITransportError(Exception):
    """
    Raised when the API cannot be reached at all: connection, DNS, timeouts.
    """


class APIError(Exception):

    def __init__(
            self,
            payload: Optional[RawStatus],
            *,
            status: int,
    ) -> None:
        message = payload.get('message') if payload else None
        super().__init__(message, payload)
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def payload(self) -> Optional[RawStatus]:
        return self._payload

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message') if self._payload else None

    @property
    def details(self) -> Optional[RawStatusDetails]:
        return self._payload.get('details') if self._payload else None


class APIClientError(APIError):
    pass


class APIServerError(APIError):
    pass


class APIUnauthorizedError(APIClientError):
    pass


class APIForbiddenError(APIClientError):
    pass


class APINotFoundError(APIClientError):
    pass


class APIConflictError(APIClientError):
    pass


def decode_leniently(data: bytes) -> Any:
    """
    Decode a JSON document, or return ``None`` if it is not a valid JSON.
    """
    try:
        return json.loads(data.decode('utf-8'))
    except (ValueError, UnicodeDecodeError):  # incl. json.JSONDecodeError
        return None


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised K8s errors, and raise with extended information.
    """
    if not 200 <= response.status < 300:

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[RawStatus]
        try:
            payload = decode_leniently(await response.read())
        except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError):
            payload = None

        # Only the mappings can carry the message; anything else is as good as nothing.
        if not isinstance(payload, collections.abc.Mapping):
            payload = None

        cls = (
            APIUnauthorizedError if response.status == 401 else
            APIForbiddenError if response.status == 403 else
            APINotFoundError if response.status == 404 else
            APIConflictError if response.status == 409 else
            APIError if response.status < 400 else
            APIClientError if response.status < 500 else
            APIServerError
        )

        # Raise the library-specific error while keeping the original error in scope.
        # This call also closes the response's body, so it cannot be read afterwards.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e
        else:
            response.release()  # not an HTTP error for aiohttp, but unexpected for us.
            raise cls(payload, status=response.status)
