import dataclasses
import json
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import aiohttp.test_utils
import aiohttp.web
import pytest

from kubewire.cluster import KubernetesCluster
from kubewire.structs.configuration import ClientSettings

Responder = Callable[[aiohttp.web.Request], Awaitable[aiohttp.web.StreamResponse]]


@pytest.fixture()
def settings():
    return ClientSettings()


#
# A fake API server for the client tests. Reasons:
# 1. We test the client on the wire: the real aiohttp requests and responses,
#    with no mocks of aiohttp itself.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#


@dataclasses.dataclass(frozen=True)
class RecordedRequest:
    method: str
    path: str
    query: Mapping[str, str]
    headers: Mapping[str, str]
    body: bytes

    @property
    def data(self) -> Any:
        return json.loads(self.body.decode('utf-8')) if self.body else None


class FakeAPI:
    """
    A server-side router of the pre-arranged responses, with all requests recorded.

    Sample usage::

        async def test_me(fake_api, cluster):
            fake_api.add('get', '/api/v1/pods', json={'items': []})
            await do_something(cluster)
            assert len(fake_api.requests) == 1
            assert fake_api.requests[0].method == 'GET'

    Every response is served only once, in the order of addition
    (i.e. as a side effect). The unexpected requests get the 418 status.
    """

    url: str
    port: int

    def __init__(self) -> None:
        super().__init__()
        self.requests: List[RecordedRequest] = []
        self._responders: Dict[Tuple[str, str], List[Responder]] = {}

    def add(
            self,
            method: str,
            path: str,
            *,
            json: Any = None,
            text: Optional[str] = None,
            status: int = 200,
    ) -> None:
        async def respond(request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
            if text is not None:
                return aiohttp.web.Response(text=text, status=status, content_type='application/json')
            return aiohttp.web.json_response(json, status=status)
        self._responders.setdefault((method.upper(), path), []).append(respond)

    def add_stream(
            self,
            path: str,
            lines: Sequence[Any],
    ) -> None:
        """ Stream the events (dicts) or raw lines (str/bytes) one by one, then close. """
        async def respond(request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
            response = aiohttp.web.StreamResponse()
            response.content_type = 'application/json'
            await response.prepare(request)
            for line in lines:
                data = line if isinstance(line, bytes) else \
                    line.encode('utf-8') if isinstance(line, str) else \
                    json.dumps(line).encode('utf-8')
                await response.write(data + b'\n')
            await response.write_eof()
            return response
        self._responders.setdefault(('GET', path), []).append(respond)

    def add_responder(self, method: str, path: str, responder: Responder) -> None:
        self._responders.setdefault((method.upper(), path), []).append(responder)

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
        self.requests.append(RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            body=await request.read(),
        ))
        responders = self._responders.get((request.method, request.path))
        if not responders:
            return aiohttp.web.json_response({'message': 'unexpected request'}, status=418)
        return await responders.pop(0)(request)


@pytest.fixture()
async def fake_api():
    api = FakeAPI()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', api.handle)
    server = aiohttp.test_utils.TestServer(app, host='127.0.0.1')
    await server.start_server()
    api.url = f'http://{server.host}'
    api.port = server.port
    try:
        yield api
    finally:
        await server.close()


@pytest.fixture()
async def cluster(fake_api, settings):
    """ A cluster context pointing to the fake API, not versioned (not probed). """
    cluster = KubernetesCluster(fake_api.url, fake_api.port, settings=settings)
    try:
        yield cluster
    finally:
        await cluster.close()
