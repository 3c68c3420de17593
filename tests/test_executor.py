import httpx
import pytest

from dockside.adapters.url_builder import AbsoluteHttps, RelativeSocketPath
from dockside.core.errors import (
    DecodeError,
    DockerConnectionError,
    HttpStatusError,
    StreamError,
)
from dockside.core.services.executor import RequestExecutor


class _TrackingStream(httpx.AsyncByteStream):
    """Body stream that remembers whether anybody iterated it."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.read = False
        self.closed = False

    async def __aiter__(self):
        self.read = True
        for chunk in self.chunks:
            yield chunk

    async def aclose(self):
        self.closed = True


def _executor(handler, builder=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RequestExecutor(client, builder or RelativeSocketPath("/var/run/docker.sock"))


@pytest.mark.asyncio
async def test_execute_request_accumulates_chunks_in_order():
    stream = _TrackingStream([b'{"a":', b"1", b"}"])
    executor = _executor(lambda request: httpx.Response(200, stream=stream))

    request = executor.build_empty_get_request(executor.get_url("/thing"))
    body = await executor.execute_request(request)

    assert body == b'{"a":1}'
    assert stream.closed


@pytest.mark.asyncio
async def test_decode_url_decodes_accumulated_body():
    stream = _TrackingStream([b'{"a":', b"1", b"}"])
    executor = _executor(lambda request: httpx.Response(200, stream=stream))

    assert await executor.decode_url("Thing", "/thing", dict[str, int]) == {"a": 1}


@pytest.mark.asyncio
async def test_body_bytes_are_not_transformed():
    payload = b"\x1f\x8b\x00\xff\r\n\x00tail"
    executor = _executor(
        lambda request: httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=_TrackingStream([payload[:3], payload[3:]]),
        )
    )
    assert await executor.get("/raw") == payload


@pytest.mark.asyncio
async def test_non_success_status_is_rejected_without_reading_body():
    stream = _TrackingStream([b"page not found"])
    executor = _executor(lambda request: httpx.Response(404, stream=stream))

    request = executor.build_empty_get_request(executor.get_url("/nope"))
    with pytest.raises(HttpStatusError) as excinfo:
        await executor.start_request(request)

    assert "404" in str(excinfo.value)
    assert excinfo.value.status_code == 404
    assert stream.read is False
    assert stream.closed is True


@pytest.mark.asyncio
async def test_start_request_returns_unread_response():
    stream = _TrackingStream([b"tar bytes"])
    executor = _executor(lambda request: httpx.Response(200, stream=stream))

    response = await executor.start_request(executor.build_empty_get_request(executor.get_url("/export")))

    assert response.status_code == 200
    assert stream.read is False
    await response.aclose()


@pytest.mark.asyncio
async def test_decode_failure_carries_type_name_and_raw_text():
    executor = _executor(lambda request: httpx.Response(200, content=b"not json"))

    with pytest.raises(DecodeError) as excinfo:
        await executor.decode_url("Container", "/containers/json", list[dict])

    assert excinfo.value.type_name == "Container"
    assert excinfo.value.raw == "not json"


@pytest.mark.asyncio
async def test_decode_failure_keeps_non_utf8_body_displayable():
    executor = _executor(lambda request: httpx.Response(200, content=b"\xffbad"))

    with pytest.raises(DecodeError) as excinfo:
        await executor.decode_url("Version", "/version", dict)

    assert excinfo.value.raw == "�bad"


@pytest.mark.asyncio
async def test_chunk_failure_aborts_with_stream_error():
    async def broken_body():
        yield b'{"partial":'
        raise httpx.ReadError("connection reset")

    executor = _executor(lambda request: httpx.Response(200, content=broken_body()))

    with pytest.raises(StreamError) as excinfo:
        await executor.get("/info")
    assert isinstance(excinfo.value.__cause__, httpx.ReadError)


@pytest.mark.asyncio
async def test_transport_failure_is_a_connection_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    executor = _executor(refuse)

    with pytest.raises(DockerConnectionError) as excinfo:
        await executor.get("/_ping")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_requests_are_empty_gets_against_built_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"OK")

    executor = _executor(handler, AbsoluteHttps("https://host:2376"))
    await executor.get("/_ping")

    (request,) = seen
    assert request.method == "GET"
    assert str(request.url) == "https://host:2376/_ping"
    assert request.content == b""
