import json

import httpx
import pytest

from dockside.adapters.archive_exporter import write_response_to_file
from dockside.adapters.json_exporter import export_records_json, records_to_json
from dockside.core.domain.models import ChangeKind, FilesystemChange, Version
from dockside.core.errors import StreamError


def test_records_are_serialized_with_docker_field_names():
    version = Version.model_validate({"Version": "24.0.7", "ApiVersion": "1.43"})

    payload = json.loads(records_to_json(version))

    assert payload["Version"] == "24.0.7"
    assert payload["ApiVersion"] == "1.43"
    assert "api_version" not in payload


def test_record_lists_are_written_to_disk(tmp_path):
    changes = [
        FilesystemChange(path="/etc/hosts", kind=ChangeKind.MODIFIED),
        FilesystemChange(path="/tmp/new", kind=ChangeKind.ADDED),
    ]
    output = tmp_path / "out" / "changes.json"

    assert export_records_json(changes, output) == output
    assert json.loads(output.read_text(encoding="utf-8")) == [
        {"Kind": 0, "Path": "/etc/hosts"},
        {"Kind": 1, "Path": "/tmp/new"},
    ]


@pytest.mark.asyncio
async def test_streamed_body_is_written_chunk_by_chunk(tmp_path):
    async def body():
        yield b"first-"
        yield b"second"

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body()))) as client:
        response = await client.send(client.build_request("GET", "http://daemon/export"), stream=True)
        written = await write_response_to_file(response, tmp_path / "rootfs.tar")

    assert written == 12
    assert (tmp_path / "rootfs.tar").read_bytes() == b"first-second"
    assert response.is_closed


@pytest.mark.asyncio
async def test_broken_stream_raises_stream_error(tmp_path):
    async def body():
        yield b"partial"
        raise httpx.ReadError("connection reset")

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body()))) as client:
        response = await client.send(client.build_request("GET", "http://daemon/export"), stream=True)
        with pytest.raises(StreamError):
            await write_response_to_file(response, tmp_path / "rootfs.tar")

    assert response.is_closed
