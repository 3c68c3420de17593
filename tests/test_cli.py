import json
import runpy
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from dockside.adapters.url_builder import parse_socket_url
from dockside.cli.main import app, run
from dockside.core.config import ClientConfig, UnixSocketTransport
from dockside.core.services.docker import Docker

runner = CliRunner()

ROUTES = {
    "/_ping": (200, b"OK"),
    "/version": (200, json.dumps({"Version": "24.0.7", "ApiVersion": "1.43", "Os": "linux", "Arch": "amd64"}).encode()),
    "/containers/json?all=1": (
        200,
        json.dumps([{"Id": "abc123", "Names": ["/web"], "Image": "nginx", "Status": "Up"}]).encode(),
    ),
    "/containers/abc/export": (200, b"tar-bytes"),
}


@pytest.fixture
def fake_daemon(monkeypatch):
    targets = []

    def handler(request):
        _, target = parse_socket_url(request.url)
        targets.append(target)
        status, body = ROUTES.get(target, (404, b'{"message":"no such container"}'))
        return httpx.Response(status, content=body)

    def connect(cls, settings=None, **kwargs):
        config = ClientConfig(transport=UnixSocketTransport(socket_path="/var/run/docker.sock"))
        return cls(config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    monkeypatch.setattr(Docker, "connect_with_defaults", classmethod(connect))
    return targets


def test_ping_prints_daemon_answer(fake_daemon):
    result = runner.invoke(app, ["ping"])

    assert result.exit_code == 0
    assert "OK" in result.output
    assert fake_daemon == ["/_ping"]


def test_version_json_uses_api_field_names(fake_daemon):
    result = runner.invoke(app, ["version", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["ApiVersion"] == "1.43"


def test_containers_all_sends_flag(fake_daemon):
    result = runner.invoke(app, ["containers", "--all", "--json"])

    assert result.exit_code == 0
    assert fake_daemon == ["/containers/json?all=1"]
    assert json.loads(result.output)[0]["Names"] == ["/web"]


def test_inspect_failure_exits_with_error(fake_daemon):
    result = runner.invoke(app, ["inspect", "missing"])

    assert result.exit_code == 1
    assert "could not get info about container 'missing'" in result.output


def test_export_writes_archive(fake_daemon, tmp_path):
    output = tmp_path / "abc.tar"

    result = runner.invoke(app, ["export", "abc", "--output", str(output)])

    assert result.exit_code == 0
    assert output.read_bytes() == b"tar-bytes"


def test_containers_output_writes_json_file(fake_daemon, tmp_path):
    output = tmp_path / "reports" / "containers.json"

    result = runner.invoke(app, ["containers", "--all", "--output", str(output)])

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))[0]["Id"] == "abc123"


def test_version_output_writes_json_file(fake_daemon, tmp_path):
    output = tmp_path / "version.json"

    result = runner.invoke(app, ["version", "-o", str(output)])

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))["Version"] == "24.0.7"


def test_checkout_script_exposes_cli_entry_point():
    namespace = runpy.run_path(str(Path(__file__).parents[1] / "main.py"), run_name="dockside_checkout")
    assert namespace["run"] is run
