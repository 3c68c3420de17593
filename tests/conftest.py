import base64
import os
import shutil
from pathlib import Path

import pytest

_DOCKER_ENV = (
    "DOCKER_HOST",
    "DOCKER_TLS_VERIFY",
    "DOCKER_CERT_PATH",
    "DOCKER_CONFIG",
    "DOCKER_HTTP_TIMEOUT_SECONDS",
    "DOCKER_USER_AGENT",
)


@pytest.fixture(autouse=True)
def _clean_docker_env(monkeypatch):
    """Tests never see the developer's real Docker environment."""
    for name in _DOCKER_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


def pem_block(label: str, payload: bytes) -> str:
    body = base64.b64encode(payload).decode("ascii")
    lines = [body[i : i + 64] for i in range(0, len(body), 64)]
    return f"-----BEGIN {label}-----\n" + "\n".join(lines) + f"\n-----END {label}-----\n"


def fake_cert(seed: int = 0) -> str:
    """Well-formed base64 inside CERTIFICATE armour that is not X.509."""
    return pem_block("CERTIFICATE", bytes([seed]) * 48 + os.urandom(16))


DATA_DIR = Path(__file__).parent / "data"


def data_pem(name: str) -> str:
    """Real openssl-generated material: CA, client cert (signed by the CA) and keys."""
    return (DATA_DIR / name).read_text(encoding="ascii")


@pytest.fixture
def cert_dir(tmp_path) -> Path:
    """Directory laid out like ~/.docker with one cert, one CA and one PKCS8 key."""
    d = tmp_path / "certs"
    d.mkdir()
    for name in ("cert.pem", "ca.pem", "key.pem"):
        shutil.copy(DATA_DIR / name, d / name)
    return d
