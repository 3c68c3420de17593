import logging
import ssl

import pytest

from conftest import DATA_DIR, data_pem, fake_cert, pem_block
from dockside.adapters.tls import (
    ALPN_PROTOCOLS,
    _load_native_roots,
    build_ssl_context,
    check_certificate,
    install_client_identity,
)
from dockside.core.config import TlsConfig
from dockside.core.domain.certificates import CertificateBundle
from dockside.core.errors import CertificateError


class _FakeContext:
    def __init__(self, error, ca_count):
        self._error = error
        self._ca_count = ca_count

    def load_default_certs(self, purpose):
        raise self._error

    def cert_store_stats(self):
        return {"x509_ca": self._ca_count}


def test_alpn_prefers_http2():
    assert ALPN_PROTOCOLS == ["h2", "http/1.1"]


def test_context_trusts_bundled_roots_without_mutual_tls():
    context = build_ssl_context(TlsConfig())

    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True
    assert context.cert_store_stats()["x509_ca"] > 0


def test_partial_native_store_is_logged_and_kept(caplog):
    with caplog.at_level(logging.WARNING, logger="dockside.adapters.tls"):
        _load_native_roots(_FakeContext(ssl.SSLError("bad cert"), ca_count=12))
    assert "could not load all certificates" in caplog.text


def test_unavailable_native_store_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="dockside.adapters.tls"):
        _load_native_roots(_FakeContext(OSError("no store"), ca_count=0))
    assert "cannot access native certificate store" in caplog.text


def test_mutual_tls_requires_readable_ca(tmp_path):
    with pytest.raises(CertificateError) as excinfo:
        build_ssl_context(TlsConfig(mutual_tls=True, cert_path=tmp_path))
    assert excinfo.value.path == tmp_path / "ca.pem"
    assert "ca.pem" in str(excinfo.value)


def test_unparsable_ca_is_a_certificate_error(tmp_path):
    (tmp_path / "ca.pem").write_text(fake_cert(), encoding="ascii")
    with pytest.raises(CertificateError, match="error reading"):
        build_ssl_context(TlsConfig(mutual_tls=True, cert_path=tmp_path))


def test_mutual_tls_adds_docker_ca(tmp_path):
    (tmp_path / "ca.pem").write_text(data_pem("ca.pem"), encoding="ascii")

    plain = build_ssl_context(TlsConfig())
    mutual = build_ssl_context(TlsConfig(mutual_tls=True, cert_path=tmp_path))

    assert mutual.cert_store_stats()["x509_ca"] == plain.cert_store_stats()["x509_ca"] + 1


def _bundle(tmp_path, cert=None, key=None):
    return CertificateBundle(
        certificates=(cert or data_pem("cert.pem"), data_pem("ca.pem")),
        private_key=key or data_pem("key.pem"),
        key_path=tmp_path / "key.pem",
        cert_path=tmp_path / "cert.pem",
    )


@pytest.mark.parametrize("key_file", ["key.pem", "key-rsa.pem"])
def test_real_identity_installs_with_either_key_form(tmp_path, key_file):
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    install_client_identity(context, _bundle(tmp_path, key=data_pem(key_file)))


def test_key_mismatch_names_key_path(tmp_path):
    with pytest.raises(CertificateError) as excinfo:
        install_client_identity(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), _bundle(tmp_path, key=data_pem("other-key.pem")))

    assert excinfo.value.path == tmp_path / "key.pem"
    assert "does not match" in str(excinfo.value)


def test_key_rejected_by_tls_layer_names_key_path(tmp_path):
    bogus_key = pem_block("PRIVATE KEY", b"\x00" * 64)

    with pytest.raises(CertificateError) as excinfo:
        install_client_identity(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), _bundle(tmp_path, key=bogus_key))

    assert excinfo.value.path == tmp_path / "key.pem"
    assert str(tmp_path / "key.pem") in str(excinfo.value)


def test_corrupt_certificate_with_real_key_names_cert_path(tmp_path):
    with pytest.raises(CertificateError) as excinfo:
        install_client_identity(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), _bundle(tmp_path, cert=fake_cert(1)))

    assert excinfo.value.path == tmp_path / "cert.pem"
    assert "cert.pem" in str(excinfo.value)
    assert "key.pem" not in str(excinfo.value)


def test_check_certificate_accepts_real_x509_only():
    check_certificate((DATA_DIR / "cert.pem").read_text(encoding="ascii"), DATA_DIR / "cert.pem")
    with pytest.raises(CertificateError, match="client certificate chain"):
        check_certificate(fake_cert(), None)
