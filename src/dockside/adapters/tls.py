"""Contexto TLS para el transporte remoto.

Responsabilidad:
- Almacén de confianza = certificados del sistema (best-effort) + raíces de
  `certifi` + `ca.pem` de Docker cuando hay TLS mutuo.
- ALPN ofreciendo `h2` y después `http/1.1`.
- Instalar en el contexto la identidad cliente que da el resolver.
"""

from __future__ import annotations

import logging
import os
import ssl
import tempfile
from pathlib import Path

import certifi

from dockside.core.config import TlsConfig
from dockside.core.domain.certificates import CertificateBundle
from dockside.core.errors import CertificateError

logger = logging.getLogger(__name__)

ALPN_PROTOCOLS = ["h2", "http/1.1"]


def _load_native_roots(context: ssl.SSLContext) -> None:
    try:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)
    except (ssl.SSLError, OSError) as exc:
        if context.cert_store_stats().get("x509_ca", 0):
            logger.warning("could not load all certificates: %s", exc)
        else:
            logger.warning("cannot access native certificate store: %s", exc)


def build_ssl_context(tls: TlsConfig) -> ssl.SSLContext:
    """Crea el `SSLContext` cliente compartido por todas las conexiones TLS."""

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.set_alpn_protocols(ALPN_PROTOCOLS)

    _load_native_roots(context)
    # Raíces conocidas por si el sistema no aporta ninguna.
    context.load_verify_locations(cafile=certifi.where())

    if tls.mutual_tls:
        ca_path = tls.ca_path()
        try:
            context.load_verify_locations(cafile=str(ca_path))
        except (ssl.SSLError, OSError) as exc:
            raise CertificateError(f"error reading {ca_path}", ca_path) from exc

    return context


def check_certificate(block: str, path: Path | None) -> None:
    """Pasa `block` por el parser X.509 de OpenSSL en un contexto desechable."""

    scratch = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        scratch.load_verify_locations(cadata=block)
    except ssl.SSLError as exc:
        source = path if path is not None else "client certificate chain"
        raise CertificateError(f"cannot read {source}", path) from exc


def _is_key_mismatch(exc: ssl.SSLError) -> bool:
    return exc.reason == "KEY_VALUES_MISMATCH" or "key values mismatch" in str(exc).lower()


def install_client_identity(context: ssl.SSLContext, bundle: CertificateBundle) -> None:
    """Carga cadena + clave en `context`.

    Orden:
    1) Cada certificado de la cadena, por separado (el error nombra el cert).
    2) La clave, contra el certificado hoja (el error nombra la clave).

    `ssl` solo acepta ficheros, así que se escriben a un directorio temporal
    privado que se borra al terminar.
    """

    for block in bundle.certificates:
        check_certificate(block, bundle.cert_path)

    with tempfile.TemporaryDirectory(prefix="dockside-") as tmp:
        chain_file = Path(tmp) / "chain.pem"
        key_file = Path(tmp) / "key.pem"
        _write_private(chain_file, bundle.chain_pem())
        _write_private(key_file, bundle.key_pem())
        try:
            context.load_cert_chain(certfile=str(chain_file), keyfile=str(key_file))
        except ssl.SSLError as exc:
            if _is_key_mismatch(exc):
                message = f"private key in {bundle.key_path} does not match the client certificate"
            else:
                message = f"could not parse signing key from {bundle.key_path}"
            raise CertificateError(message, bundle.key_path) from exc


def check_client_identity(bundle: CertificateBundle) -> None:
    """Instala `bundle` en un contexto desechable; solo valida."""

    install_client_identity(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT), bundle)


def _write_private(path: Path, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w", encoding="ascii") as fh:
        fh.write(text)
