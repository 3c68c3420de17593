"""Contrato para proveer identidad TLS de cliente.

Por qué Protocol:
- La capa TLS lo invoca cuando necesita certificado cliente, sin saber de
  dónde sale (disco, secreto en memoria, fake en tests).
- No depende de la librería TLS concreta: devuelve PEM, no objetos `ssl`.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from dockside.core.domain.certificates import CertificateBundle


@runtime_checkable
class ClientIdentityProvider(Protocol):
    """Proveedor de certificado cliente para TLS mutuo.

    Reglas:
    - Devuelve `None` si no hay que presentar identidad.
    - Si debe presentarla y no puede, lanza `CertificateError`.
    """

    def resolve(
        self,
        acceptable_issuers: Sequence[bytes] = (),
        signature_schemes: Sequence[str] = (),
    ) -> CertificateBundle | None:
        ...
