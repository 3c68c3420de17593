"""Identidad TLS del cliente.

Un `CertificateBundle` existe completo o no existe: cadena no vacía y
exactamente una clave privada.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class CertificateBundle(BaseModel):
    """Cadena de certificados (hoja primero) + una clave privada, en PEM."""

    model_config = ConfigDict(frozen=True)

    certificates: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Bloques PEM en orden: cert.pem y después ca.pem.",
    )
    private_key: str = Field(
        ...,
        min_length=1,
        description="Bloque PEM de la clave privada (PKCS8 o RSA).",
    )
    key_path: Path = Field(
        ...,
        description="Fichero del que salió la clave (para mensajes de error).",
    )
    cert_path: Path | None = Field(
        default=None,
        description="Fichero del certificado hoja (para mensajes de error).",
    )

    @field_validator("certificates")
    @classmethod
    def _non_empty_blocks(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not block.strip() for block in value):
            raise ValueError("empty certificate block")
        return value

    def chain_pem(self) -> str:
        return "\n".join(block.strip() for block in self.certificates) + "\n"

    def key_pem(self) -> str:
        return self.private_key.strip() + "\n"
