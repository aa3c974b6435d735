"""Operações de chave RSA: carga, unwrap da chave AES e geração de par."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.hashes import SHA256

from .constants import AES_KEY_SIZES_ALLOWED, RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT
from .errors import KeyUnwrapError

_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=SHA256()),
    algorithm=SHA256(),
    label=None,
)


@dataclass(frozen=True, slots=True)
class GeneratedKeyPair:
    """Par de chaves RSA em PEM.

    A chave pública vai para a plataforma; a privada fica com o tenant.
    """

    private_key_pem: str
    public_key_pem: str


def load_private_key(private_key_pem: str, passphrase: str | None = None) -> Any:
    """Carrega chave privada RSA em formato PEM.

    Uma passphrase configurada para uma chave sem criptografia é ignorada.

    Raises:
        KeyUnwrapError: Se a chave for inválida ou a passphrase incorreta.
    """
    passphrase_bytes = passphrase.encode("utf-8") if passphrase and passphrase.strip() else None

    def _load(password: bytes | None) -> Any:
        return serialization.load_pem_private_key(
            private_key_pem.encode("utf-8"),
            password=password,
        )

    try:
        return _load(passphrase_bytes)
    except TypeError as exc:
        if passphrase_bytes and "not encrypted" in str(exc).lower():
            try:
                return _load(None)
            except (TypeError, ValueError) as retry_exc:
                raise KeyUnwrapError("Invalid private key") from retry_exc
        raise KeyUnwrapError("Invalid private key") from exc
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyUnwrapError("Invalid private key") from exc


def unwrap_aes_key(private_key: Any, wrapped_key: bytes) -> bytes:
    """Abre a chave AES cifrada com RSA-OAEP (MGF1/SHA-256).

    Args:
        private_key: Chave privada RSA do tenant candidato.
        wrapped_key: Chave AES cifrada (bytes já decodificados do base64).

    Returns:
        Chave AES bruta (128/192/256 bits).

    Raises:
        KeyUnwrapError: Chave errada, input corrompido ou tamanho inválido.
    """
    try:
        aes_key = private_key.decrypt(wrapped_key, _OAEP)
    except (ValueError, TypeError, AttributeError) as exc:
        raise KeyUnwrapError("AES key unwrap failed") from exc

    if len(aes_key) not in AES_KEY_SIZES_ALLOWED:
        raise KeyUnwrapError(f"Invalid AES key size: {len(aes_key)}")
    return aes_key


def generate_key_pair(passphrase: str | None = None) -> GeneratedKeyPair:
    """Gera par RSA 2048 para um tenant.

    Pública em SubjectPublicKeyInfo PEM; privada em PKCS#8 PEM,
    cifrada com a passphrase quando informada.
    """
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    encryption: serialization.KeySerializationEncryption = (
        serialization.BestAvailableEncryption(passphrase.encode("utf-8"))
        if passphrase
        else serialization.NoEncryption()
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return GeneratedKeyPair(private_key_pem=private_pem, public_key_pem=public_pem)
