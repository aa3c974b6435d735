"""Envelope criptografado do endpoint de Flows.

Formato de entrada (JSON):
    - `encrypted_aes_key`: chave AES cifrada com RSA-OAEP (base64)
    - `initial_vector`: IV do AES-GCM (base64)
    - `encrypted_flow_data`: ciphertext + tag concatenados (base64)

A resposta é devolvida como texto simples com base64(ciphertext + tag),
cifrada com a mesma chave AES e o IV complementado.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import EnvelopeFormatError, FlowCryptoError, PayloadDecryptError
from .keys import unwrap_aes_key
from .payload import decrypt_payload, encrypt_payload

if TYPE_CHECKING:
    from collections.abc import Mapping

ENVELOPE_FIELDS = ("encrypted_flow_data", "encrypted_aes_key", "initial_vector")

_URLSAFE_BASE64 = re.compile(r"[A-Za-z0-9_\-]+={0,2}")


@dataclass(frozen=True, slots=True)
class EncryptedEnvelope:
    """Envelope decodificado (bytes), válido apenas durante a requisição."""

    encrypted_flow_data: bytes
    encrypted_aes_key: bytes
    initial_vector: bytes


@dataclass(frozen=True, slots=True)
class DecryptedFlowRequest:
    """Payload descriptografado + material para cifrar a resposta."""

    payload: dict[str, Any]
    aes_key: bytes
    iv: bytes


def _decode_base64(field_name: str, raw_value: str) -> bytes:
    value = raw_value.strip()
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error):
        if not _URLSAFE_BASE64.fullmatch(value):
            raise EnvelopeFormatError(f"Invalid base64 in {field_name}") from None
        try:
            return base64.urlsafe_b64decode(padded)
        except (ValueError, binascii.Error) as exc:
            raise EnvelopeFormatError(f"Invalid base64 in {field_name}") from exc


def is_encrypted_envelope(body: Mapping[str, Any]) -> bool:
    """True se o corpo tem o formato de envelope (qualquer campo presente)."""
    return any(field_name in body for field_name in ENVELOPE_FIELDS)


def decode_envelope(body: Mapping[str, Any]) -> EncryptedEnvelope:
    """Valida e decodifica os três campos base64 do envelope.

    Raises:
        EnvelopeFormatError: Campo ausente, vazio, não-string ou base64 inválido.
    """
    decoded: dict[str, bytes] = {}
    for field_name in ENVELOPE_FIELDS:
        value = body.get(field_name)
        if not isinstance(value, str) or not value.strip():
            raise EnvelopeFormatError(f"Missing envelope field: {field_name}")
        decoded[field_name] = _decode_base64(field_name, value)
    return EncryptedEnvelope(**decoded)


def decrypt_flow_request(envelope: EncryptedEnvelope, private_key: Any) -> DecryptedFlowRequest:
    """Abre o envelope com a chave privada de um tenant.

    Raises:
        KeyUnwrapError: A chave privada não abre a chave AES.
        PayloadDecryptError: Tag inválida ou plaintext que não é objeto JSON.
    """
    aes_key = unwrap_aes_key(private_key, envelope.encrypted_aes_key)
    plaintext = decrypt_payload(envelope.encrypted_flow_data, aes_key, envelope.initial_vector)

    try:
        payload = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PayloadDecryptError("Decrypted payload is not valid JSON") from exc

    if not isinstance(payload, dict):
        raise PayloadDecryptError("Flow payload must be a JSON object")

    return DecryptedFlowRequest(payload=payload, aes_key=aes_key, iv=envelope.initial_vector)


def encrypt_flow_response(
    *,
    response: dict[str, Any],
    aes_key: bytes,
    iv: bytes,
) -> str:
    """Cifra a resposta e retorna o base64 a ser enviado como text/plain.

    Args:
        response: Resposta da máquina de estados.
        aes_key: Chave AES da requisição.
        iv: IV original da requisição (não complementado).
    """
    if not isinstance(response, dict):
        raise FlowCryptoError("response must be a dict")

    plaintext = json.dumps(response, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(encrypt_payload(plaintext, aes_key, iv)).decode("utf-8")
