"""Cifra simétrica do payload (AES-GCM com tag concatenada)."""

from __future__ import annotations

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .constants import MIN_IV_SIZE, TAG_SIZE
from .errors import FlowCryptoError, PayloadDecryptError


def complement_iv(iv: bytes) -> bytes:
    """Inverte todos os bits do IV (XOR 0xFF byte a byte).

    A resposta é sempre cifrada com o IV complementado da requisição.
    """
    return bytes(byte ^ 0xFF for byte in iv)


def decrypt_payload(ciphertext_with_tag: bytes, aes_key: bytes, iv: bytes) -> bytes:
    """Descriptografa `ciphertext || tag(16)`.

    Raises:
        PayloadDecryptError: Blob menor que a tag, IV inválido ou tag
            que não confere (adulteração ou chave errada).
    """
    if len(ciphertext_with_tag) < TAG_SIZE:
        raise PayloadDecryptError("Encrypted payload shorter than authentication tag")
    if len(iv) < MIN_IV_SIZE:
        raise PayloadDecryptError("Invalid initialization vector size")

    try:
        return AESGCM(aes_key).decrypt(iv, ciphertext_with_tag, None)
    except InvalidTag as exc:
        raise PayloadDecryptError("Authentication tag mismatch") from exc
    except ValueError as exc:
        raise PayloadDecryptError("Invalid AES-GCM parameters") from exc


def encrypt_payload(plaintext: bytes, aes_key: bytes, iv: bytes) -> bytes:
    """Cifra a resposta com o IV complementado; retorna `ciphertext || tag`.

    Args:
        plaintext: Resposta serializada.
        aes_key: Mesma chave AES da requisição.
        iv: IV original da requisição (o complemento é aplicado aqui).
    """
    try:
        return AESGCM(aes_key).encrypt(complement_iv(iv), plaintext, None)
    except ValueError as exc:
        raise FlowCryptoError("Flow response encryption failed") from exc
