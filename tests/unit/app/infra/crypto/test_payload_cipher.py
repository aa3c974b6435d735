"""Testes da cifra AES-GCM do payload (tag concatenada, IV complementado)."""

from __future__ import annotations

import os

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.infra.crypto import complement_iv, decrypt_payload, encrypt_payload
from app.infra.crypto.errors import PayloadDecryptError

KEY = bytes(range(16))
IV = bytes(range(100, 116))


def test_complement_iv_flips_every_bit() -> None:
    assert complement_iv(b"\x00\xff\x0f") == b"\xff\x00\xf0"
    assert complement_iv(complement_iv(IV)) == IV


def test_encrypt_uses_complemented_iv() -> None:
    plaintext = b'{"screen":"FORM"}'

    blob = encrypt_payload(plaintext, KEY, IV)

    assert decrypt_payload(blob, KEY, complement_iv(IV)) == plaintext
    with pytest.raises(PayloadDecryptError):
        decrypt_payload(blob, KEY, IV)


@pytest.mark.parametrize("key_size", [16, 24, 32])
def test_roundtrip_for_each_key_size(key_size: int) -> None:
    key = os.urandom(key_size)
    plaintext = os.urandom(64)

    blob = encrypt_payload(plaintext, key, IV)

    assert len(blob) == len(plaintext) + 16
    assert decrypt_payload(blob, key, complement_iv(IV)) == plaintext


def test_decrypt_matches_platform_layout() -> None:
    blob = AESGCM(KEY).encrypt(IV, b"hello", None)
    assert decrypt_payload(blob, KEY, IV) == b"hello"


def test_encrypt_is_deterministic() -> None:
    assert encrypt_payload(b"same", KEY, IV) == encrypt_payload(b"same", KEY, IV)


@pytest.mark.parametrize("position", [0, 3, -1, -16])
def test_tampered_blob_fails(position: int) -> None:
    blob = bytearray(AESGCM(KEY).encrypt(IV, b"important payload", None))
    blob[position] ^= 0x01

    with pytest.raises(PayloadDecryptError, match="tag"):
        decrypt_payload(bytes(blob), KEY, IV)


def test_wrong_key_fails() -> None:
    blob = AESGCM(KEY).encrypt(IV, b"payload", None)
    with pytest.raises(PayloadDecryptError):
        decrypt_payload(blob, os.urandom(16), IV)


def test_blob_shorter_than_tag_fails() -> None:
    with pytest.raises(PayloadDecryptError, match="shorter"):
        decrypt_payload(b"\x00" * 15, KEY, IV)


def test_short_iv_fails() -> None:
    blob = AESGCM(KEY).encrypt(IV, b"payload", None)
    with pytest.raises(PayloadDecryptError, match="initialization vector"):
        decrypt_payload(blob, KEY, b"\x01\x02")
