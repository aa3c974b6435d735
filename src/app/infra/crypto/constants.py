"""Constantes criptográficas do protocolo de Flows."""

AES_KEY_SIZES_ALLOWED = (16, 24, 32)  # 128/192/256 bits; a plataforma usa 128
TAG_SIZE = 16  # tag GCM concatenada ao final do ciphertext
MIN_IV_SIZE = 8  # menor nonce aceito pelo AESGCM

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

SIGNATURE_PREFIX = "sha256="
