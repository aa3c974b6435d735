"""Codec de transporte dos Flows: RSA-OAEP + AES-GCM + HMAC.

Funções puras, sem I/O. Usado pelo resolvedor de tenant e pelo
coordinator do endpoint.
"""

from .constants import AES_KEY_SIZES_ALLOWED, TAG_SIZE
from .errors import EnvelopeFormatError, FlowCryptoError, KeyUnwrapError, PayloadDecryptError
from .flow_encryption import (
    DecryptedFlowRequest,
    EncryptedEnvelope,
    decode_envelope,
    decrypt_flow_request,
    encrypt_flow_response,
    is_encrypted_envelope,
)
from .keys import GeneratedKeyPair, generate_key_pair, load_private_key, unwrap_aes_key
from .payload import complement_iv, decrypt_payload, encrypt_payload
from .signature import compute_signature, verify_signature

__all__ = [
    "AES_KEY_SIZES_ALLOWED",
    "TAG_SIZE",
    "DecryptedFlowRequest",
    "EncryptedEnvelope",
    "EnvelopeFormatError",
    "FlowCryptoError",
    "GeneratedKeyPair",
    "KeyUnwrapError",
    "PayloadDecryptError",
    "complement_iv",
    "compute_signature",
    "decode_envelope",
    "decrypt_flow_request",
    "decrypt_payload",
    "encrypt_flow_response",
    "encrypt_payload",
    "generate_key_pair",
    "is_encrypted_envelope",
    "load_private_key",
    "unwrap_aes_key",
    "verify_signature",
]
