"""Erros do codec de transporte de Flows.

Mensagens nunca carregam material de chave nem buffers criptográficos.
"""


class FlowCryptoError(Exception):
    """Base para falhas do codec de transporte."""


class EnvelopeFormatError(FlowCryptoError):
    """Envelope sem os campos obrigatórios ou com base64 inválido."""


class KeyUnwrapError(FlowCryptoError):
    """Chave privada incapaz de abrir a chave AES (tenant errado ou chave obsoleta)."""


class PayloadDecryptError(FlowCryptoError):
    """Tag GCM inválida, payload corrompido ou plaintext fora do formato."""
