"""Cryptographic primitives for field-level encryption."""

from .aes_gcm_provider import AesGcmCryptoProvider

__all__ = ["AesGcmCryptoProvider"]
