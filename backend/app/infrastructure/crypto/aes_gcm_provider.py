"""
crypto.aes_gcm_provider
~~~~~~~~~~~~~~~~~~~~~~~

AES-GCM implementation of the :class:`CryptoProvider` port using the
``cryptography`` package.  Keys are 256-bit, nonces are 96-bit and the
16-byte authentication tag is appended to the ciphertext.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.application.interfaces.crypto_provider import CryptoProvider
from app.domain.exceptions import CryptoUnavailableError, DecryptionFailedError


class AesGcmCryptoProvider(CryptoProvider):
    """AEAD primitive backed by OpenSSL through ``cryptography``."""

    def generate_key_bytes(self, bits: int) -> bytes:
        try:
            return AESGCM.generate_key(bit_length=bits)
        except UnsupportedAlgorithm as exc:
            raise CryptoUnavailableError(f"AES-GCM is not supported: {exc}") from exc

    def random_bytes(self, length: int) -> bytes:
        """Return ``length`` cryptographically-secure random bytes."""
        try:
            return os.urandom(length)
        except NotImplementedError as exc:
            raise CryptoUnavailableError("No secure randomness source available") from exc

    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        return self._cipher(key).encrypt(nonce, plaintext, None)

    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        try:
            return self._cipher(key).decrypt(nonce, ciphertext, None)
        except InvalidTag as exc:
            raise DecryptionFailedError("Authentication tag did not verify") from exc

    @staticmethod
    def _cipher(key: bytes) -> AESGCM:
        try:
            return AESGCM(key)
        except UnsupportedAlgorithm as exc:
            raise CryptoUnavailableError(f"AES-GCM is not supported: {exc}") from exc
