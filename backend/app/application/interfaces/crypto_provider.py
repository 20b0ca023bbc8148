"""Abstract port for the authenticated-encryption primitive."""

from abc import ABC, abstractmethod


class CryptoProvider(ABC):
    """AES-GCM style AEAD primitive plus a secure random byte source.

    Implementations raise CryptoUnavailableError when the primitive is
    missing and DecryptionFailedError when authentication fails.
    """

    @abstractmethod
    def generate_key_bytes(self, bits: int) -> bytes:
        ...

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        ...

    @abstractmethod
    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        """Encrypt and append the authentication tag."""
        ...

    @abstractmethod
    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        """Verify the tag and decrypt; never returns partial plaintext."""
        ...
