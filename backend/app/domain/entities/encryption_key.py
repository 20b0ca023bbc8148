"""Symmetric key value object for field encryption."""

from dataclasses import dataclass, field

from app.domain.exceptions import InvalidKeyError

#: 256-bit AES key
KEY_SIZE = 32


@dataclass(frozen=True)
class EncryptionKey:
    """Raw AES-256 key material, owned by the caller and never persisted here."""

    raw: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.raw) != KEY_SIZE:
            raise InvalidKeyError(
                f"Encryption key must be {KEY_SIZE} bytes, got {len(self.raw)}"
            )
