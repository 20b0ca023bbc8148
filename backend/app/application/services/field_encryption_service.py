"""
Field-level encryption for sensitive patient attributes.

Each value is encrypted with AES-256-GCM under a caller-owned key and a
fresh random 96-bit nonce, and stored as ``base64(nonce || ciphertext)``.
Keys travel as base64 of the raw key bytes.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable
from typing import Any

from app.application.interfaces.crypto_provider import CryptoProvider
from app.domain.entities import KEY_SIZE, EncryptionKey
from app.domain.exceptions import DecryptionFailedError, InvalidKeyError

#: AES-GCM nonce length in bytes
NONCE_SIZE: int = 12

#: AES-GCM authentication tag length in bytes
TAG_SIZE: int = 16

#: Patient attributes treated as sensitive
PATIENT_SENSITIVE_FIELDS: tuple[str, ...] = (
    "firstName",
    "lastName",
    "dateOfBirth",
    "phoneNumber",
    "email",
    "address",
    "bloodType",
    "allergies",
)

#: Patient attributes holding lists, restored from JSON after decryption
PATIENT_LIST_FIELDS: tuple[str, ...] = ("allergies",)


class FieldEncryptionService:
    """Symmetric encryption of individual entity fields.

    The service never stores keys; callers own generation output and are
    responsible for keeping it somewhere safe.
    """

    def __init__(self, provider: CryptoProvider | None = None):
        if provider is None:
            from app.infrastructure.crypto import AesGcmCryptoProvider

            provider = AesGcmCryptoProvider()
        self._provider = provider

    # ── Keys ─────────────────────────────────────────────────────────

    def generate_key(self) -> EncryptionKey:
        """Generate a new 256-bit key."""
        return EncryptionKey(self._provider.generate_key_bytes(KEY_SIZE * 8))

    @staticmethod
    def export_key(key: EncryptionKey) -> str:
        """Encode raw key bytes as base64 for transport or storage."""
        return base64.b64encode(key.raw).decode("ascii")

    @staticmethod
    def import_key(encoded: str) -> EncryptionKey:
        """Decode a key produced by :meth:`export_key`."""
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidKeyError("Encryption key is not valid base64") from exc
        return EncryptionKey(raw)

    # ── Single values ────────────────────────────────────────────────

    def encrypt(self, plaintext: str, key: EncryptionKey) -> str:
        """Encrypt a string under a fresh random nonce."""
        nonce = self._provider.random_bytes(NONCE_SIZE)
        ciphertext = self._provider.seal(key.raw, nonce, plaintext.encode("utf-8"))
        return base64.b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, encoded: str, key: EncryptionKey) -> str:
        """Decrypt a value produced by :meth:`encrypt`.

        Raises DecryptionFailedError for malformed, tampered or wrong-key input.
        """
        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionFailedError("Encrypted value is not valid base64") from exc

        if len(payload) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionFailedError("Encrypted value is too short")

        nonce, ciphertext = payload[:NONCE_SIZE], payload[NONCE_SIZE:]
        plaintext = self._provider.open(key.raw, nonce, ciphertext)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionFailedError("Decrypted value is not UTF-8") from exc

    # ── Entity fields ────────────────────────────────────────────────

    def encrypt_fields(
        self,
        entity: dict[str, Any],
        key: EncryptionKey,
        field_names: Iterable[str],
    ) -> dict[str, Any]:
        """Return a copy of ``entity`` with the named fields encrypted.

        Missing or empty fields are left as they are. Lists and dicts are
        JSON-serialized first; other scalars are converted with ``str``.
        """
        result = dict(entity)
        for name in field_names:
            value = result.get(name)
            if not value:
                continue
            if isinstance(value, (list, dict)):
                text = json.dumps(value)
            else:
                text = str(value)
            result[name] = self.encrypt(text, key)
        return result

    def decrypt_fields(
        self,
        entity: dict[str, Any],
        key: EncryptionKey,
        field_names: Iterable[str],
        list_fields: Iterable[str] = (),
    ) -> dict[str, Any]:
        """Return a copy of ``entity`` with the named fields decrypted.

        Fields listed in ``list_fields`` are parsed back from JSON; if the
        text is not JSON the decrypted string is kept.
        """
        json_fields = set(list_fields)
        result = dict(entity)
        for name in field_names:
            value = result.get(name)
            if not value:
                continue
            if not isinstance(value, str):
                raise DecryptionFailedError(f"Field '{name}' does not hold an encrypted value")

            text = self.decrypt(value, key)
            if name in json_fields:
                try:
                    result[name] = json.loads(text)
                except json.JSONDecodeError:
                    result[name] = text
            else:
                result[name] = text
        return result

    def encrypt_patient_data(self, patient: dict[str, Any], key: EncryptionKey) -> dict[str, Any]:
        return self.encrypt_fields(patient, key, PATIENT_SENSITIVE_FIELDS)

    def decrypt_patient_data(self, patient: dict[str, Any], key: EncryptionKey) -> dict[str, Any]:
        return self.decrypt_fields(
            patient, key, PATIENT_SENSITIVE_FIELDS, list_fields=PATIENT_LIST_FIELDS
        )
