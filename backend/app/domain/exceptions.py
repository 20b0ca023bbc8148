"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class MissingRecordIdError(ValueError):
    """Raised when a record without a non-empty 'id' is written to the local store."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Record stored in '{collection}' must have a non-empty 'id'")


# ── Local storage ────────────────────────────────────────────────────


class StorageError(Exception):
    """Base class for local persistence failures."""


class StorageUnavailableError(StorageError):
    """The local database cannot be opened in this environment.

    Fatal for offline features — callers should not retry.
    """


class StorageWriteError(StorageError):
    """The local database rejected a write."""


class StorageReadError(StorageError):
    """The local database rejected a read."""


# ── Cryptography ─────────────────────────────────────────────────────


class CryptoUnavailableError(Exception):
    """The authenticated-encryption primitive or secure randomness is missing."""


class InvalidKeyError(ValueError):
    """An encryption key has the wrong size or an undecodable encoding."""


class DecryptionFailedError(Exception):
    """Ciphertext failed authentication (tampered input or wrong key)."""


# ── Remote API ───────────────────────────────────────────────────────


class RemoteApiError(Exception):
    """Base class for failures talking to the remote health records API."""


class ApiRequestError(RemoteApiError):
    """Raised when the remote API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class AuthenticationRequiredError(ApiRequestError):
    """The bearer token was missing, expired or rejected (HTTP 401)."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(401, message)


class RemoteUnreachableError(RemoteApiError):
    """The request never produced a response (DNS, refused connection, timeout)."""
