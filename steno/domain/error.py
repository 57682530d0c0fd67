"""Domain layer errors.

Expected outcomes (expired invitation, wrong identity fragments, duplicate
email, ...) are returned as typed results carrying an ``ErrorCode``. These
exceptions are reserved for conditions a caller cannot branch on.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """Raised by the store when a uniqueness constraint rejects a write."""

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"Uniqueness constraint violated: {constraint}")


class EncryptionError(DomainError):
    """Raised by an ``Encryptor`` when a blob cannot be opened or sealed."""

    pass


class AuthorizationError(DomainError):
    """Raised when an authenticated caller lacks the required role."""

    pass
