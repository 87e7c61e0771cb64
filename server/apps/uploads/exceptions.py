"""Exceptions for uploads app."""


class UploadError(Exception):
    """Base class for upload ingestion failures."""


class EmptyBatchError(UploadError):
    """Raised when ingestion is invoked with zero payloads."""

    def __init__(self) -> None:
        """Initialize EmptyBatchError."""
        super().__init__('Upload batch must contain at least one file')


class StorageIOError(UploadError):
    """Raised when a storage write or delete fails.

    A delete of a file that is already absent is not a failure and
    never raises this error.
    """

    def __init__(self, operation: str, name: str) -> None:
        """Initialize StorageIOError.

        Args:
            operation: Storage operation that failed ('write', 'delete').
            name: Storage name the operation was applied to.
        """
        self.operation = operation
        self.name = name
        super().__init__(f'Storage {operation} failed: {name}')


class PersistenceError(UploadError):
    """Raised when the metadata repository operation fails."""

    def __init__(self, operation: str) -> None:
        """Initialize PersistenceError.

        Args:
            operation: Repository operation that failed.
        """
        self.operation = operation
        super().__init__(f'Upload metadata {operation} failed')
