"""Business logic for upload ingestion and removal."""

import logging
from collections.abc import Iterable
from pathlib import PurePosixPath

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.core.files.storage import storages

from server.apps.uploads.exceptions import (
    EmptyBatchError,
    PersistenceError,
    StorageIOError,
)
from server.apps.uploads.infrastructure.metadata import (
    build_serving_url,
    encode_file_name,
    join_storage_path,
)
from server.apps.uploads.infrastructure.storage import UploadStorage
from server.apps.uploads.logic.payloads import UploadPayload
from server.apps.uploads.logic.repository import UploadRepository
from server.apps.uploads.models import NAME_MAX_LENGTH, Upload

logger = logging.getLogger(__name__)


class UploadIngestor:
    """Write uploaded files to storage and keep their metadata.

    Storage and repository are injected, so the storage root and public
    URL are whatever the given storage was configured with.

    Neither ingestion nor removal is atomic across storage and
    database:
    - Files and rows of earlier payloads in a batch stay in place when
      a later payload fails.
    - ``remove`` deletes the file before the row; a crash in between
      leaves a row pointing at a missing file.
    """

    def __init__(
        self,
        storage: UploadStorage,
        repository: UploadRepository,
    ) -> None:
        """Initialize UploadIngestor.

        Args:
            storage: Backend the files are written to.
            repository: Metadata persistence.
        """
        self._storage = storage
        self._repository = repository

    def ingest(
        self,
        payloads: Iterable[UploadPayload],
        destination_path: str,
        url_prefix: str,
    ) -> list[Upload]:
        """Store a batch of payloads and create their metadata rows.

        Args:
            payloads: Files to store, in submission order.
            destination_path: Storage directory for the batch.
            url_prefix: Public URL the directory is served under.

        Returns:
            Created Upload instances, in the same order as payloads.

        Raises:
            EmptyBatchError: If payloads is empty.
            ValidationError: If a payload name has no usable characters
                or is too long. Names are checked for the whole batch
                before anything is written. Also raised when collisions
                push a stored name past the column length.
            StorageIOError: If creating the directory or a write fails.
            PersistenceError: If a metadata insert fails.
        """
        batch = list(payloads)
        if not batch:
            raise EmptyBatchError
        # Reject bad names before anything is written
        original_names = [_encode_original_name(payload) for payload in batch]

        try:
            self._storage.ensure_directory(destination_path)
        except OSError as error:
            logger.exception(
                'Failed to create upload directory: %s',
                destination_path,
            )
            raise StorageIOError('mkdir', destination_path) from error

        logger.info(
            'Ingesting %d files into %s',
            len(batch),
            destination_path or '<root>',
        )
        return [
            self._ingest_one(
                payload,
                original_name,
                destination_path,
                url_prefix,
            )
            for payload, original_name in zip(
                batch,
                original_names,
                strict=True,
            )
        ]

    def remove(self, upload: Upload) -> None:
        """Permanently delete an upload: file first, then the row.

        Args:
            upload: Upload to delete.

        Raises:
            StorageIOError: If the file exists but cannot be deleted;
                the row is kept in that case.
            PersistenceError: If the row cannot be deleted.
        """
        logger.info(
            'Deleting upload: ID=%d, path=%s',
            upload.id,
            upload.storage_path,
        )
        try:
            self._storage.delete(upload.storage_path)
        except OSError as error:
            raise StorageIOError('delete', upload.storage_path) from error

        self._repository.remove(upload)
        logger.info('Upload permanently deleted: %s', upload.storage_path)

    def toggle_soft_delete(self, upload: Upload) -> Upload:
        """Move upload to trash, or restore it from trash.

        Only the flag changes; the stored file is left alone.

        Args:
            upload: Upload to toggle.

        Returns:
            The same instance with is_deleted flipped and persisted.

        Raises:
            PersistenceError: If the update fails.
        """
        upload.is_deleted = not upload.is_deleted
        self._repository.update(upload)
        logger.info(
            'Upload %s: %s (ID: %d)',
            'moved to trash' if upload.is_deleted else 'restored',
            upload.storage_path,
            upload.id,
        )
        return upload

    def _ingest_one(  # noqa: WPS211
        self,
        payload: UploadPayload,
        original_name: str,
        destination_path: str,
        url_prefix: str,
    ) -> Upload:
        requested_path = join_storage_path(destination_path, original_name)
        # Limit the stored name, the directory prefix is fixed
        max_length = (
            len(requested_path) - len(original_name) + NAME_MAX_LENGTH
        )

        # Step 1: Write file to storage
        try:
            saved_path = self._storage.write_bytes(
                requested_path,
                payload.content,
                reserved=self._repository.storage_path_exists,
                max_length=max_length,
            )
        except SuspiciousFileOperation as error:
            raise ValidationError(
                f'No free stored name for {original_name!r} within '
                f'{NAME_MAX_LENGTH} characters',
            ) from error
        except OSError as error:
            raise StorageIOError('write', requested_path) from error

        stored_name = PurePosixPath(saved_path).name
        upload = Upload(
            stored_name=stored_name,
            original_name=original_name,
            storage_path=saved_path,
            serving_url=build_serving_url(url_prefix, stored_name),
            content_type=payload.content_type,
            size_bytes=payload.size_bytes,
        )

        # Step 2: Create metadata record
        try:
            return self._repository.add(upload)
        except PersistenceError:
            # Only this payload's file; earlier ones stay
            self._storage.rollback_upload(saved_path)
            raise


def _encode_original_name(payload: UploadPayload) -> str:
    original_name = encode_file_name(payload.name)
    if len(original_name) > NAME_MAX_LENGTH:
        raise ValidationError(
            f'File name longer than {NAME_MAX_LENGTH} characters: '
            f'{original_name[:32]}...',
        )
    return original_name


def get_ingestor() -> UploadIngestor:
    """Build ingestor for the configured uploads storage.

    Returns:
        UploadIngestor using ``STORAGES['uploads']``.
    """
    return UploadIngestor(
        storage=storages['uploads'],  # type: ignore[arg-type]
        repository=UploadRepository(),
    )


def upload_files(
    payloads: Iterable[UploadPayload],
    ingestor: UploadIngestor | None = None,
) -> list[Upload]:
    """Ingest payloads into the configured upload directory.

    Destination and public URL come from settings, never from the
    client, so uploads cannot be steered outside UPLOADS_DIRECTORY.

    Args:
        payloads: Files to store.
        ingestor: Ingestor to use, defaults to ``get_ingestor()``.

    Returns:
        Created Upload instances.
    """
    ingestor = ingestor or get_ingestor()
    return ingestor.ingest(
        payloads,
        destination_path=settings.UPLOADS_DIRECTORY,
        url_prefix=settings.UPLOADS_DIRECTORY_URL,
    )
