"""Custom storage backend for uploaded files on a local filesystem."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import final, override

from django.core.files.storage import FileSystemStorage

from server.apps.uploads.infrastructure.metadata import resolve_available_name

logger = logging.getLogger(__name__)


@final
class UploadStorage(FileSystemStorage):
    """Filesystem storage backend for uploads.

    Extends Django's FileSystemStorage with:
    - Collision-free naming with readable ``_<n>`` suffixes
    - Idempotent delete (absent file is not an error)
    - Transaction rollback support for failed DB operations
    - Enhanced error logging

    Writes use exclusive create (``O_EXCL``), so two concurrent writers
    resolving the same name cannot overwrite each other: the loser
    resolves again and gets the next free name.
    """

    @override
    def get_available_name(
        self,
        name: str,
        max_length: int | None = None,
    ) -> str:
        """Return a name that is free in the target directory.

        Args:
            name: Desired storage name.
            max_length: Optional maximum length for the filename.

        Returns:
            ``name`` itself or ``name`` with an ``_<n>`` suffix.
        """
        return resolve_available_name(name, self.exists, max_length)

    def ensure_directory(self, name: str) -> None:
        """Create a storage directory (and parents) if it is missing.

        Args:
            name: Storage-relative directory, empty for the root.

        Raises:
            OSError: If the directory cannot be created.
        """
        directory = Path(self.path(name))
        if directory.is_dir():
            return
        logger.info('Creating storage directory: %s', directory)
        directory.mkdir(parents=True, exist_ok=True)

    def write_bytes(
        self,
        name: str,
        content: bytes,
        reserved: Callable[[str], bool] | None = None,
        max_length: int | None = None,
    ) -> str:
        """Write raw bytes under the first free variant of ``name``.

        Candidates always derive from ``name`` itself, so a name taken
        by another writer between the check and the exclusive create
        yields the next ``_<n>`` candidate, never a double suffix.

        Args:
            name: Requested storage name, before collision handling.
            content: File content.
            reserved: Extra predicate for names that are taken even
                though no file exists (e.g. still referenced by a row).
            max_length: Optional maximum length of the storage name.

        Returns:
            Storage name actually written.

        Raises:
            SuspiciousFileOperation: If no free name fits max_length.
            OSError: If the write fails.
        """
        def is_taken(candidate: str) -> bool:
            if self.exists(candidate):
                return True
            return reserved is not None and reserved(candidate)

        while True:
            candidate = resolve_available_name(name, is_taken, max_length)
            try:
                logger.info('Writing file to storage: %s', candidate)
                self._create_exclusive(candidate, content)
            except FileExistsError:
                logger.warning(
                    'Name taken by another writer, resolving again: %s',
                    candidate,
                )
                continue
            except Exception:
                logger.exception(
                    'Failed to write file to storage: %s',
                    candidate,
                )
                raise
            logger.info('Successfully wrote file: %s', candidate)
            return candidate

    @override
    def delete(self, name: str) -> None:
        """Delete file with error handling and logging.

        A file that is already gone counts as deleted.

        Args:
            name: Storage path of file to delete.

        Raises:
            OSError: If the delete fails for any other reason.
        """
        if not self.exists(name):
            logger.warning(
                'File not found in storage (already deleted?): %s',
                name,
            )
            return

        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete written file for DB transaction rollback.

        Called when the metadata insert fails after the file has been
        written. Best effort: a failing delete is logged, not raised,
        because the original DB error is what the caller needs to see.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The file stays on disk without a metadata row
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def _create_exclusive(self, name: str, content: bytes) -> None:
        full_path = Path(self.path(name))
        full_path.parent.mkdir(parents=True, exist_ok=True)
        # 'x' mode is O_CREAT | O_EXCL
        with full_path.open('xb') as destination:
            destination.write(content)
        if self.file_permissions_mode is not None:
            full_path.chmod(self.file_permissions_mode)
