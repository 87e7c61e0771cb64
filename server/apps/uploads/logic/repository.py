"""Metadata persistence for uploads."""

import logging
from collections.abc import Callable
from typing import TypeVar

from django.db import DatabaseError, transaction

from server.apps.uploads.exceptions import PersistenceError
from server.apps.uploads.models import Upload

_T = TypeVar('_T')

logger = logging.getLogger(__name__)


class UploadRepository:
    """Store and query Upload metadata rows.

    Every database failure is reported as PersistenceError. Lookups
    that find nothing return None instead of raising.
    """

    def add(self, upload: Upload) -> Upload:
        """Insert a new upload row.

        Args:
            upload: Unsaved Upload instance.

        Returns:
            The same instance with id and created_at set.

        Raises:
            PersistenceError: If the insert fails.
        """
        try:
            with transaction.atomic():
                upload.save(force_insert=True)
        except DatabaseError as error:
            logger.exception(
                'Failed to create upload record: %s',
                upload.storage_path,
            )
            raise PersistenceError('insert') from error

        logger.info(
            'Upload record created in database: %s (ID: %d)',
            upload.storage_path,
            upload.id,
        )
        return upload

    def update(self, upload: Upload) -> Upload:
        """Persist the soft-delete flag of an upload.

        Args:
            upload: Saved Upload instance.

        Returns:
            The same instance.

        Raises:
            PersistenceError: If the update fails.
        """
        try:
            with transaction.atomic():
                upload.save(update_fields=['is_deleted'])
        except DatabaseError as error:
            logger.exception('Failed to update upload record: ID=%d', upload.id)
            raise PersistenceError('update') from error
        return upload

    def remove(self, upload: Upload) -> None:
        """Delete an upload row.

        Args:
            upload: Saved Upload instance.

        Raises:
            PersistenceError: If the delete fails.
        """
        upload_id = upload.id
        try:
            with transaction.atomic():
                upload.delete()
        except DatabaseError as error:
            logger.exception('Failed to delete upload record: ID=%d', upload_id)
            raise PersistenceError('delete') from error
        logger.info('Upload record deleted from database: ID=%d', upload_id)

    def list_active(self, is_deleted: bool = False) -> list[Upload]:
        """List uploads by soft-delete flag, newest first.

        Args:
            is_deleted: True lists the trash, False the regular uploads.

        Returns:
            Uploads ordered by created_at descending.
        """
        return self._query(
            lambda: list(Upload.all_objects.filter(is_deleted=is_deleted)),
        )

    def search(self, term: str, is_deleted: bool = False) -> list[Upload]:
        """Search uploads by original name (case-insensitive substring).

        Args:
            term: Substring to look for.
            is_deleted: Soft-delete flag the results must have.

        Returns:
            Matching uploads ordered by created_at descending.
        """
        return self._query(
            lambda: list(
                Upload.all_objects.filter(
                    is_deleted=is_deleted,
                    original_name__icontains=term,
                ),
            ),
        )

    def get_by_id(self, upload_id: int) -> Upload | None:
        """Get upload by id, including soft-deleted ones.

        Args:
            upload_id: Upload primary key.

        Returns:
            Upload instance, or None if not found.
        """
        return self._query(
            lambda: Upload.all_objects.filter(id=upload_id).first(),
        )

    def get_by_original_name(self, name: str) -> Upload | None:
        """Get upload by original name (case-insensitive exact match).

        Several uploads may share an original name; the newest wins.

        Args:
            name: Original (encoded) file name.

        Returns:
            Upload instance, or None if not found.
        """
        return self._query(
            lambda: Upload.all_objects.filter(
                original_name__iexact=name,
            ).first(),
        )

    def storage_path_exists(self, storage_path: str) -> bool:
        """Tell whether any row, trashed or not, uses a storage path.

        A row can outlive its file (crash between file and row delete),
        so the disk alone does not tell whether a name is free.
        """
        return self._query(
            lambda: Upload.all_objects.filter(
                storage_path=storage_path,
            ).exists(),
        )

    def _query(self, run: Callable[[], _T]) -> _T:
        try:
            return run()
        except DatabaseError as error:
            logger.exception('Upload metadata query failed')
            raise PersistenceError('query') from error
