"""Database models for uploads app."""

from pathlib import PurePosixPath
from typing import Final, final, override

from django.db import models

# Constants for field max lengths
NAME_MAX_LENGTH: Final = 255
_PATH_MAX_LENGTH: Final = 1024
_CONTENT_TYPE_MAX_LENGTH: Final = 255


class ActiveUploadManager(models.Manager['Upload']):
    """Default manager hiding soft-deleted uploads."""

    @override
    def get_queryset(self) -> models.QuerySet['Upload']:
        """Exclude uploads flagged as deleted.

        Returns:
            QuerySet of uploads that are not soft-deleted.
        """
        return super().get_queryset().filter(is_deleted=False)


@final
class Upload(models.Model):
    """Metadata row for a file stored by the uploads storage backend.

    The file itself lives at ``storage_path`` inside the uploads storage
    root. ``storage_path`` and ``serving_url`` are both derived from
    ``stored_name`` at ingestion time and never change afterwards.

    ``Upload.objects`` hides soft-deleted rows from default listings,
    ``Upload.all_objects`` sees everything.
    """

    # Collision-free name actually used in storage
    stored_name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text='Name on disk: original name plus optional _<n> suffix',
    )

    original_name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        db_index=True,
        help_text='Submitted file name, URL-safe encoded',
    )

    storage_path = models.CharField(
        max_length=_PATH_MAX_LENGTH,
        help_text='Path inside the uploads storage: {directory}/{stored_name}',
    )

    serving_url = models.CharField(
        max_length=_PATH_MAX_LENGTH,
        help_text='Public URL: {UPLOADS_DIRECTORY_URL}{stored_name}',
    )

    content_type = models.CharField(
        max_length=_CONTENT_TYPE_MAX_LENGTH,
        help_text='MIME type declared by the uploader',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    # Soft delete flag, toggled from the trash view
    is_deleted = models.BooleanField(default=False, db_index=True)

    objects = ActiveUploadManager()
    all_objects = models.Manager()

    class Meta:
        """Model metadata."""

        verbose_name = 'Upload'  # type: ignore[mutable-override]
        verbose_name_plural = 'Uploads'  # type: ignore[mutable-override]
        ordering = ['-created_at', '-id']

        indexes = [
            # Optimize default listings (newest first, by flag)
            models.Index(
                fields=['is_deleted', '-created_at'],
                name='uploads_deleted_recent_idx',
            ),
        ]

        constraints = [
            # One row per file on disk
            models.UniqueConstraint(
                fields=['storage_path'],
                name='uploads_storage_path_unique',
            ),
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='uploads_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.storage_path

    def get_directory(self) -> str:
        """Extract storage directory from storage_path.

        Example: 'uploads/reports/file.pdf' -> 'uploads/reports'

        Returns:
            Directory holding the stored file.
        """
        return str(PurePosixPath(self.storage_path).parent)

    def get_extension(self) -> str:
        """Extract file extension from stored_name.

        Example: 'report_1.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase), empty if none.
        """
        extension = PurePosixPath(self.stored_name).suffix
        return extension.lstrip('.').lower()
