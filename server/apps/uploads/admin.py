"""Django admin configuration for uploads app."""

from typing import Final

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.uploads.models import Upload

_SIZE_UNITS: Final = ('KB', 'MB', 'GB')


def _format_bytes(size_bytes: int) -> str:
    """Render an upload size for the changelist.

    Sizes below 1 KB are exact, larger ones get one decimal in the
    smallest unit that keeps the number under 1024 (1536 -> '1.5 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    size = size_bytes / 1024
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            return f'{size:.1f} {unit}'
        size /= 1024
    return f'{size:.1f} {_SIZE_UNITS[-1]}'


@admin.register(Upload)
class UploadAdmin(admin.ModelAdmin[Upload]):
    """Admin interface for Upload model.

    Uploads are created and deleted through the ingestion logic only,
    so the admin is read-only apart from the soft-delete flag.
    """

    list_display = [
        'stored_name',
        'original_name',
        'directory_display',
        'size_display',
        'content_type',
        'created_at',
        'is_deleted',
    ]

    list_filter = [
        'is_deleted',
        'content_type',
        'created_at',
    ]

    search_fields = [
        'original_name',
        'stored_name',
    ]

    readonly_fields = [
        'stored_name',
        'original_name',
        'storage_path',
        'serving_url',
        'content_type',
        'size_bytes',
        'created_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('stored_name', 'original_name', 'storage_path'),
        }),
        ('Metadata', {
            'fields': ('serving_url', 'content_type', 'size_bytes'),
        }),
        ('State', {
            'fields': ('is_deleted', 'created_at'),
        }),
    )

    def directory_display(self, obj: Upload) -> str:
        """Display storage directory extracted from storage_path.

        Args:
            obj: Upload instance.

        Returns:
            Directory without filename.
        """
        return obj.get_directory()
    directory_display.short_description = 'Directory'  # type: ignore[attr-defined]

    def size_display(self, obj: Upload) -> str:
        """Display file size in human-readable format.

        Args:
            obj: Upload instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Uploads are only created through ingestion."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: Upload | None = None,
    ) -> bool:
        """Deleting a row here would orphan the stored file."""
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet[Upload]:
        """Include soft-deleted uploads.

        Args:
            request: HTTP request.

        Returns:
            QuerySet over all uploads.
        """
        return Upload.all_objects.all()
