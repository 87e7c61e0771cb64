"""Incoming file payloads."""

from dataclasses import dataclass
from typing import final

from django.core.files.uploadedfile import UploadedFile

from server.apps.uploads.infrastructure.metadata import detect_content_type


@final
@dataclass(frozen=True, slots=True)
class UploadPayload:
    """One submitted file: declared name, content type and bytes."""

    name: str
    content_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        """Byte length of the payload."""
        return len(self.content)

    @classmethod
    def from_uploaded_file(cls, uploaded_file: UploadedFile) -> 'UploadPayload':
        """Build payload from a file in ``request.FILES``.

        Args:
            uploaded_file: Django uploaded file.

        Returns:
            Payload with the file fully read into memory.
        """
        name = uploaded_file.name or ''
        content_type = uploaded_file.content_type or detect_content_type(name)
        return cls(
            name=name,
            content_type=content_type,
            content=uploaded_file.read(),
        )
