"""File name and metadata utilities for uploads."""

import mimetypes
from collections.abc import Callable
from pathlib import PurePosixPath

from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.utils.text import get_valid_filename

_DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def detect_content_type(filename: str) -> str:
    """Guess MIME type from the filename extension.

    Used only when the uploader did not declare a content type.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    content_type, _ = mimetypes.guess_type(filename)
    if content_type is None:
        return _DEFAULT_CONTENT_TYPE
    return content_type


def encode_file_name(filename: str) -> str:
    """Turn a submitted filename into a URL-safe storage name.

    Any directory components are dropped so the caller cannot choose
    where the file lands, then the remaining name is reduced to
    ``[-\\w.]`` characters (spaces become underscores).

    Args:
        filename: Name as submitted by the client (e.g., 'my report.pdf').

    Returns:
        URL-safe name (e.g., 'my_report.pdf').

    Raises:
        ValidationError: If nothing usable is left of the name.
    """
    basename = PurePosixPath(filename.replace('\\', '/')).name
    try:
        return get_valid_filename(basename)
    except SuspiciousFileOperation as error:
        raise ValidationError(
            f'Could not derive a valid file name from {filename!r}',
        ) from error


def split_extension(filename: str) -> tuple[str, str]:
    """Split filename into base and extension on the final dot.

    A name without a dot, or whose only dot is the leading one
    ('.env'), has an empty extension.

    Args:
        filename: Filename without directory (e.g., 'archive.tar.gz').

    Returns:
        Tuple of base and extension including the dot
        (e.g., ('archive.tar', '.gz')).
    """
    path = PurePosixPath(filename)
    return path.stem, path.suffix


def resolve_available_name(
    name: str,
    exists: Callable[[str], bool],
    max_length: int | None = None,
) -> str:
    """Find a name that does not collide with an existing entry.

    The name is tried unchanged first. On collision, ``_<n>`` is
    appended to the original base name with n = 1, 2, ... while the
    original extension is kept: 'report.pdf' -> 'report_1.pdf' ->
    'report_2.pdf'. Directory components are preserved.

    ``exists`` is called once per pre-existing colliding name plus one.

    Args:
        name: Storage name, optionally with directory ('docs/report.pdf').
        exists: Predicate telling whether a storage name is taken.
        max_length: Optional maximum length of the resulting name.

    Returns:
        First candidate for which ``exists`` returned False.

    Raises:
        SuspiciousFileOperation: If a candidate exceeds max_length.
    """
    path = PurePosixPath(name)
    stem, suffix = split_extension(path.name)

    candidate = name
    counter = 0
    while True:
        if max_length is not None and len(candidate) > max_length:
            raise SuspiciousFileOperation(
                f'Storage can not find an available filename for "{name}" '
                f'within {max_length} characters.',
            )
        if not exists(candidate):
            return candidate
        counter += 1
        candidate = str(path.with_name(f'{stem}_{counter}{suffix}'))


def join_storage_path(directory: str, filename: str) -> str:
    """Join storage directory and filename with a single slash.

    Args:
        directory: Storage directory, may be empty (storage root).
        filename: Filename without directory.

    Returns:
        Storage name (e.g., 'uploads/report.pdf' or 'report.pdf').
    """
    directory = directory.strip('/')
    if not directory:
        return filename
    return f'{directory}/{filename}'


def build_serving_url(url_prefix: str, stored_name: str) -> str:
    """Build the public URL of a stored file.

    Args:
        url_prefix: Configured public URL base (e.g., '/media/uploads/').
        stored_name: Collision-free stored filename.

    Returns:
        URL (e.g., '/media/uploads/report_1.pdf').
    """
    return '{prefix}/{name}'.format(
        prefix=url_prefix.rstrip('/'),
        name=stored_name,
    )
