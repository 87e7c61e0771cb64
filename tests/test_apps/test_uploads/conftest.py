"""Shared fixtures for uploads app tests."""

import pytest

from server.apps.uploads.infrastructure.storage import UploadStorage
from server.apps.uploads.logic.ingestion import UploadIngestor
from server.apps.uploads.logic.payloads import UploadPayload
from server.apps.uploads.logic.repository import UploadRepository


@pytest.fixture
def uploads_root(tmp_path):
    """Empty storage root for a single test.

    Returns:
        Path of the storage root directory.
    """
    root = tmp_path / 'uploads'
    root.mkdir()
    return root


@pytest.fixture
def uploads_storage(uploads_root):
    """Filesystem storage rooted in a temporary directory.

    Returns:
        UploadStorage instance.
    """
    return UploadStorage(location=uploads_root, base_url='/media/uploads/')


@pytest.fixture
def repository():
    """ORM-backed metadata repository.

    Returns:
        UploadRepository instance.
    """
    return UploadRepository()


@pytest.fixture
def ingestor(uploads_storage, repository):
    """Ingestor wired to temporary storage and the test database.

    Returns:
        UploadIngestor instance.
    """
    return UploadIngestor(storage=uploads_storage, repository=repository)


@pytest.fixture
def make_payload():
    """Factory for upload payloads.

    Returns:
        Callable building an UploadPayload.
    """
    def factory(
        name='test.txt',
        content=b'test file content',
        content_type='text/plain',
    ):
        return UploadPayload(
            name=name,
            content_type=content_type,
            content=content,
        )
    return factory


@pytest.fixture
def configured_uploads(settings, uploads_root):
    """Point the configured ``uploads`` storage at a temporary root.

    Returns:
        Path of the storage root directory.
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'uploads': {
            'BACKEND': (
                'server.apps.uploads.infrastructure.storage.UploadStorage'
            ),
            'OPTIONS': {
                'location': str(uploads_root),
                'base_url': '/media/uploads/',
            },
        },
    }
    settings.UPLOADS_ROOT = str(uploads_root)
    settings.UPLOADS_URL = '/media/uploads/'
    settings.UPLOADS_DIRECTORY = 'files'
    settings.UPLOADS_DIRECTORY_URL = '/media/uploads/files/'
    return uploads_root
