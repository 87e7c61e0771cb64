"""Tests for Upload model."""

import pytest
from django.db import IntegrityError

from server.apps.uploads.models import Upload


def _create_upload(**overrides):
    fields = {
        'stored_name': 'report.pdf',
        'original_name': 'report.pdf',
        'storage_path': 'files/report.pdf',
        'serving_url': '/media/uploads/files/report.pdf',
        'content_type': 'application/pdf',
        'size_bytes': 100,
    }
    fields.update(overrides)
    return Upload.all_objects.create(**fields)


@pytest.mark.django_db
def test_upload_model_str():
    """Test Upload __str__ method."""
    upload = _create_upload()

    assert str(upload) == 'files/report.pdf'


@pytest.mark.django_db
def test_upload_defaults():
    """Test new uploads are not deleted and get a timestamp."""
    upload = _create_upload()

    assert upload.is_deleted is False
    assert upload.created_at is not None


@pytest.mark.django_db
def test_upload_get_directory():
    """Test get_directory extracts the storage directory."""
    upload = _create_upload(storage_path='files/reports/report.pdf')

    assert upload.get_directory() == 'files/reports'


@pytest.mark.django_db
def test_upload_get_extension():
    """Test get_extension returns lowercase extension without dot."""
    upload = _create_upload(stored_name='report_1.PDF')

    assert upload.get_extension() == 'pdf'


@pytest.mark.django_db
def test_default_manager_hides_deleted():
    """Test Upload.objects excludes soft-deleted rows."""
    visible = _create_upload()
    hidden = _create_upload(
        stored_name='old.pdf',
        storage_path='files/old.pdf',
        is_deleted=True,
    )

    assert list(Upload.objects.all()) == [visible]
    assert set(Upload.all_objects.all()) == {visible, hidden}


@pytest.mark.django_db
def test_storage_path_unique():
    """Test two rows cannot point at the same file."""
    _create_upload()

    with pytest.raises(IntegrityError):
        _create_upload()


@pytest.mark.django_db
def test_size_bytes_non_negative():
    """Test negative sizes are rejected by the database."""
    with pytest.raises(IntegrityError):
        _create_upload(size_bytes=-1)
