"""Tests for upload metadata repository."""

from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from server.apps.uploads.exceptions import PersistenceError
from server.apps.uploads.models import Upload


def _build_upload(name, **overrides):
    fields = {
        'stored_name': name,
        'original_name': name,
        'storage_path': f'files/{name}',
        'serving_url': f'/media/uploads/files/{name}',
        'content_type': 'text/plain',
        'size_bytes': 10,
    }
    fields.update(overrides)
    return Upload(**fields)


def _age(upload, minutes):
    """Move created_at into the past to get a stable ordering."""
    Upload.all_objects.filter(id=upload.id).update(
        created_at=timezone.now() - timedelta(minutes=minutes),
    )


@pytest.mark.django_db
class TestWrites:
    """Tests for add, update and remove."""

    def test_add_assigns_id_and_timestamp(self, repository):
        """Test add inserts the row."""
        upload = repository.add(_build_upload('a.txt'))

        assert upload.id is not None
        assert upload.created_at is not None
        assert Upload.objects.filter(id=upload.id).exists()

    def test_add_duplicate_path_raises_persistence_error(self, repository):
        """Test constraint violations are reported as PersistenceError."""
        repository.add(_build_upload('a.txt'))

        with pytest.raises(PersistenceError):
            repository.add(_build_upload('a.txt'))

        assert Upload.all_objects.count() == 1

    def test_add_database_error(self, repository):
        """Test database failures are wrapped."""
        with mock.patch.object(
            Upload,
            'save',
            side_effect=DatabaseError('connection lost'),
        ):
            with pytest.raises(PersistenceError) as exc_info:
                repository.add(_build_upload('a.txt'))

        assert isinstance(exc_info.value.__cause__, DatabaseError)

    def test_update_persists_flag(self, repository):
        """Test update saves is_deleted."""
        upload = repository.add(_build_upload('a.txt'))
        upload.is_deleted = True

        repository.update(upload)

        upload.refresh_from_db()
        assert upload.is_deleted is True

    def test_remove_deletes_row(self, repository):
        """Test remove deletes the row."""
        upload = repository.add(_build_upload('a.txt'))
        upload_id = upload.id

        repository.remove(upload)

        assert not Upload.all_objects.filter(id=upload_id).exists()


@pytest.mark.django_db
class TestQueries:
    """Tests for list, search and lookups."""

    @pytest.fixture
    def uploads(self, repository):
        """Three uploads, one of them in trash, oldest first."""
        report = repository.add(_build_upload('Report.pdf'))
        notes = repository.add(_build_upload('notes.txt'))
        old_report = repository.add(
            _build_upload('old_report.pdf', is_deleted=True),
        )
        _age(report, 30)
        _age(notes, 20)
        _age(old_report, 10)
        return report, notes, old_report

    def test_list_active_newest_first(self, repository, uploads):
        """Test regular listing excludes trash, newest first."""
        report, notes, _ = uploads

        assert repository.list_active(is_deleted=False) == [notes, report]

    def test_list_active_trash(self, repository, uploads):
        """Test trash listing returns only deleted uploads."""
        _, _, old_report = uploads

        assert repository.list_active(is_deleted=True) == [old_report]

    def test_search_case_insensitive(self, repository, uploads):
        """Test substring search ignores case."""
        report, _, old_report = uploads

        assert repository.search('REPORT', is_deleted=False) == [report]
        assert repository.search('report', is_deleted=True) == [old_report]

    def test_storage_path_exists(self, repository, uploads):
        """Test path lookup covers trashed rows and nothing else."""
        assert repository.storage_path_exists('files/notes.txt')
        assert repository.storage_path_exists('files/old_report.pdf')
        assert not repository.storage_path_exists('files/notes_1.txt')

    def test_search_no_match(self, repository, uploads):
        """Test search returns empty list."""
        assert repository.search('missing') == []

    def test_get_by_id_includes_deleted(self, repository, uploads):
        """Test lookup by id sees trash too."""
        _, _, old_report = uploads

        assert repository.get_by_id(old_report.id) == old_report

    def test_get_by_id_not_found(self, repository):
        """Test missing id returns None."""
        assert repository.get_by_id(99999) is None

    def test_get_by_original_name_case_insensitive(self, repository, uploads):
        """Test exact name lookup ignores case."""
        report, _, _ = uploads

        assert repository.get_by_original_name('report.PDF') == report

    def test_get_by_original_name_not_found(self, repository, uploads):
        """Test partial names do not match."""
        assert repository.get_by_original_name('report') is None

    def test_get_by_original_name_newest_wins(self, repository, uploads):
        """Test several rows with one name resolve to the newest."""
        newer = repository.add(
            _build_upload(
                'Report_1.pdf',
                original_name='Report.pdf',
            ),
        )

        assert repository.get_by_original_name('report.pdf') == newer

    def test_query_database_error(self, repository):
        """Test query failures are wrapped."""
        with mock.patch.object(
            Upload.all_objects,
            'filter',
            side_effect=DatabaseError('connection lost'),
        ):
            with pytest.raises(PersistenceError):
                repository.list_active()
