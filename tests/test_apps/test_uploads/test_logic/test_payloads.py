"""Tests for upload payloads."""

from django.core.files.uploadedfile import SimpleUploadedFile

from server.apps.uploads.logic.payloads import UploadPayload


def test_size_bytes():
    """Test size is the byte length of the content."""
    payload = UploadPayload(
        name='a.txt',
        content_type='text/plain',
        content=b'12345',
    )

    assert payload.size_bytes == 5


def test_from_uploaded_file():
    """Test Django uploaded files are read into a payload."""
    uploaded_file = SimpleUploadedFile(
        'report.pdf',
        b'%PDF',
        content_type='application/pdf',
    )

    payload = UploadPayload.from_uploaded_file(uploaded_file)

    assert payload == UploadPayload(
        name='report.pdf',
        content_type='application/pdf',
        content=b'%PDF',
    )


def test_from_uploaded_file_without_content_type():
    """Test missing content type is guessed from the name."""
    uploaded_file = SimpleUploadedFile('photo.png', b'\x89PNG', content_type=None)

    payload = UploadPayload.from_uploaded_file(uploaded_file)

    assert payload.content_type == 'image/png'
