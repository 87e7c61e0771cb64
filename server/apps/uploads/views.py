"""HTTP endpoints for uploads app.

Write endpoints are CSRF exempt: the JSON API has no session
authentication, and its clients never receive a CSRF cookie.
"""

import logging
from typing import Any, Final

from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from server.apps.uploads.exceptions import (
    EmptyBatchError,
    PersistenceError,
    StorageIOError,
)
from server.apps.uploads.logic.ingestion import get_ingestor, upload_files
from server.apps.uploads.logic.payloads import UploadPayload
from server.apps.uploads.logic.repository import UploadRepository
from server.apps.uploads.models import Upload

_FILES_FIELD: Final = 'files'
_TRUTHY: Final = frozenset(('1', 'true', 'yes'))

logger = logging.getLogger(__name__)


def serialize_upload(upload: Upload) -> dict[str, Any]:
    """Convert upload to JSON-ready dict.

    Args:
        upload: Upload instance.

    Returns:
        Dictionary with public upload fields.
    """
    return {
        'id': upload.id,
        'stored_name': upload.stored_name,
        'original_name': upload.original_name,
        'storage_path': upload.storage_path,
        'serving_url': upload.serving_url,
        'content_type': upload.content_type,
        'size_bytes': upload.size_bytes,
        'created_at': upload.created_at.isoformat(),
        'is_deleted': upload.is_deleted,
    }


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({'error': message}, status=status)


def _get_upload_or_404(upload_id: int) -> Upload:
    upload = UploadRepository().get_by_id(upload_id)
    if upload is None:
        raise Http404(f'Upload {upload_id} not found')
    return upload


@csrf_exempt
@require_http_methods(['GET', 'POST'])
def upload_collection(request: HttpRequest) -> HttpResponse:
    """List/search uploads (GET) or upload a batch of files (POST).

    GET parameters: ``deleted`` (list the trash when truthy) and ``q``
    (case-insensitive substring of the original name).
    """
    if request.method == 'POST':
        return _create_uploads(request)

    is_deleted = request.GET.get('deleted', '').lower() in _TRUTHY
    term = request.GET.get('q', '').strip()
    repository = UploadRepository()
    try:
        if term:
            uploads = repository.search(term, is_deleted=is_deleted)
        else:
            uploads = repository.list_active(is_deleted=is_deleted)
    except PersistenceError as error:
        return _error(str(error), status=500)

    return JsonResponse({
        'results': [serialize_upload(upload) for upload in uploads],
    })


def _create_uploads(request: HttpRequest) -> HttpResponse:
    payloads = [
        UploadPayload.from_uploaded_file(uploaded_file)
        for uploaded_file in request.FILES.getlist(_FILES_FIELD)
    ]
    try:
        uploads = upload_files(payloads)
    except (EmptyBatchError, ValidationError) as error:
        return _error(_message(error), status=400)
    except (StorageIOError, PersistenceError) as error:
        logger.exception('Upload batch failed')
        return _error(str(error), status=500)

    return JsonResponse(
        {'results': [serialize_upload(upload) for upload in uploads]},
        status=201,
    )


@csrf_exempt
@require_http_methods(['GET', 'DELETE'])
def upload_detail(request: HttpRequest, upload_id: int) -> HttpResponse:
    """Get upload metadata (GET) or delete it permanently (DELETE)."""
    upload = _get_upload_or_404(upload_id)
    if request.method == 'GET':
        return JsonResponse(serialize_upload(upload))

    try:
        get_ingestor().remove(upload)
    except (StorageIOError, PersistenceError) as error:
        return _error(str(error), status=500)
    return HttpResponse(status=204)


@csrf_exempt
@require_POST
def toggle_deleted(request: HttpRequest, upload_id: int) -> HttpResponse:
    """Move upload to trash or restore it."""
    upload = _get_upload_or_404(upload_id)
    try:
        upload = get_ingestor().toggle_soft_delete(upload)
    except PersistenceError as error:
        return _error(str(error), status=500)
    return JsonResponse(serialize_upload(upload))


@require_http_methods(['GET'])
def upload_by_name(request: HttpRequest, name: str) -> HttpResponse:
    """Get the newest upload with the given original name."""
    upload = UploadRepository().get_by_original_name(name)
    if upload is None:
        raise Http404(f'Upload {name!r} not found')
    return JsonResponse(serialize_upload(upload))


def _message(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return ' '.join(error.messages)
    return str(error)
