"""Upload storage configuration.

Files go to a local or mounted filesystem under UPLOADS_ROOT and are
served publicly under UPLOADS_URL. Both are resolved once here; the
ingestion logic only ever sees the configured storage instance.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

# Storage base path on disk
UPLOADS_ROOT = config(
    'UPLOADS_ROOT',
    default=str(BASE_DIR.joinpath('media', 'uploads')),
)

# Public URL base the storage root is served under
UPLOADS_URL = config('UPLOADS_URL', default='/media/uploads/')

# Directory inside UPLOADS_ROOT that new uploads are written to
UPLOADS_DIRECTORY = config('UPLOADS_DIRECTORY', default='files').strip('/')

# Public URL of UPLOADS_DIRECTORY
UPLOADS_DIRECTORY_URL = '{base}/{directory}/'.format(
    base=UPLOADS_URL.rstrip('/'),
    directory=UPLOADS_DIRECTORY,
) if UPLOADS_DIRECTORY else UPLOADS_URL

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'uploads': {
        'BACKEND': 'server.apps.uploads.infrastructure.storage.UploadStorage',
        'OPTIONS': {
            'location': UPLOADS_ROOT,
            'base_url': UPLOADS_URL,
        },
    },
    'staticfiles': {
        # Keep static files separate from user files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
