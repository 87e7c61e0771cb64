"""
Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.

It is also a good practice to keep a single URL to the root index page.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Apps:
    path('api/uploads/', include('server.apps.uploads.urls')),

    # django-admin:
    path('admin/', admin.site.urls),
]

# Stored uploads are served by the web server in production
urlpatterns += static(settings.UPLOADS_URL, document_root=settings.UPLOADS_ROOT)
