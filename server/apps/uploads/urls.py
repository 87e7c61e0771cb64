"""URL routes for uploads app."""

from django.urls import path

from server.apps.uploads import views

app_name = 'uploads'

urlpatterns = [
    path('', views.upload_collection, name='collection'),
    path('<int:upload_id>/', views.upload_detail, name='detail'),
    path(
        '<int:upload_id>/toggle-deleted/',
        views.toggle_deleted,
        name='toggle-deleted',
    ),
    path('by-name/<str:name>/', views.upload_by_name, name='by-name'),
]
