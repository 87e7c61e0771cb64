from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Upload',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stored_name', models.CharField(help_text='Name on disk: original name plus optional _<n> suffix', max_length=255)),
                ('original_name', models.CharField(db_index=True, help_text='Submitted file name, URL-safe encoded', max_length=255)),
                ('storage_path', models.CharField(help_text='Path inside the uploads storage: {directory}/{stored_name}', max_length=1024)),
                ('serving_url', models.CharField(help_text='Public URL: {UPLOADS_DIRECTORY_URL}{stored_name}', max_length=1024)),
                ('content_type', models.CharField(help_text='MIME type declared by the uploader', max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('is_deleted', models.BooleanField(db_index=True, default=False)),
            ],
            options={
                'verbose_name': 'Upload',
                'verbose_name_plural': 'Uploads',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['is_deleted', '-created_at'], name='uploads_deleted_recent_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('storage_path',), name='uploads_storage_path_unique'),
                    models.CheckConstraint(condition=models.Q(('size_bytes__gte', 0)), name='uploads_size_bytes_non_negative'),
                ],
            },
        ),
    ]
