# dogbook/services/storage_service.py
import uuid
import logging
from typing import Dict
from flask import Flask
from firebase_admin import storage
from werkzeug.datastructures import FileStorage

from dogbook.core.exceptions import ValidationError

_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
}


class StorageService:
    """
    Firebase Storage access for dog avatars.

    An upload returns the public URL together with the blob path; the path is
    the handle later passed to ``delete_file``.
    """

    def __init__(self):
        # The bucket is attached in init_app.
        self.bucket = None
        self.max_bytes = 2 * 1024 * 1024
        self.content_types = tuple(_EXTENSIONS)

    def init_app(self, app: Flask, bucket=None):
        """
        Called once from create_app. A bucket object may be passed in directly;
        otherwise the configured Firebase bucket is opened.
        """
        if bucket is None:
            bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
            if not bucket_name:
                raise ValueError("FIREBASE_STORAGE_BUCKET must be set in .env or the config.")
            bucket = storage.bucket(bucket_name)

        self.bucket = bucket
        self.max_bytes = app.config.get('AVATAR_MAX_BYTES', self.max_bytes)
        self.content_types = tuple(app.config.get('AVATAR_CONTENT_TYPES', self.content_types))
        logging.info("StorageService: Firebase Storage initialized.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService is not initialized. Call init_app first.")

    def upload_avatar(self, owner_id: str, file: FileStorage) -> Dict[str, str]:
        """
        Validates and uploads an avatar image, then makes it public.

        :param owner_id: id of the user the dog belongs to
        :param file: the multipart file part
        :return: {"url": public URL, "file_path": blob path}
        """
        self._require_bucket()

        content_type = (file.mimetype or '').lower()
        if content_type not in self.content_types:
            accepted = ", ".join(sorted({_EXTENSIONS.get(t, t) for t in self.content_types}))
            raise ValidationError(f"Invalid file format. Accepted formats: {accepted}", error_code="INVALID_AVATAR")

        data = file.read()
        if not data:
            raise ValidationError("Uploaded avatar is empty.", error_code="INVALID_AVATAR")
        if len(data) > self.max_bytes:
            size_mb = self.max_bytes / (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size: {size_mb:.1f}MB", error_code="INVALID_AVATAR")

        file_path = f"dog_avatars/{owner_id}/{uuid.uuid4()}.{_EXTENSIONS.get(content_type, 'img')}"
        blob = self.bucket.blob(file_path)
        blob.upload_from_string(data, content_type=content_type)
        try:
            blob.make_public()
        except Exception as e:
            logging.error(f"Failed to make avatar public ({file_path}): {e}", exc_info=True)
            blob.delete()
            raise

        logging.info(f"Avatar uploaded for owner {owner_id}: {file_path}")
        return {"url": blob.public_url, "file_path": file_path}

    def delete_file(self, file_path: str) -> bool:
        """Deletes a blob. Returns False if it was already gone."""
        self._require_bucket()
        blob = self.bucket.blob(file_path)
        if not blob.exists():
            logging.warning(f"Storage delete skipped, file not found: {file_path}")
            return False
        blob.delete()
        logging.info(f"Storage file deleted: {file_path}")
        return True
