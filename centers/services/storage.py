import datetime
import os
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage


class ResultStorage:
    """Stores uploaded result files and hands back a retrievable URL."""

    def __init__(self, storage: Storage | None = None, prefix: str = 'results'):
        self.storage = storage or default_storage
        self.prefix = prefix

    def _path_for(self, filename: str) -> str:
        ext = os.path.splitext(filename)[1].lower()
        return f"{self.prefix}/{datetime.date.today().strftime('%Y/%m')}/{uuid.uuid4().hex}{ext}"

    def store(self, content: bytes, filename: str) -> str:
        name = self.storage.save(self._path_for(filename), ContentFile(content))
        return self.storage.url(name)
