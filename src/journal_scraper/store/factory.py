from __future__ import annotations

from journal_scraper.config import ConfigError, StorageSettings

from .base import ArticleStore
from .disk_store import DiskArticleStore
from .s3_store import S3ArticleStore


def create_store(settings: StorageSettings) -> ArticleStore:
    if settings.type == "disk":
        return DiskArticleStore(settings.path, limit=settings.limit)
    if settings.type == "s3":
        if not settings.bucket:
            raise ConfigError("storage.bucket is required for s3 storage")
        return S3ArticleStore(settings.bucket, settings.key, limit=settings.limit)
    raise ConfigError(f"Unsupported storage type: {settings.type}")
