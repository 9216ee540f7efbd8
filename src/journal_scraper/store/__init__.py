"""Article store implementations."""

from .base import (
    ArticleStore,
    StoreDecodeError,
    StoreEncodeError,
    StoreError,
    StoreNotLoadedError,
)
from .disk_store import DiskArticleStore
from .factory import create_store
from .s3_store import S3ArticleStore

__all__ = [
    "ArticleStore",
    "DiskArticleStore",
    "S3ArticleStore",
    "StoreDecodeError",
    "StoreEncodeError",
    "StoreError",
    "StoreNotLoadedError",
    "create_store",
]
