from __future__ import annotations

import os
import tempfile
from pathlib import Path

from journal_scraper.collection import DEFAULT_LIMIT

from .base import ArticleStore

_FILE_MODE = 0o600


class DiskArticleStore(ArticleStore):
    """Article store backed by a JSON file on local disk."""

    def __init__(self, path: str | Path, limit: int = DEFAULT_LIMIT) -> None:
        super().__init__(limit=limit)
        self.path = Path(path)

    @property
    def address(self) -> str:
        return str(self.path)

    def _read_blob(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _write_blob(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, _FILE_MODE)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
