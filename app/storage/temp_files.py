from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedDocument:
    handle: str
    path: Path
    size: int
    media_type: str | None = None
    filename: str | None = None


class TempFileStore:
    """Holds uploaded payloads on disk for the lifetime of one request."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def acquire(
        self,
        content: bytes,
        *,
        media_type: str | None = None,
        filename: str | None = None,
    ) -> UploadedDocument:
        self._root.mkdir(parents=True, exist_ok=True)
        handle = uuid.uuid4().hex
        path = self._root / handle
        try:
            path.write_bytes(content)
        except OSError:
            path.unlink(missing_ok=True)
            raise
        return UploadedDocument(
            handle=handle,
            path=path,
            size=len(content),
            media_type=media_type,
            filename=filename,
        )

    def release(self, document: UploadedDocument) -> None:
        try:
            document.path.unlink()
        except OSError as exc:
            logger.warning("upload_cleanup_failed handle=%s: %s", document.handle, exc)

    @contextmanager
    def held(
        self,
        content: bytes,
        *,
        media_type: str | None = None,
        filename: str | None = None,
    ) -> Iterator[UploadedDocument]:
        document = self.acquire(content, media_type=media_type, filename=filename)
        try:
            yield document
        finally:
            self.release(document)
