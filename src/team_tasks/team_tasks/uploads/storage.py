from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.constants import MAX_UPLOAD_FILE_SIZE, MAX_UPLOAD_FILES
from ..core.exceptions import UploadError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES: dict[str, str] = {
    # Documents
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-powerpoint": ".ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
    "text/plain": ".txt",
    "text/csv": ".csv",
    # Images
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    # Archives
    "application/zip": ".zip",
    "application/x-rar-compressed": ".rar",
    "application/x-7z-compressed": ".7z",
    # Code
    "text/javascript": ".js",
    "text/html": ".html",
    "text/css": ".css",
    "application/json": ".json",
    "text/xml": ".xml",
    # Other
    "application/rtf": ".rtf",
    "application/vnd.oasis.opendocument.text": ".odt",
}

TASK_UPLOADS = "tasks"
DAILY_WORK_UPLOADS = "daily-work"


@dataclass(frozen=True)
class StoredFile:
    original_name: str
    path: str
    mime_type: str
    size: int


@dataclass(frozen=True)
class UploadPolicy:
    max_files: int = MAX_UPLOAD_FILES
    max_file_size: int = MAX_UPLOAD_FILE_SIZE
    allowed_types: frozenset[str] = frozenset(ALLOWED_MIME_TYPES)

    @property
    def max_request_size(self) -> int:
        # Room for form fields and multipart framing on top of the files.
        return self.max_files * self.max_file_size + 1024 * 1024


def _stream_size(f: FileStorage) -> int:
    stream = f.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return int(size)


class FileStore:
    """Validates uploaded files and persists them under a per-area directory.

    ``path`` on a StoredFile is relative to the store's public prefix
    (``uploads/<area>/<name>``) and is what the API serves back.
    """

    def __init__(self, root: str | Path, *, policy: UploadPolicy | None = None, public_prefix: str = "uploads"):
        self._root = Path(root)
        self._policy = policy or UploadPolicy()
        self._public_prefix = public_prefix.strip("/")

    @property
    def root(self) -> Path:
        return self._root

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    def validate(self, files: Sequence[FileStorage]) -> list[FileStorage]:
        files = [f for f in files if f is not None and f.filename]
        if len(files) > self._policy.max_files:
            raise UploadError(f"Too many files. Maximum {self._policy.max_files} files allowed.")

        for f in files:
            mime = (f.mimetype or "").lower()
            if mime not in self._policy.allowed_types:
                logger.warning("rejected upload %r with type %s", f.filename, mime)
                raise UploadError(f"File type {mime or 'unknown'} is not allowed")
            if _stream_size(f) > self._policy.max_file_size:
                limit_mb = self._policy.max_file_size // (1024 * 1024)
                raise UploadError(f"File too large. Maximum size is {limit_mb}MB.")
        return files

    def _unique_name(self, original: str, mime: str) -> str:
        safe = secure_filename(original) or "file"
        base, ext = os.path.splitext(safe)
        if not ext:
            ext = ALLOWED_MIME_TYPES.get(mime, "")
        suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
        return f"{base or 'file'}-{suffix}{ext}"

    def save(self, files: Sequence[FileStorage], *, area: str) -> list[StoredFile]:
        files = self.validate(files)
        target_dir = self._root / area
        target_dir.mkdir(parents=True, exist_ok=True)

        stored: list[StoredFile] = []
        try:
            for f in files:
                mime = (f.mimetype or "").lower()
                name = self._unique_name(f.filename or "", mime)
                f.save(str(target_dir / name))
                stored.append(
                    StoredFile(
                        original_name=f.filename or name,
                        path=f"{self._public_prefix}/{area}/{name}",
                        mime_type=mime,
                        size=(target_dir / name).stat().st_size,
                    )
                )
        except OSError:
            self.discard(stored)
            raise
        return stored

    def discard(self, stored: Iterable[StoredFile]) -> None:
        for s in stored:
            disk_path = self.resolve(s.path)
            try:
                disk_path.unlink()
            except FileNotFoundError:
                pass
            except OSError:
                logger.exception("could not remove upload %s", disk_path)

    def resolve(self, public_path: str) -> Path:
        rel = public_path.strip("/")
        if rel.startswith(self._public_prefix + "/"):
            rel = rel[len(self._public_prefix) + 1:]
        return self._root / rel
