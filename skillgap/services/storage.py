from __future__ import annotations

import logging
import re
import time
from pathlib import Path


logger = logging.getLogger(__name__)

RESUME_PREFIX = "resumes"

_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_file_name(file_name: str) -> str:
    # Drop any directory part the client sent, then replace whitespace runs.
    base = Path((file_name or "").replace("\\", "/")).name
    return _WHITESPACE_RE.sub("_", base.strip())


class FileStorage:
    """Stores uploaded files below a root directory using bucket-style keys."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Storage key escapes storage root: {key}")
        return path

    def resume_key(self, user_id: int, file_name: str) -> str:
        timestamp = int(time.time() * 1000)
        return f"{RESUME_PREFIX}/{user_id}/{timestamp}-{sanitize_file_name(file_name)}"

    def save(self, key: str, data: bytes) -> str:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            raise FileExistsError(key)
        path.write_bytes(data)
        return key

    def read(self, key: str) -> bytes:
        return self._resolve(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()

    def remove(self, key: str) -> None:
        path = self._resolve(key)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("storage.remove_missing key=%s", key)
