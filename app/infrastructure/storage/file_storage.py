"""
Local blob storage for files uploaded to questions.

Blobs are addressed by their generated name and always live directly
under base_dir.
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    name: str
    path: str
    size: int


def is_plain_name(name: str) -> bool:
    return bool(name) and name == os.path.basename(name) and name not in (".", "..")


class LocalFileStorage:
    """Stores uploads in a flat directory under generated, collision-free names."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _generate_name(self, original_name: str) -> str:
        _, ext = os.path.splitext(original_name or "")
        return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}{ext.lower()}"

    def path_for(self, name: str) -> str:
        if not is_plain_name(name):
            raise ValueError(f"Invalid stored file name: {name!r}")
        return os.path.join(self.base_dir, name)

    def save(self, original_name: str, data: bytes) -> StoredBlob:
        os.makedirs(self.base_dir, exist_ok=True)
        name = self._generate_name(original_name)
        path = self.path_for(name)
        with open(path, "wb") as f:
            f.write(data)
        logger.info(f"Stored upload '{original_name}' as {name} ({len(data)} bytes)")
        return StoredBlob(name=name, path=path, size=len(data))

    def exists(self, name: str) -> bool:
        return is_plain_name(name) and os.path.isfile(self.path_for(name))

    def read(self, name: str) -> bytes:
        with open(self.path_for(name), "rb") as f:
            return f.read()

    def delete(self, name: str) -> bool:
        """Remove a blob; a missing or invalid blob name is not an error."""
        if not is_plain_name(name):
            logger.warning(f"Refusing to delete blob with invalid name {name!r}")
            return False
        try:
            os.remove(self.path_for(name))
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete stored file {name}: {e}")
            return False

    def usage(self) -> Tuple[int, int]:
        """Return (file count, total bytes) of the storage directory."""
        if not os.path.isdir(self.base_dir):
            return 0, 0
        count = 0
        total = 0
        for entry in os.scandir(self.base_dir):
            count += 1
            if entry.is_file():
                total += entry.stat().st_size
        return count, total
