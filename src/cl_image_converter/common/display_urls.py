"""Transient display URLs for in-memory image bytes.

A URL handed out here pins its bytes until it is revoked. Whoever holds a
result is responsible for revoking its URLs once the result is discarded.
"""

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final

from loguru import logger

URL_PREFIX: Final[str] = "blob:cl-image-converter/"


class DisplayUrlRegistry:
    """In-process table of ``blob:`` style URLs and the bytes they point at."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[bytes, str]] = {}
        self._lock: threading.Lock = threading.Lock()

    def create(self, data: bytes, mime_type: str) -> str:
        url = f"{URL_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._entries[url] = (data, mime_type)
        logger.debug(f"Created display URL {url} ({len(data)} bytes, {mime_type})")
        return url

    def resolve(self, url: str) -> bytes:
        """Return the bytes behind ``url``.

        Raises:
            KeyError: If the URL was never created or has been revoked
        """
        with self._lock:
            entry = self._entries.get(url)
        if entry is None:
            raise KeyError(f"Unknown or revoked display URL: {url}")
        return entry[0]

    def mime_type(self, url: str) -> str:
        with self._lock:
            entry = self._entries.get(url)
        if entry is None:
            raise KeyError(f"Unknown or revoked display URL: {url}")
        return entry[1]

    def revoke(self, url: str) -> bool:
        """Release ``url``. Revoking twice is a no-op and returns False."""
        with self._lock:
            removed = self._entries.pop(url, None)
        if removed is not None:
            logger.debug(f"Revoked display URL {url}")
        return removed is not None

    def is_active(self, url: str) -> bool:
        with self._lock:
            return url in self._entries

    @property
    def active(self) -> int:
        with self._lock:
            return len(self._entries)

    @contextmanager
    def scoped(self, data: bytes, mime_type: str) -> Iterator[str]:
        url = self.create(data, mime_type)
        try:
            yield url
        finally:
            _ = self.revoke(url)


_default_registry: DisplayUrlRegistry | None = None


def get_registry() -> DisplayUrlRegistry:
    """Process-wide registry used when a caller does not bring its own."""
    global _default_registry
    if _default_registry is None:
        _default_registry = DisplayUrlRegistry()
    return _default_registry
