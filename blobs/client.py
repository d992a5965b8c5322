"""Blob storage clients: fetch raw archive bytes by key."""

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

import requests

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Abstract read-only view of a blob bucket."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Fetch the object stored under ``key``.

        Args:
            key: Object key, e.g. "d_load_fcst_archive.csv".

        Returns:
            The object's bytes, or None if no such object exists.
        """

    def get_text(self, key: str) -> str | None:
        """Fetch an object and decode it as UTF-8 (a leading BOM is dropped).

        Undecodable bytes become U+FFFD so one bad byte only spoils its own field.
        """
        data = self.get(key)
        if data is None:
            return None
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning("%s is not valid UTF-8 (%s); replacing undecodable bytes", key, e)
            return data.decode("utf-8-sig", errors="replace")


class LocalBlobStore(BlobStore):
    """Blob bucket backed by a local directory; keys are file names."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    def get(self, key: str) -> bytes | None:
        path = self._root / key
        # Keys must not escape the bucket directory.
        if self._root.resolve() not in path.resolve().parents:
            logger.warning("Rejected blob key outside bucket: %s", key)
            return None
        if not path.is_file():
            return None
        return path.read_bytes()


class HttpBlobStore(BlobStore):
    """Blob bucket served over HTTP, with exponential backoff on transport errors.

    Only connection-level failures are retried; a 404 is an answer, not a
    failure, and maps to None.
    """

    def __init__(
        self,
        base_url: str,
        max_retries: int = 3,
        base_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._timeout = timeout

    def get(self, key: str) -> bytes | None:
        url = f"{self._base_url}/{key}"

        for attempt in range(self._max_retries):
            try:
                resp = requests.get(url, timeout=self._timeout)
                if resp.status_code == 404:
                    return None
                resp.raise_for_status()
                return resp.content

            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt < self._max_retries - 1:
                    delay = self._base_delay * (2**attempt)
                    logger.warning(
                        "Fetching %s failed (attempt %d): %s. Retrying in %.1fs...",
                        key,
                        attempt + 1,
                        e,
                        delay,
                    )
                    time.sleep(delay)
                else:
                    raise


class InMemoryBlobStore(BlobStore):
    """Dict-backed bucket for tests and local experiments."""

    def __init__(self, objects: dict[str, bytes | str] | None = None):
        self._objects: dict[str, bytes] = {}
        for key, value in (objects or {}).items():
            self.put(key, value)

    def put(self, key: str, value: bytes | str) -> None:
        self._objects[key] = value.encode("utf-8") if isinstance(value, str) else value

    def get(self, key: str) -> bytes | None:
        return self._objects.get(key)
