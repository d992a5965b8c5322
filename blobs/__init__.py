"""Blob storage access: archive CSV files are fetched by key."""

from blobs.client import BlobStore, HttpBlobStore, InMemoryBlobStore, LocalBlobStore


def create_blob_store(url: str) -> BlobStore:
    """Create a BlobStore from a location URL.

    Supported forms:
    - http://host/bucket  or  https://host/bucket
    - file:///path/to/dir  or a plain directory path
    """
    if url.startswith(("http://", "https://")):
        return HttpBlobStore(url)
    if url.startswith("file://"):
        return LocalBlobStore(url[len("file://") :])
    return LocalBlobStore(url)


__all__ = [
    "BlobStore",
    "HttpBlobStore",
    "InMemoryBlobStore",
    "LocalBlobStore",
    "create_blob_store",
]
