from framesmith.storage.blobs import BlobStore, LocalBlobStore
from framesmith.storage.entities import EntityStore, EntityStoreError, JsonEntityStore

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "EntityStore",
    "EntityStoreError",
    "JsonEntityStore",
]
