from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional, Protocol

from framesmith import config
from framesmith.wizard.checkpoints import safe_mkdir


class BlobStore(Protocol):
    def upload(self, path: str, data: bytes) -> str:
        ...


class LocalBlobStore:
    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = root

    def upload(self, path: str, data: bytes) -> str:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Blob path must be relative: {path}")
        target = (self.root or config.resolve_blob_root()).joinpath(*relative.parts)
        safe_mkdir(target.parent)
        target.write_bytes(data)
        return target.resolve().as_uri()
