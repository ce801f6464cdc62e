from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from framesmith import config
from framesmith.wizard.state import now_iso

logger = logging.getLogger(__name__)

DRAFT_STATUS = "draft"
COMPLETED_STATUS = "completed"


class FrameStoreError(Exception):
    pass


class Checkpoint(Protocol):
    def write(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        ...

    def read(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        ...

    def clear(self, campaign_id: str) -> None:
        ...


class DraftStore(Checkpoint, Protocol):
    def finalize(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        ...


def safe_mkdir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


class LocalCheckpointCache:
    """Debounced, device-local record of wizard position.

    Only step index and completed steps are stored here; the frame itself
    lives in the durable draft store.
    """

    def __init__(
        self,
        cache_root: Optional[Path] = None,
        *,
        debounce_seconds: float = config.CHECKPOINT_DEBOUNCE_SECONDS,
    ) -> None:
        self.cache_root = cache_root
        self.debounce_seconds = debounce_seconds
        self._lock = threading.Lock()
        self._timers: Dict[str, threading.Timer] = {}
        self._pending: Dict[str, Dict[str, Any]] = {}

    def _path(self, campaign_id: str) -> Path:
        return config.resolve_checkpoint_path(campaign_id, self.cache_root)

    def write(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        record = dict(payload)
        record["last_saved"] = time.time()
        if self.debounce_seconds <= 0:
            self._write_now(campaign_id, record)
            return
        with self._lock:
            previous = self._timers.pop(campaign_id, None)
            if previous is not None:
                previous.cancel()
            self._pending[campaign_id] = record
            timer = threading.Timer(self.debounce_seconds, self.flush, args=(campaign_id,))
            timer.daemon = True
            self._timers[campaign_id] = timer
            timer.start()

    def flush(self, campaign_id: Optional[str] = None) -> None:
        with self._lock:
            ids = [campaign_id] if campaign_id is not None else list(self._pending)
            records = {}
            for cid in ids:
                timer = self._timers.pop(cid, None)
                if timer is not None:
                    timer.cancel()
                if cid in self._pending:
                    records[cid] = self._pending.pop(cid)
        for cid, record in records.items():
            self._write_now(cid, record)

    def _write_now(self, campaign_id: str, record: Dict[str, Any]) -> None:
        path = self._path(campaign_id)
        safe_mkdir(path.parent)
        path.write_text(json.dumps(record, indent=2), encoding="utf-8")

    def read(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(campaign_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error("Failed to load wizard state from local cache %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            return None
        return data

    def clear(self, campaign_id: str) -> None:
        with self._lock:
            timer = self._timers.pop(campaign_id, None)
            if timer is not None:
                timer.cancel()
            self._pending.pop(campaign_id, None)
        path = self._path(campaign_id)
        if path.exists():
            path.unlink()


class JsonFrameStore:
    """Durable frame store: one JSON document per campaign, draft or completed."""

    def __init__(self, data_root: Optional[Path] = None) -> None:
        self.data_root = data_root

    def path_for(self, campaign_id: str) -> Path:
        return config.resolve_frame_path(campaign_id, self.data_root)

    def _load(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(campaign_id)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise FrameStoreError(f"Corrupt frame document at {path}: {exc}") from exc

    def _store(self, campaign_id: str, payload: Dict[str, Any]) -> Path:
        path = self.path_for(campaign_id)
        safe_mkdir(path.parent)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def write(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        existing = self._load(campaign_id)
        if existing and existing.get("status") == COMPLETED_STATUS:
            raise FrameStoreError(
                f"Campaign frame for '{campaign_id}' is already completed; drafts are closed."
            )
        document = dict(payload)
        document["status"] = DRAFT_STATUS
        document["updated_at"] = now_iso()
        self._store(campaign_id, document)

    def read(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        existing = self._load(campaign_id)
        if existing and existing.get("status") == DRAFT_STATUS:
            return existing
        return None

    def clear(self, campaign_id: str) -> None:
        if self.read(campaign_id) is not None:
            self.path_for(campaign_id).unlink()

    def finalize(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        document = dict(payload)
        document.pop("current_step", None)
        document.pop("completed_steps", None)
        document["status"] = COMPLETED_STATUS
        document["completed_at"] = now_iso()
        self._store(campaign_id, document)

    def load_completed(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        existing = self._load(campaign_id)
        if existing and existing.get("status") == COMPLETED_STATUS:
            return existing
        return None
