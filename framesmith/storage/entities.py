from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from framesmith import config
from framesmith.wizard.checkpoints import safe_mkdir
from framesmith.wizard.state import now_iso

ENTITY_KINDS = ("npcs", "locations", "lore", "encounters", "timeline_events", "quests", "maps")


class EntityStoreError(Exception):
    pass


class EntityStore(Protocol):
    def create(self, kind: str, record: Dict[str, Any]) -> str:
        ...


class JsonEntityStore:
    """Campaign-scoped entity store: one JSON file per created record."""

    def __init__(self, campaign_id: str, data_root: Optional[Path] = None) -> None:
        self.campaign_id = campaign_id
        self.data_root = data_root

    def _dir(self, kind: str) -> Path:
        if kind not in ENTITY_KINDS:
            raise EntityStoreError(f"Unknown entity kind: {kind}")
        return config.resolve_entity_dir(self.campaign_id, kind, self.data_root)

    def create(self, kind: str, record: Dict[str, Any]) -> str:
        directory = self._dir(kind)
        safe_mkdir(directory)
        entity_id = uuid.uuid4().hex
        document = dict(record)
        document["id"] = entity_id
        document["campaign_id"] = self.campaign_id
        document["created_at"] = now_iso()
        # creation order is kept in the file name so list() returns records in insertion order
        index = len(list(directory.glob("*.json")))
        path = directory / f"{index:04d}-{entity_id}.json"
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        return entity_id

    def list(self, kind: str) -> List[Dict[str, Any]]:
        directory = self._dir(kind)
        if not directory.exists():
            return []
        return [
            json.loads(path.read_text(encoding="utf-8"))
            for path in sorted(directory.glob("*.json"))
        ]
