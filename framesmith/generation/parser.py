from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from framesmith.generation.records import (
    EncounterRecord,
    LocationPlacement,
    LocationRecord,
    LoreRecord,
    MapRecord,
    NPCRecord,
)

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*\n([\s\S]*?)\n```")
_FENCED_TEXT = re.compile(r"```(?:text)?\s*\n([\s\S]*?)\n```")

# tried in order; the first one that yields a JSON object wins
MAP_DOCUMENT_PATTERNS = (
    re.compile(r"```json\s*\n([\s\S]*?)\n```"),
    re.compile(r"```json\s*([\s\S]*?)```"),
    re.compile(r"```\s*\n([\s\S]*?)\n```"),
    re.compile(r"```([\s\S]*?)```"),
    re.compile(r"(\{[\s\S]*\"description\"[\s\S]*\})"),
    re.compile(r"(\{[\s\S]*\})"),
)

NPC_FIELDS = {
    "name": ("name", "npc name"),
    "occupation": ("occupation", "job", "role"),
    "location": ("location", "residence", "found at"),
    "relationship": ("relationship", "allegiance", "disposition"),
    "description": ("description", "appearance", "personality"),
    "notes": ("notes", "details", "background"),
    "first_met": ("first met", "meeting", "encounter", "how to meet"),
}

LOCATION_FIELDS = {
    "name": ("name", "location name"),
    "type": ("type", "location type"),
    "region": ("region", "area", "territory"),
    "description": ("description", "overview"),
    "notable_features": ("notable features", "features", "landmarks"),
    "secrets": ("secrets", "hidden", "mysteries"),
    "inhabitants": ("inhabitants", "population", "residents"),
}

ENCOUNTER_FIELDS = {
    "name": ("name", "encounter name", "title"),
    "difficulty": ("difficulty", "challenge"),
    "environment": ("environment", "location", "setting"),
    "description": ("description", "scene", "setup"),
    "enemies": ("enemies", "adversaries", "foes", "opponents"),
    "tactics": ("tactics", "strategy", "behavior"),
    "rewards": ("rewards", "loot", "treasure"),
}

LORE_FIELDS = {
    "title": ("title", "name"),
    "category": ("category", "type"),
    "content": ("content", "description", "text"),
    "tags": ("tags", "keywords"),
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_text(v) for v in value if v is not None)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value).strip()


def _string_list(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [_text(v) for v in value if _text(v)]
    return [_text(value)]


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] not in (None, ""):
            return data[key]
    return None


def _load_document(text: str) -> Optional[Any]:
    match = _FENCED_JSON.search(text)
    candidate = match.group(1) if match else text
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None


def extract_field(text: str, names: Iterable[str]) -> str:
    for name in names:
        pattern = re.compile(rf"{re.escape(name)}:\s*(.+?)(?:\n|$)", re.IGNORECASE)
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return ""


def _extract_all(text: str, table: Dict[str, Iterable[str]]) -> Dict[str, str]:
    return {key: extract_field(text, names) for key, names in table.items()}


# record builders ------------------------------------------------------------


def npc_from_dict(data: Dict[str, Any]) -> NPCRecord:
    return NPCRecord(
        name=_text(_pick(data, "name")) or "Unknown NPC",
        occupation=_text(_pick(data, "occupation")),
        location=_text(_pick(data, "location")),
        relationship=_text(_pick(data, "relationship")),
        description=_text(_pick(data, "description")),
        notes=_text(_pick(data, "notes")),
        first_met=_text(_pick(data, "firstMet", "first_met")),
    )


def location_from_dict(data: Dict[str, Any]) -> LocationRecord:
    return LocationRecord(
        name=_text(_pick(data, "name")) or "Unknown Location",
        type=_text(_pick(data, "type")),
        region=_text(_pick(data, "region")),
        description=_text(_pick(data, "description")),
        notable_features=_text(_pick(data, "notableFeatures", "notable_features")),
        secrets=_text(_pick(data, "secrets")),
        inhabitants=_text(_pick(data, "inhabitants")),
    )


def encounter_from_dict(data: Dict[str, Any]) -> EncounterRecord:
    return EncounterRecord(
        name=_text(_pick(data, "name")) or "Unknown Encounter",
        difficulty=_text(_pick(data, "difficulty")),
        party_level=_pick(data, "partyLevel", "party_level") or 1,
        environment=_text(_pick(data, "environment")),
        description=_text(_pick(data, "description")),
        enemies=_text(_pick(data, "enemies")),
        tactics=_text(_pick(data, "tactics")),
        rewards=_text(_pick(data, "rewards")),
    )


def lore_from_dict(data: Dict[str, Any]) -> LoreRecord:
    return LoreRecord(
        title=_text(_pick(data, "title", "name")) or "Untitled Lore",
        category=_text(_pick(data, "category", "type")),
        content=_text(_pick(data, "content", "description")),
        tags=_string_list(_pick(data, "tags")),
    )


def _placements(value: Any) -> List[LocationPlacement]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    placements = []
    for item in value:
        if isinstance(item, dict):
            name = _text(item.get("location") or item.get("name"))
            if not name:
                continue
            description = item.get("description")
            placements.append(
                LocationPlacement(
                    location=name,
                    position=_text(item.get("position")),
                    description=_text(description) if description else None,
                )
            )
        elif isinstance(item, str) and item.strip():
            placements.append(LocationPlacement(location=item.strip()))
    return placements


def map_from_dict(data: Dict[str, Any], **overrides: Any) -> MapRecord:
    grid_size = _pick(data, "gridSize", "grid_size")
    values = dict(
        type=_text(_pick(data, "type")),
        name=_text(_pick(data, "name")) or "Campaign Map",
        description=_text(_pick(data, "description")) or "A generated map",
        regions=_string_list(_pick(data, "regions")),
        features=_string_list(_pick(data, "features")),
        location_placements=_placements(_pick(data, "locationPlacements", "location_placements")),
        climate_zones=_string_list(_pick(data, "climateZones", "climate_zones")),
        geographical_features=_string_list(
            _pick(data, "geographicalFeatures", "geographical_features")
        ),
        districts=_string_list(_pick(data, "districts")),
        landmarks=_string_list(_pick(data, "landmarks")),
        rooms=_string_list(_pick(data, "rooms")),
        connections=_string_list(_pick(data, "connections")),
        grid_size=_text(grid_size) if grid_size else None,
        style=_text(_pick(data, "style")) or "hand-drawn fantasy",
    )
    values.update(overrides)
    return MapRecord(**values)


_BUILDERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "npc": npc_from_dict,
    "location": location_from_dict,
    "encounter": encounter_from_dict,
    "lore": lore_from_dict,
    "map": map_from_dict,
}

_FIELD_TABLES = {
    "npc": NPC_FIELDS,
    "location": LOCATION_FIELDS,
    "encounter": ENCOUNTER_FIELDS,
    "lore": LORE_FIELDS,
}


def _parse_record(category: str, text: str):
    build = _BUILDERS[category]
    document = _load_document(text)
    if isinstance(document, dict):
        return build(document)
    logger.debug("No JSON document in %s response, falling back to field extraction", category)
    table = _FIELD_TABLES.get(category)
    if table is None:
        return build({})
    return build(_extract_all(text, table))


def extract_map_document(text: str) -> Optional[Dict[str, Any]]:
    """Return the first JSON object found in a map description response."""
    for pattern in MAP_DOCUMENT_PATTERNS:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        try:
            parsed = json.loads(match.group(1).strip())
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(parsed, dict):
            return parsed
    try:
        parsed = json.loads(text.strip())
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_array(text: str) -> List[str]:
    document = _load_document(text)
    if isinstance(document, list):
        return [_text(item) for item in document if _text(item)]
    items = []
    for part in re.split(r"[,\n]", text):
        item = part.strip()
        if not item or re.fullmatch(r"[\[\]{}\"`]", item) or item.startswith("```"):
            continue
        item = re.sub(r"^(?:[-*]|\d+\.)\s+", "", item)
        item = re.sub(r"^[\"']|[\"']$", "", item).strip()
        if item:
            items.append(item)
    return items


def parse_text(text: str) -> str:
    match = _FENCED_TEXT.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


ParsedRecord = Union[NPCRecord, LocationRecord, EncounterRecord, LoreRecord, MapRecord]


def parse(category: str, text: Optional[str]) -> Union[ParsedRecord, List[str], str]:
    """Turn raw model output into a normalized record.

    Tries a fenced ```json block, then the whole response as JSON, then
    line-oriented ``Field: value`` extraction. Enum fields are re-validated
    on every path and unmatched fields take their defaults, so this never
    raises on malformed output.
    """
    text = text or ""
    if category == "array":
        return parse_array(text)
    if category in _BUILDERS:
        if category == "map":
            return map_from_dict(extract_map_document(text) or {})
        return _parse_record(category, text)
    return parse_text(text)
