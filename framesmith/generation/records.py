from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

RELATIONSHIPS = ("ally", "neutral", "enemy")
LOCATION_TYPES = ("city", "town", "village", "dungeon", "wilderness", "landmark", "other")
DIFFICULTIES = ("easy", "medium", "hard", "deadly")
MAP_TYPES = ("world", "regional", "local", "dungeon")

DEFAULT_RELATIONSHIP = "neutral"
DEFAULT_LOCATION_TYPE = "other"
DEFAULT_DIFFICULTY = "medium"
DEFAULT_MAP_TYPE = "world"


def coerce_choice(value: Any, allowed, default: str) -> str:
    """Lower-case ``value`` and return it if allowed, otherwise ``default``."""
    normalized = str(value or "").strip().lower()
    return normalized if normalized in allowed else default


@dataclass
class NPCRecord:
    name: str = "Unknown NPC"
    occupation: str = ""
    location: str = ""
    relationship: str = DEFAULT_RELATIONSHIP
    description: str = ""
    notes: str = ""
    first_met: str = ""
    avatar_url: str = ""

    def __post_init__(self) -> None:
        self.relationship = coerce_choice(self.relationship, RELATIONSHIPS, DEFAULT_RELATIONSHIP)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LocationRecord:
    name: str = "Unknown Location"
    type: str = DEFAULT_LOCATION_TYPE
    region: str = ""
    description: str = ""
    notable_features: str = ""
    secrets: str = ""
    inhabitants: str = ""
    map_url: str = ""

    def __post_init__(self) -> None:
        self.type = coerce_choice(self.type, LOCATION_TYPES, DEFAULT_LOCATION_TYPE)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EncounterRecord:
    name: str = "Unknown Encounter"
    difficulty: str = DEFAULT_DIFFICULTY
    party_level: int = 1
    environment: str = ""
    description: str = ""
    enemies: str = ""
    tactics: str = ""
    rewards: str = ""

    def __post_init__(self) -> None:
        self.difficulty = coerce_choice(self.difficulty, DIFFICULTIES, DEFAULT_DIFFICULTY)
        try:
            self.party_level = max(1, int(self.party_level))
        except (TypeError, ValueError, OverflowError):
            self.party_level = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LoreRecord:
    title: str = "Untitled Lore"
    category: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LocationPlacement:
    location: str
    position: str = ""
    description: Optional[str] = None


@dataclass
class MapRecord:
    type: str = DEFAULT_MAP_TYPE
    name: str = "Campaign Map"
    description: str = "A generated map"
    regions: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    location_placements: List[LocationPlacement] = field(default_factory=list)
    climate_zones: List[str] = field(default_factory=list)
    geographical_features: List[str] = field(default_factory=list)
    districts: List[str] = field(default_factory=list)
    landmarks: List[str] = field(default_factory=list)
    rooms: List[str] = field(default_factory=list)
    connections: List[str] = field(default_factory=list)
    grid_size: Optional[str] = None
    style: str = "hand-drawn fantasy"
    image_url: Optional[str] = None
    created_at: str = ""

    def __post_init__(self) -> None:
        self.type = coerce_choice(self.type, MAP_TYPES, DEFAULT_MAP_TYPE)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TimelineEvent:
    title: str
    date: str
    era: str
    description: str
    importance: str = "major"
    category: str = "historical"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
