from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Campaign:
    campaign_id: str
    name: str
    description: str = ""
    game_system: str = "daggerheart"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campaign_id": self.campaign_id,
            "name": self.name,
            "description": self.description,
            "game_system": self.game_system,
        }


@dataclass(frozen=True)
class FreeText:
    """Game-system specific section written as plain prose."""

    text: str

    def to_data(self) -> Any:
        return self.text


@dataclass(frozen=True)
class Structured:
    """Game-system specific section keyed by entry name (community, ancestry, class)."""

    entries: Dict[str, Any]

    def to_data(self) -> Any:
        return dict(self.entries)


SystemSection = Union[FreeText, Structured]


def section_from_data(value: Any) -> SystemSection:
    if isinstance(value, (FreeText, Structured)):
        return value
    if isinstance(value, str):
        return FreeText(value)
    if isinstance(value, dict):
        return Structured(dict(value))
    return Structured({})


def section_is_empty(section: SystemSection) -> bool:
    if isinstance(section, FreeText):
        return not section.text.strip()
    return not section.entries


@dataclass
class Distinction:
    name: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Distinction":
        return cls(name=str(data.get("name", "")), description=str(data.get("description", "")))


@dataclass
class CampaignMechanic:
    name: str
    description: str = ""
    rules: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "rules": self.rules}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CampaignMechanic":
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            rules=str(data.get("rules", "")),
        )


@dataclass
class Quest:
    name: str
    description: str = ""
    priority: str = "medium"
    objectives: List[str] = field(default_factory=list)
    rewards: str = ""
    hidden: bool = False
    quest_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
            "objectives": list(self.objectives),
            "rewards": self.rewards,
            "hidden": self.hidden,
        }
        if self.quest_id:
            data["quest_id"] = self.quest_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quest":
        objectives = []
        for item in _as_list(data.get("objectives")):
            # the wizard stores objectives either as bare strings or {id, text}
            if isinstance(item, dict):
                objectives.append(str(item.get("text", "")))
            else:
                objectives.append(str(item))
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            priority=str(data.get("priority") or "medium"),
            objectives=objectives,
            rewards=str(data.get("rewards", "")),
            hidden=bool(data.get("hidden", False)),
            quest_id=data.get("quest_id") or data.get("id"),
        )


@dataclass
class CharacterConnection:
    question: str
    answer: str = ""


@dataclass
class WorldFact:
    fact: str
    established_by: str = ""


@dataclass
class PlayerLocation:
    name: str
    description: str = ""
    mentioned_by: str = ""


@dataclass
class SessionZero:
    safety_lines: List[str] = field(default_factory=list)
    safety_veils: List[str] = field(default_factory=list)
    safety_tools: List[str] = field(default_factory=list)
    character_connections: List[CharacterConnection] = field(default_factory=list)
    world_facts: List[WorldFact] = field(default_factory=list)
    player_locations: List[PlayerLocation] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "safety_lines": list(self.safety_lines),
            "safety_veils": list(self.safety_veils),
            "safety_tools": list(self.safety_tools),
            "character_connections": [
                {"question": c.question, "answer": c.answer}
                for c in self.character_connections
            ],
            "world_facts": [
                {"fact": f.fact, "established_by": f.established_by} for f in self.world_facts
            ],
            "player_locations": [
                {"name": p.name, "description": p.description, "mentioned_by": p.mentioned_by}
                for p in self.player_locations
            ],
            "questions": list(self.questions),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionZero":
        if isinstance(data, SessionZero):
            return data
        if isinstance(data, list):
            # older drafts only stored the free-form question list
            return cls(questions=[str(q) for q in data])
        if not isinstance(data, dict):
            return cls()
        return cls(
            safety_lines=_string_list(data.get("safety_lines")),
            safety_veils=_string_list(data.get("safety_veils")),
            safety_tools=_string_list(data.get("safety_tools")),
            character_connections=[
                CharacterConnection(
                    question=str(c.get("question", "")), answer=str(c.get("answer", ""))
                )
                for c in data.get("character_connections") or []
                if isinstance(c, dict)
            ],
            world_facts=[
                WorldFact(fact=str(f.get("fact", "")), established_by=str(f.get("established_by", "")))
                for f in data.get("world_facts") or []
                if isinstance(f, dict)
            ],
            player_locations=[
                PlayerLocation(
                    name=str(p.get("name", "")),
                    description=str(p.get("description", "")),
                    mentioned_by=str(p.get("mentioned_by", "")),
                )
                for p in data.get("player_locations") or []
                if isinstance(p, dict)
            ],
            questions=_string_list(data.get("questions")),
        )


@dataclass
class CampaignFrame:
    pitch: str = ""
    tone_and_feel: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    touchstones: List[str] = field(default_factory=list)
    overview: str = ""
    communities: SystemSection = field(default_factory=lambda: Structured({}))
    ancestries: SystemSection = field(default_factory=lambda: Structured({}))
    classes: SystemSection = field(default_factory=lambda: Structured({}))
    player_principles: List[str] = field(default_factory=list)
    gm_principles: List[str] = field(default_factory=list)
    distinctions: List[Distinction] = field(default_factory=list)
    inciting_incident: str = ""
    starting_quests: List[Quest] = field(default_factory=list)
    campaign_mechanics: List[CampaignMechanic] = field(default_factory=list)
    session_zero: SessionZero = field(default_factory=SessionZero)

    def get(self, key: str) -> Any:
        if key not in FRAME_FIELDS:
            raise KeyError(f"Unknown campaign frame field: {key}")
        return getattr(self, key)

    def set(self, key: str, value: Any) -> None:
        if key not in FRAME_FIELDS:
            raise KeyError(f"Unknown campaign frame field: {key}")
        setattr(self, key, _coerce_field(key, value))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pitch": self.pitch,
            "tone_and_feel": list(self.tone_and_feel),
            "themes": list(self.themes),
            "touchstones": list(self.touchstones),
            "overview": self.overview,
            "communities": self.communities.to_data(),
            "ancestries": self.ancestries.to_data(),
            "classes": self.classes.to_data(),
            "player_principles": list(self.player_principles),
            "gm_principles": list(self.gm_principles),
            "distinctions": [d.to_dict() for d in self.distinctions],
            "inciting_incident": self.inciting_incident,
            "starting_quests": [q.to_dict() for q in self.starting_quests],
            "campaign_mechanics": [m.to_dict() for m in self.campaign_mechanics],
            "session_zero": self.session_zero.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CampaignFrame":
        frame = cls()
        for key in FRAME_FIELDS:
            if key in data and data[key] is not None:
                frame.set(key, data[key])
        if "session_zero" not in data and data.get("session_zero_questions"):
            frame.session_zero = SessionZero(
                questions=[str(q) for q in data["session_zero_questions"]]
            )
        return frame


FRAME_FIELDS = (
    "pitch",
    "tone_and_feel",
    "themes",
    "touchstones",
    "overview",
    "communities",
    "ancestries",
    "classes",
    "player_principles",
    "gm_principles",
    "distinctions",
    "inciting_incident",
    "starting_quests",
    "campaign_mechanics",
    "session_zero",
)

_TEXT_FIELDS = {"pitch", "overview", "inciting_incident"}
_LIST_FIELDS = {"tone_and_feel", "themes", "touchstones", "player_principles", "gm_principles"}
_SECTION_FIELDS = {"communities", "ancestries", "classes"}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    # a lone string or record counts as a one-item list
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [value]


def _string_list(value: Any) -> List[str]:
    return [str(x) for x in _as_list(value)]


def _records(value: Any, cls: Any) -> List[Any]:
    records = []
    for item in _as_list(value):
        if isinstance(item, cls):
            records.append(item)
        elif isinstance(item, dict):
            records.append(cls.from_dict(item))
        elif str(item).strip():
            records.append(cls(name=str(item).strip()))
    return records


def _coerce_field(key: str, value: Any) -> Any:
    if key in _TEXT_FIELDS:
        return "" if value is None else str(value)
    if key in _LIST_FIELDS:
        return _string_list(value)
    if key in _SECTION_FIELDS:
        return section_from_data(value)
    if key == "distinctions":
        return _records(value, Distinction)
    if key == "starting_quests":
        return _records(value, Quest)
    if key == "campaign_mechanics":
        return _records(value, CampaignMechanic)
    if key == "session_zero":
        return SessionZero.from_dict(value)
    return value
