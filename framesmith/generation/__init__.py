from framesmith.generation.parser import parse, parse_array, parse_text
from framesmith.generation.records import (
    EncounterRecord,
    LocationRecord,
    LoreRecord,
    MapRecord,
    NPCRecord,
    TimelineEvent,
)
from framesmith.generation.template_generator import TemplateGenerator

__all__ = [
    "parse",
    "parse_array",
    "parse_text",
    "EncounterRecord",
    "LocationRecord",
    "LoreRecord",
    "MapRecord",
    "NPCRecord",
    "TimelineEvent",
    "TemplateGenerator",
]
