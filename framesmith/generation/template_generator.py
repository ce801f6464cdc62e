from __future__ import annotations

import random
from typing import List, Optional, Sequence

from framesmith.generation import tables
from framesmith.generation.records import (
    DIFFICULTIES,
    LOCATION_TYPES,
    RELATIONSHIPS,
    EncounterRecord,
    LocationRecord,
    NPCRecord,
)


class TemplateGenerator:
    """Offline generator that samples curated tables for the campaign's genre."""

    def __init__(self, game_system: str = "daggerheart", rng: Optional[random.Random] = None) -> None:
        self.game_system = game_system
        self.tables = tables.tables_for(game_system)
        self.rng = rng or random.Random()

    def _choice(self, values: Sequence[str]) -> str:
        if not values:
            raise ValueError("Cannot sample from an empty table")
        return self.rng.choice(values)

    def _choices(self, values: Sequence[str], count: int) -> List[str]:
        return self.rng.sample(list(values), min(count, len(values)))

    def random_npc(
        self,
        *,
        relationship: Optional[str] = None,
        occupation: Optional[str] = None,
        location: Optional[str] = None,
    ) -> NPCRecord:
        t = self.tables
        return NPCRecord(
            name=self._choice(t.names),
            occupation=occupation or self._choice(t.occupations),
            location=location or self._choice(t.locations),
            relationship=relationship or self._choice(RELATIONSHIPS),
            description=self._choice(t.npc_descriptions),
        )

    def location_name(self, location_type: str) -> str:
        suffixes = self.tables.location_suffixes.get(location_type) or self.tables.location_suffixes["other"]
        return f"{self._choice(self.tables.location_prefixes)} {self._choice(suffixes)}"

    def random_location(
        self, *, location_type: Optional[str] = None, region: Optional[str] = None
    ) -> LocationRecord:
        kind = location_type or self._choice(LOCATION_TYPES)
        return LocationRecord(
            name=self.location_name(kind),
            type=kind,
            region=region or self._choice(self.tables.regions),
        )

    def random_encounter(
        self, *, difficulty: Optional[str] = None, party_level: int = 1
    ) -> EncounterRecord:
        t = self.tables
        return EncounterRecord(
            name=f"{self._choice(tables.ENCOUNTER_KINDS)} at {self._choice(t.locations)}",
            difficulty=difficulty or self._choice(DIFFICULTIES),
            party_level=party_level or 1,
            description=f"The party encounters hostiles in {self._choice(t.encounter_environments).lower()}.",
            enemies=self._choice(t.encounter_enemy_types),
            environment=self._choice(t.encounter_environments),
            tactics=self._choice(t.encounter_tactics),
            rewards=self._choice(t.encounter_rewards),
        )

    def tone_and_feel(self, count: int = 6) -> List[str]:
        return self._choices(self.tables.tone_and_feel, count)

    def themes(self, count: int = 5) -> List[str]:
        return self._choices(self.tables.themes, count)

    def pitch(self) -> str:
        return self._choice(tables.PITCHES)

    def player_principles(self, count: int = 3) -> List[str]:
        return self._choices(tables.PLAYER_PRINCIPLES, count)

    def gm_principles(self, count: int = 3) -> List[str]:
        return self._choices(tables.GM_PRINCIPLES, count)

    def session_zero_questions(self, count: int = 7) -> List[str]:
        return self._choices(tables.SESSION_ZERO_QUESTIONS, count)

    def inciting_incident(self) -> str:
        return self._choice(tables.INCITING_INCIDENTS)
