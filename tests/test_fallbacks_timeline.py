from __future__ import annotations

from framesmith.frames.models import CampaignFrame
from framesmith.generation.fallbacks import (
    encounter_difficulty_for,
    lore_from_template,
    timeline_events,
)


def test_timeline_has_two_events_without_inciting_incident() -> None:
    events = timeline_events(CampaignFrame(inciting_incident=""))

    assert [e.title for e in events] == ["The Age of Legends", "The Turning Point"]
    assert events[1].description.startswith("A significant event")


def test_whitespace_inciting_incident_still_counts_as_present() -> None:
    events = timeline_events(CampaignFrame(inciting_incident="   "))

    assert len(events) == 3
    assert events[2].title == "The Adventure Begins"


def test_timeline_adds_present_event_for_inciting_incident() -> None:
    frame = CampaignFrame(overview="x" * 400, inciting_incident="The beacon goes dark.")

    events = timeline_events(frame)

    assert len(events) == 3
    assert events[1].description.endswith("x" * 150 + "...")
    present = events[2]
    assert present.title == "The Adventure Begins"
    assert present.description == "The beacon goes dark."
    assert present.importance == "critical"
    assert present.category == "campaign"


def test_lore_fallback_cycles_types_and_uses_themes_as_tags() -> None:
    frame = CampaignFrame(themes=["Survival", "Sacrifice", "Family", "Hope"])

    lore = [lore_from_template(frame, i) for i in range(3)]

    assert [entry.category for entry in lore] == ["history", "legend", "faction"]
    assert lore[0].title == "The Founding Era"
    assert lore[1].title == "The Ancient Prophecy"
    assert lore[2].title == "The Merchant Guild"
    assert all(entry.tags == ["Survival", "Sacrifice", "Family"] for entry in lore)


def test_lore_fallback_tags_without_themes() -> None:
    entry = lore_from_template(CampaignFrame(), 1)

    assert entry.tags == ["campaign", "lore", "legend"]


def test_encounter_fallback_difficulty_alternates() -> None:
    assert [encounter_difficulty_for(i) for i in range(3)] == ["easy", "medium", "easy"]
