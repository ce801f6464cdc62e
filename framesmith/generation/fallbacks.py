from __future__ import annotations

from typing import List

from framesmith.frames.models import CampaignFrame
from framesmith.generation.records import LoreRecord, TimelineEvent
from framesmith.prompts.builder import lore_type_for

LORE_TITLES = {
    "history": ("The Founding Era", "The Great War", "The Age of Discovery"),
    "legend": ("The Lost Artifact", "The Ancient Prophecy", "The Cursed Lands"),
    "faction": ("The Order of Guardians", "The Shadow Syndicate", "The Merchant Guild"),
}

LORE_CONTENT = {
    "history": (
        "Long ago, the realm was united under a single banner. The founding families "
        "established laws and traditions that would last for generations. However, internal "
        "conflicts and external threats eventually led to the fragmentation of the empire.",
        "Centuries of warfare ravaged the land, pitting kingdom against kingdom. Heroes rose "
        "and fell, their deeds becoming legend. The scars of these battles can still be seen "
        "across the landscape.",
        "When explorers first ventured beyond the known world, they discovered wonders and "
        "horrors in equal measure. Ancient ruins, strange creatures, and powerful artifacts "
        "changed the course of history.",
    ),
    "legend": (
        "Tales speak of a powerful artifact hidden deep within forgotten ruins. Many have "
        "sought it, but none have returned. Some say it grants immense power, while others "
        "claim it brings only doom.",
        "An ancient text foretells of a chosen one who will either save or doom the realm. "
        "The prophecy's words are cryptic, and scholars debate their meaning to this day.",
        "There are places in this world where the very land is cursed. Strange phenomena "
        "occur, the dead do not rest, and those who enter rarely return unchanged.",
    ),
    "faction": (
        "An ancient order dedicated to protecting the realm from supernatural threats. They "
        "operate in secrecy, recruiting only the most skilled warriors and scholars.",
        "Operating from the shadows, this organization pulls strings across the realm. Their "
        "true goals remain a mystery, but their influence is undeniable.",
        "Controlling trade routes and commerce, this guild wields economic power that rivals "
        "any kingdom. Their members include the wealthiest merchants and craftspeople.",
    ),
}

ENCOUNTER_DIFFICULTIES = ("easy", "medium")


def lore_from_template(frame: CampaignFrame, index: int) -> LoreRecord:
    lore_type = lore_type_for(index)
    tags = list(frame.themes[:3]) or ["campaign", "lore", lore_type]
    return LoreRecord(
        title=LORE_TITLES[lore_type][index % 3],
        category=lore_type,
        content=LORE_CONTENT[lore_type][index % 3],
        tags=tags,
    )


def encounter_difficulty_for(index: int) -> str:
    return ENCOUNTER_DIFFICULTIES[index % len(ENCOUNTER_DIFFICULTIES)]


def timeline_events(frame: CampaignFrame) -> List[TimelineEvent]:
    """Derive the starter timeline: ancient past, recent past and, when set, the inciting incident."""
    if frame.overview:
        recent = (
            "Events that set the stage for the current situation: "
            f"{frame.overview[:150]}..."
        )
    else:
        recent = "A significant event that changed the political and social landscape of the realm."

    events = [
        TimelineEvent(
            title="The Age of Legends",
            date="-1000 years",
            era="Ancient",
            description=(
                "The foundations of the world were laid. Ancient civilizations rose to power, "
                "wielding magic and technology long since lost."
            ),
        ),
        TimelineEvent(
            title="The Turning Point",
            date="-10 years",
            era="Recent",
            description=recent,
        ),
    ]
    if frame.inciting_incident:
        events.append(
            TimelineEvent(
                title="The Adventure Begins",
                date="Present",
                era="Present",
                description=frame.inciting_incident,
                importance="critical",
                category="campaign",
            )
        )
    return events
