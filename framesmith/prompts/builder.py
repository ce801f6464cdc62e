from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from framesmith.frames.models import Campaign, CampaignFrame

NPC_SCHEMA = {
    "name": "string",
    "occupation": "string",
    "location": "string",
    "relationship": "ally | neutral | enemy",
    "description": "2-3 sentences about appearance and personality",
    "notes": "Important details, connections, or secrets",
    "firstMet": "Suggestion for how/when the party might meet them",
}

LOCATION_SCHEMA = {
    "name": "string",
    "type": "city | town | village | dungeon | wilderness | landmark | other",
    "region": "string",
    "description": "2-3 sentences describing the location",
    "notableFeatures": "Key landmarks or characteristics",
    "secrets": "Hidden elements or mysteries (GM-only information)",
    "inhabitants": "Who lives or frequents here",
}

ENCOUNTER_SCHEMA = {
    "name": "string",
    "difficulty": "easy | medium | hard | deadly",
    "environment": "string describing the encounter location",
    "description": "2-3 sentences setting the scene",
    "enemies": "List of enemies and approximate numbers",
    "tactics": "How the enemies fight and their strategy",
    "rewards": "Potential loot, experience, or other rewards",
}

LORE_TYPES = ("history", "legend", "faction")

_LIST_LIMIT = 10


@dataclass
class GenerationContext:
    campaign: Campaign
    frame: Optional[CampaignFrame] = None
    existing_npcs: List[Dict[str, Any]] = field(default_factory=list)
    existing_locations: List[Dict[str, Any]] = field(default_factory=list)
    existing_lore: List[Dict[str, Any]] = field(default_factory=list)
    requirements: Dict[str, Any] = field(default_factory=dict)
    party_level: int = 1
    party_size: int = 4


def _json_block(payload: Dict[str, Any]) -> str:
    return "```json\n" + json.dumps(payload, indent=2, ensure_ascii=False) + "\n```"


def _campaign_header(context: GenerationContext, *, include_description: bool = True) -> List[str]:
    campaign = context.campaign
    lines = ["CAMPAIGN CONTEXT:", f"Campaign Name: {campaign.name or 'Untitled Campaign'}"]
    if include_description and campaign.description:
        lines.append(f"Campaign Description: {campaign.description}")
    return lines


def _requirement(requirements: Dict[str, Any], key: str, label: str, fallback: str) -> str:
    value = requirements.get(key)
    if value:
        return f"{label}: {value}"
    return f"{label}: {fallback}"


def _existing_block(title: str, items: List[Dict[str, Any]], describe) -> List[str]:
    lines = [title]
    for item in items[:_LIST_LIMIT]:
        lines.append(f"- {describe(item)}")
    if len(items) > _LIST_LIMIT:
        lines.append(f"... and {len(items) - _LIST_LIMIT} more")
    return lines


def build_npc_prompt(context: GenerationContext) -> str:
    frame = context.frame
    requirements = context.requirements
    lines = [f"You are helping create an NPC for a {context.campaign.game_system} TTRPG campaign.", ""]
    lines += _campaign_header(context)
    if frame:
        if frame.pitch:
            lines.append(f"Campaign Pitch: {frame.pitch}")
        if frame.tone_and_feel:
            lines.append(f"Tone & Feel: {', '.join(frame.tone_and_feel)}")
        if frame.themes:
            lines.append(f"Themes: {', '.join(frame.themes)}")

    lines += ["", "REQUIREMENTS:"]
    lines.append(_requirement(requirements, "name", "Name", "Generate a fitting name"))
    lines.append(_requirement(requirements, "occupation", "Occupation", "Suggest an appropriate occupation"))
    lines.append(
        _requirement(
            requirements, "relationship", "Relationship", "Suggest a relationship (ally, neutral, or enemy)"
        )
    )
    lines.append(_requirement(requirements, "location", "Location", "Suggest a location"))

    lines.append("")
    if context.existing_npcs:
        lines += _existing_block(
            "EXISTING NPCs IN CAMPAIGN:",
            context.existing_npcs,
            lambda npc: f"{npc.get('name')} ({npc.get('occupation') or 'Unknown'} - "
            f"{npc.get('relationship') or 'Unknown'})",
        )
    else:
        lines.append("This is the first NPC for this campaign.")

    lines += [
        "",
        "Please generate an NPC with the following JSON structure:",
        _json_block(NPC_SCHEMA),
        "",
        "Ensure the NPC fits the campaign's tone and themes. "
        "Be creative but consistent with existing world elements.",
    ]
    return "\n".join(lines)


def build_location_prompt(context: GenerationContext) -> str:
    frame = context.frame
    requirements = context.requirements
    lines = [f"You are helping create a location for a {context.campaign.game_system} TTRPG campaign.", ""]
    lines += _campaign_header(context)
    if frame:
        if frame.pitch:
            lines.append(f"Campaign Pitch: {frame.pitch}")
        if frame.tone_and_feel:
            lines.append(f"Tone & Feel: {', '.join(frame.tone_and_feel)}")
        if frame.distinctions:
            lines.append(f"Setting Elements: {', '.join(d.name for d in frame.distinctions)}")

    lines += ["", "REQUIREMENTS:"]
    lines.append(_requirement(requirements, "name", "Name", "Generate a fitting name"))
    lines.append(
        _requirement(
            requirements,
            "type",
            "Type",
            "Suggest a type (city, town, village, dungeon, wilderness, landmark, or other)",
        )
    )
    lines.append(_requirement(requirements, "region", "Region", "Suggest a region"))

    lines.append("")
    if context.existing_locations:
        lines += _existing_block(
            "EXISTING LOCATIONS:",
            context.existing_locations,
            lambda loc: f"{loc.get('name')} ({loc.get('type') or 'Unknown'} in "
            f"{loc.get('region') or 'Unknown'})",
        )
    else:
        lines.append("This is the first location for this campaign.")

    lines += [
        "",
        "Please generate a location with this JSON structure:",
        _json_block(LOCATION_SCHEMA),
        "",
        "Make sure the location fits the campaign's tone and is geographically "
        "consistent with existing locations.",
    ]
    return "\n".join(lines)


def build_encounter_prompt(context: GenerationContext) -> str:
    frame = context.frame
    requirements = context.requirements
    lines = [f"You are creating a combat encounter for a {context.campaign.game_system} TTRPG campaign.", ""]
    lines += _campaign_header(context, include_description=False)
    if frame:
        if frame.pitch:
            lines.append(f"Campaign Pitch: {frame.pitch}")
        if frame.themes:
            lines.append(f"Themes: {', '.join(frame.themes)}")

    lines += [
        "",
        "PARTY INFO:",
        f"Party Level: {context.party_level}",
        f"Party Size: {context.party_size} characters",
        "",
        "REQUIREMENTS:",
        _requirement(
            requirements,
            "difficulty",
            "Difficulty",
            "Suggest appropriate difficulty (easy, medium, hard, or deadly)",
        ),
        _requirement(requirements, "environment", "Environment", "Suggest an environment"),
        _requirement(requirements, "enemy_types", "Enemy Types", "Suggest appropriate enemies"),
        "",
        "Please generate an encounter with this JSON structure:",
        _json_block(ENCOUNTER_SCHEMA),
        "",
        "Balance the encounter for the party level and size. "
        "Make it thematically appropriate to the campaign.",
    ]
    return "\n".join(lines)


def lore_type_for(index: int) -> str:
    return LORE_TYPES[index % len(LORE_TYPES)]


def build_lore_prompt(context: GenerationContext, index: int = 0) -> str:
    lore_type = lore_type_for(index)
    frame = context.frame or CampaignFrame()

    lines = [
        f'Create a {lore_type} entry for the campaign "{context.campaign.name or "Untitled Campaign"}".',
        "",
        "CAMPAIGN CONTEXT:",
    ]
    if frame.pitch:
        lines.append(f"Pitch: {frame.pitch}")
    if frame.overview:
        lines.append(f"Overview: {frame.overview}")
    if frame.themes:
        lines.append(f"Themes: {', '.join(frame.themes)}")

    facts = [f.fact for f in frame.session_zero.world_facts if f.fact]
    if facts:
        lines += ["", "PLAYER-ESTABLISHED WORLD FACTS:"] + [f"- {fact}" for fact in facts]

    places = [p for p in frame.session_zero.player_locations if p.name]
    if places:
        lines += ["", "PLAYER-MENTIONED LOCATIONS:"]
        for place in places:
            suffix = f": {place.description}" if place.description else ""
            lines.append(f"- {place.name}{suffix}")

    quests = [q for q in frame.starting_quests if q.name]
    if quests:
        lines += ["", "STARTING QUESTS:"]
        for quest in quests:
            suffix = f": {quest.description}" if quest.description else ""
            lines.append(f"- {quest.name}{suffix}")

    if context.existing_lore:
        lines += _existing_block(
            "\nEXISTING LORE:", context.existing_lore, lambda lore: str(lore.get("title"))
        )

    lines += [
        "",
        "Generate a lore entry with this JSON structure:",
        _json_block(
            {
                "title": "string",
                "category": lore_type,
                "content": "2-3 paragraphs of detailed lore",
                "tags": ["tag1", "tag2", "tag3"],
            }
        ),
        "",
        "Make it thematically consistent with the campaign. "
        "Incorporate player-established facts and locations where appropriate.",
    ]
    return "\n".join(lines)


# campaign frame fields ------------------------------------------------------

_ARRAY_SUFFIX = 'Respond with a JSON array:\n```json\n["item1", "item2", ...]\n```'


def _frame_line(label: str, value: Any, limit: Optional[int] = None) -> str:
    if not value:
        return ""
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    text = str(value)
    if limit is not None and len(text) > limit:
        text = text[:limit] + "..."
    return f"{label}: {text}"


def _join(*parts: str) -> str:
    return "\n".join(p for p in parts if p is not None)


def build_frame_field_prompt(
    step: str,
    campaign: Campaign,
    existing: Optional[CampaignFrame] = None,
    requirements: Optional[Dict[str, Any]] = None,
) -> str:
    existing = existing or CampaignFrame()
    requirements = requirements or {}
    name = campaign.name or "Untitled Campaign"
    system = campaign.game_system

    if step == "pitch":
        return _join(
            f'Create a compelling 2-3 sentence campaign pitch for a {system} TTRPG campaign named "{name}".',
            "",
            _frame_line("Genre/Style", requirements.get("genre")),
            _frame_line("Inspired by", requirements.get("inspiration")),
            _frame_line("Additional context", campaign.description),
            "",
            "The pitch should:",
            "- Hook players immediately",
            "- Clearly state the core conflict or premise",
            "- Set expectations for tone and scope",
            "",
            "Respond with just the pitch text, no additional formatting.",
        )
    if step == "tone_and_feel":
        return _join(
            f'Suggest 5-8 descriptive words that capture the tone and feel of this campaign: "{name}"',
            "",
            _frame_line("Campaign Pitch", existing.pitch),
            _frame_line("Desired feel", requirements.get("preferences")),
            "",
            "Examples: Adventurous, Dark, Whimsical, Gritty, Epic, Mysterious, Lighthearted, Tense, Heroic",
            "",
            _ARRAY_SUFFIX,
        )
    if step == "themes":
        return _join(
            f'Identify 4-6 narrative and emotional themes for this campaign: "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Tone", existing.tone_and_feel),
            "",
            "Themes are the deeper questions and ideas the campaign explores.",
            "Examples: Duty vs. Ethics, Transformation, Survival, Cultural Clash, Redemption",
            "",
            _ARRAY_SUFFIX,
        )
    if step == "touchstones":
        return _join(
            f'Suggest 3-5 cultural touchstones (films, books, games, shows) that inspire the feel of "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Tone", existing.tone_and_feel),
            _frame_line("Themes", existing.themes),
            "",
            _ARRAY_SUFFIX,
        )
    if step == "overview":
        return _join(
            f'Write a 2-3 paragraph campaign overview for "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Themes", existing.themes),
            "",
            "The overview should provide background lore, the current state of the world, "
            "key factions or conflicts, and enough context for players to create connected characters.",
            "",
            "Respond with the overview text.",
        )
    if step == "inciting_incident":
        return _join(
            f'Create an inciting incident to launch the campaign "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Overview", existing.overview, limit=300),
            "",
            "The inciting incident should draw all characters into the action, connect to the "
            "campaign's core themes and create urgency.",
            "",
            "Respond with 2-4 sentences describing the incident.",
        )
    if step in ("player_principles", "gm_principles"):
        who = "player" if step == "player_principles" else "GM"
        return _join(
            f'Create 3-4 {who} principles for "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Themes", existing.themes),
            "",
            "Principles should be specific to this campaign, actionable, and reinforce the themes.",
            "",
            _ARRAY_SUFFIX,
        )
    if step == "session_zero":
        return _join(
            f'Create 5-10 session zero questions for "{name}"',
            "",
            _frame_line("Pitch", existing.pitch),
            _frame_line("Themes", existing.themes),
            _frame_line("Overview", existing.overview, limit=200),
            "",
            "Questions should help players connect their characters to the world, establish shared "
            "world details and build character relationships.",
            "",
            _ARRAY_SUFFIX,
        )
    return f"Generate content for the {step} section of the campaign frame for \"{name}\"."


def build_prompt(category: str, context: GenerationContext, **kwargs: Any) -> str:
    if category == "npc":
        return build_npc_prompt(context)
    if category == "location":
        return build_location_prompt(context)
    if category == "encounter":
        return build_encounter_prompt(context)
    if category == "lore":
        return build_lore_prompt(context, kwargs.get("index", 0))
    if category == "campaign_frame":
        return build_frame_field_prompt(
            kwargs["step"], context.campaign, context.frame, context.requirements
        )
    raise ValueError(f"Unknown generation type: {category}")
