from __future__ import annotations

import base64
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from framesmith import config
from framesmith.frames.models import Campaign, CampaignFrame
from framesmith.generation import parser
from framesmith.generation.records import LocationPlacement, LocationRecord, MapRecord
from framesmith.llm.backend import GenerationBackend
from framesmith.llm.types import GenerationError
from framesmith.storage.blobs import BlobStore
from framesmith.wizard.state import now_iso

logger = logging.getLogger(__name__)

# map type -> (prompt instructions, image prompt)
HOLOCRON_STYLES: Dict[str, Tuple[str, str]] = {
    "world": (
        "Star Wars Holocron-style galactic map with holographic blue/cyan glowing effects, black "
        "space background with stars, glowing star systems, hyperspace routes as cyan lines, "
        "futuristic fonts, technical coordinates, no parchment - pure sci-fi",
        "Star Wars holographic galactic map, blue cyan glowing aesthetic, black space, glowing "
        "star systems, hyperspace routes as cyan trails, futuristic labels, scan lines, technical "
        "coordinates",
    ),
    "regional": (
        "Star Wars Holocron-style sector map with holographic blue/cyan effects, space background, "
        "hyperspace routes, space stations, asteroid fields, grid coordinates, futuristic fonts, "
        "holographic scan lines",
        "Star Wars holographic sector map, blue cyan glowing, star systems, hyperspace routes, "
        "space stations, asteroid fields, futuristic labels, grid coordinates, holographic effects",
    ),
    "local": (
        "Star Wars Holocron-style planetary map with holographic blue/cyan effects, orbital view, "
        "landing zones, technical labels, coordinate grid, futuristic fonts, scan effects, pure sci-fi",
        "Star Wars holographic location map, blue cyan glowing, buildings, landing pads, technical "
        "labels, coordinate grid, holographic scan effects, sci-fi design",
    ),
    "dungeon": (
        "Star Wars technical schematic with cyan/white on dark background, grid overlay, "
        "facility/ship interior, technical labels, security points, clean lines, Imperial "
        "schematic style",
        "Star Wars technical schematic, cyan white on dark, blueprint facility interior, grid "
        "overlay, technical labels, precise lines, Imperial schematics style",
    ),
}

FANTASY_STYLES: Dict[str, Tuple[str, str]] = {
    "world": (
        "Tolkien-esque fantasy cartography with hand-drawn aesthetic, parchment texture, flowing "
        "calligraphy, illustrated mountains/forests, decorative compass rose, ornate border",
        "Tolkien-style fantasy map, parchment texture, hand-drawn, flowing calligraphy, "
        "illustrated mountains and forests, decorative compass rose, ornate Celtic border, aged "
        "appearance",
    ),
    "regional": (
        "Tolkien-esque regional fantasy map with hand-drawn aesthetic, parchment texture, flowing "
        "calligraphy, illustrated terrain, dotted roads, compass rose, scale bar",
        "Tolkien-style regional fantasy map, parchment texture, hand-drawn, calligraphy labels, "
        "illustrated terrain, dotted paths, building icons, compass rose, scale bar, aged appearance",
    ),
    "local": (
        "Tolkien-esque town/city map with hand-drawn aesthetic, parchment texture, flowing "
        "calligraphy, isometric buildings, streets, decorative elements, compass rose",
        "Tolkien-style town map, parchment texture, hand-drawn, isometric buildings, marked "
        "streets, calligraphy labels, decorative elements, compass rose, scale bar, aged appearance",
    ),
    "dungeon": (
        "Grid-based battle map with square grid overlay (5-foot squares), top-down view, thick "
        "walls, D&D door symbols, numbered rooms, labeled features, clean tactical design",
        "Campaign dungeon battle map, square grid overlay (5ft), top-down view, thick black walls, "
        "D&D door symbols, numbered rooms, labeled features, tactical design suitable for VTT",
    ),
}


@dataclass(frozen=True)
class MapStyle:
    instructions: str
    image_prompt: str


def map_style(game_system: str, map_type: str, custom_style: Optional[str] = None) -> MapStyle:
    styles = HOLOCRON_STYLES if game_system == "starwarsd6" else FANTASY_STYLES
    instructions, image_prompt = styles.get(map_type) or styles["world"]
    suffix = f", {custom_style}" if custom_style else ""
    return MapStyle(
        instructions=f"IMPORTANT - Map Style: {instructions}{suffix}",
        image_prompt=f"{image_prompt}{suffix}",
    )


@dataclass
class MapContext:
    campaign: Campaign
    frame: CampaignFrame = field(default_factory=CampaignFrame)
    locations: List[LocationRecord] = field(default_factory=list)
    map_type: str = "world"
    specific_location: Optional[LocationRecord] = None
    custom_style: Optional[str] = None
    map_name: Optional[str] = None


def _format_block(style: MapStyle, body: Dict[str, Any], detail: str) -> str:
    document = dict(body)
    document["style"] = style.image_prompt
    document["imagePrompt"] = f"{style.image_prompt} [ADD YOUR SPECIFIC {detail} DETAILS HERE]"
    return "Format as JSON:\n```json\n" + json.dumps(document, indent=2) + "\n```"


def build_map_prompt(context: MapContext) -> str:
    campaign = context.campaign
    style = map_style(campaign.game_system, context.map_type, context.custom_style)
    frame = context.frame
    place = context.specific_location

    if context.map_type == "world" or place is None:
        lines = [
            f'Create a detailed world map description for the campaign "{campaign.name or "Untitled Campaign"}".',
            "",
            "CAMPAIGN CONTEXT:",
        ]
        if frame.pitch:
            lines.append(f"Pitch: {frame.pitch}")
        if frame.overview:
            lines.append(f"Overview: {frame.overview}")
        if frame.themes:
            lines.append(f"Themes: {', '.join(frame.themes)}")
        lines += ["", "LOCATIONS TO INCLUDE:"]
        lines += [
            f"- {loc.name} ({loc.type}): {loc.region or 'Unknown region'}" for loc in context.locations
        ]
        lines += [
            "",
            "Generate a map description with:",
            "1. Overall geography (continents, oceans, major terrain)",
            "2. Climate zones",
            "3. Where each location is positioned",
            "4. Notable geographical features",
            "5. Scale/size of the world",
            "",
            style.instructions,
            "",
            _format_block(
                style,
                {
                    "description": "Detailed description of the world geography",
                    "regions": ["region1", "region2"],
                    "climateZones": ["temperate north", "arid south"],
                    "geographicalFeatures": ["mountain range", "inland sea"],
                    "features": ["ocean", "mountains", "forests"],
                    "locationPlacements": [
                        {"location": "City Name", "position": "northern coast"}
                    ],
                },
                "MAP",
            ),
        ]
        return "\n".join(lines)

    if context.map_type == "regional":
        nearby = [loc for loc in context.locations if loc.name != place.name][:5]
        lines = [
            f'Create a regional map description centered on "{place.name}".',
            "",
            "LOCATION DETAILS:",
            f"Type: {place.type}",
            f"Region: {place.region or 'Unknown'}",
            f"Description: {place.description or 'No description'}",
            "",
            "NEARBY LOCATIONS:",
        ]
        lines += [f"- {loc.name} ({loc.type})" for loc in nearby]
        lines += [
            "",
            "Generate a regional map description showing:",
            f"1. The main location ({place.name}) in detail",
            "2. Surrounding terrain and geography",
            "3. Nearby locations and landmarks",
            "4. Roads, rivers, or other connections",
            "5. Scale (roughly 50-100 miles radius)",
            "",
            style.instructions,
            "",
            _format_block(
                style,
                {
                    "description": "Detailed description of the regional geography",
                    "regions": ["region names"],
                    "features": ["terrain features"],
                    "locationPlacements": [
                        {"location": "Location Name", "position": "relative position"}
                    ],
                },
                "REGIONAL",
            ),
        ]
        return "\n".join(lines)

    details = [
        "LOCATION DETAILS:",
        f"Type: {place.type}",
        f"Description: {place.description or 'No description'}",
        f"Notable Features: {place.notable_features or 'None listed'}",
    ]
    if context.map_type == "dungeon":
        return "\n".join(
            [f'Create a dungeon map for "{place.name}".', ""]
            + details
            + [
                "",
                "Generate a dungeon map description showing:",
                "1. Room layout with numbered chambers",
                "2. Corridors and passages",
                "3. Entrances and exits",
                "4. Traps, hazards, or special features",
                "5. Points of interest (treasure, monsters, puzzles)",
                "",
                style.instructions,
                "",
                _format_block(
                    style,
                    {
                        "description": "Detailed description of the dungeon layout and features",
                        "rooms": ["Room 1: Description", "Room 2: Description"],
                        "connections": ["corridors", "secret passages"],
                        "features": ["traps", "treasure", "encounters"],
                        "gridSize": "5-foot squares",
                    },
                    "DUNGEON",
                ),
            ]
        )
    return "\n".join(
        [f'Create a local/city map description for "{place.name}".', ""]
        + details
        + [
            "",
            "Generate a local map description showing:",
            "1. Major districts or areas",
            "2. Important buildings/landmarks",
            "3. Streets or pathways",
            "4. Points of interest",
            "5. Scale (walkable city/town map)",
            "",
            style.instructions,
            "",
            _format_block(
                style,
                {
                    "description": "Detailed description of the local area",
                    "districts": ["district names"],
                    "landmarks": ["important landmarks"],
                    "features": ["streets", "pathways", "points of interest"],
                },
                "TOWN/CITY",
            ),
        ]
    )


class MapGenerator:
    def __init__(
        self,
        backend: GenerationBackend,
        blob_store: Optional[BlobStore] = None,
    ) -> None:
        self.backend = backend
        self.blob_store = blob_store

    def generate_map(
        self,
        context: MapContext,
        api_key: Optional[str],
        provider: str = config.DEFAULT_PROVIDER,
        *,
        image_api_key: Optional[str] = None,
        generate_image: bool = False,
    ) -> MapRecord:
        """Describe a map with the text backend and optionally render it.

        Raises :class:`GenerationError` when the description cannot be produced
        or parsed. Image failures are logged and the map is returned without one.
        """
        response = self.backend.generate_text(build_map_prompt(context), api_key, provider)
        document = parser.extract_map_document(response)
        if document is None:
            logger.warning("Map description response had no JSON object (%d chars)", len(response))
            raise GenerationError("Failed to parse map description from AI response")

        record = parser.map_from_dict(
            document,
            type=context.map_type,
            name=context.map_name or f"{context.campaign.name} Map",
            created_at=now_iso(),
        )

        image_prompt = document.get("imagePrompt") or document.get("dallePrompt")
        if generate_image and image_api_key and image_prompt:
            try:
                image = self.backend.generate_image(str(image_prompt), image_api_key)
            except GenerationError as exc:
                logger.warning("Failed to generate map image: %s", exc)
            else:
                record.image_url = self._store_image(context.campaign.campaign_id, image)
        return record

    def _store_image(self, campaign_id: str, image: bytes) -> str:
        if self.blob_store is not None:
            path = f"maps/{campaign_id}/{uuid.uuid4().hex}.png"
            try:
                return self.blob_store.upload(path, image)
            except Exception as exc:
                logger.warning("Map image upload failed, keeping inline data: %s", exc)
        return "data:image/png;base64," + base64.b64encode(image).decode("ascii")


def generate_simple_map(context: MapContext) -> MapRecord:
    name = context.campaign.name
    regions: List[str] = []
    for loc in context.locations:
        if loc.region and loc.region not in regions:
            regions.append(loc.region)
    return MapRecord(
        type=context.map_type,
        name=f"{name or 'Campaign'} Map",
        description=(
            f"A {context.map_type} map for {name or 'the campaign'}. This map shows the major "
            "locations and their relative positions."
        ),
        regions=regions,
        features=["mountains", "forests", "rivers", "settlements"],
        location_placements=[
            LocationPlacement(location=loc.name, position=f"Region {i + 1}")
            for i, loc in enumerate(context.locations)
        ],
        style="simple text description",
        created_at=now_iso(),
    )
