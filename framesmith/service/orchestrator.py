from __future__ import annotations

import logging
import random
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from framesmith import config
from framesmith.frames.models import Campaign, CampaignFrame
from framesmith.generation import fallbacks, parser
from framesmith.generation.maps import MapContext, MapGenerator, generate_simple_map
from framesmith.generation.records import LocationRecord, MapRecord
from framesmith.generation.template_generator import TemplateGenerator
from framesmith.llm.backend import GenerationBackend
from framesmith.llm.types import GenerationError
from framesmith.prompts.builder import (
    GenerationContext,
    build_encounter_prompt,
    build_location_prompt,
    build_lore_prompt,
    build_npc_prompt,
)
from framesmith.storage.blobs import BlobStore
from framesmith.storage.entities import EntityStore
from framesmith.wizard.builder import CampaignWizard

logger = logging.getLogger(__name__)

NPC_COUNT = 5
LOCATION_COUNT = 4
LORE_COUNT = 3
ENCOUNTER_COUNT = 2
TOTAL_STEPS = 6

ProgressCallback = Callable[[str], None]


class FinalizeError(RuntimeError):
    pass


class OrchestrationCancelled(RuntimeError):
    pass


@dataclass
class GenerationSettings:
    api_key: Optional[str] = None
    provider: str = config.DEFAULT_PROVIDER
    image_api_key: Optional[str] = None
    generate_image: bool = False


@dataclass
class ItemResult:
    kind: str
    index: int
    record: Any
    source: str
    generation_error: Optional[str] = None
    entity_id: Optional[str] = None
    persist_error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.entity_id is not None


@dataclass
class GeneratedContentBatch:
    npcs: List[Any] = field(default_factory=list)
    locations: List[Any] = field(default_factory=list)
    lore: List[Any] = field(default_factory=list)
    encounters: List[Any] = field(default_factory=list)
    timeline_events: List[Any] = field(default_factory=list)
    quests: List[Any] = field(default_factory=list)
    session_zero_locations: List[Any] = field(default_factory=list)
    world_map: Optional[MapRecord] = None
    map_error: Optional[str] = None
    results: List[ItemResult] = field(default_factory=list)

    def failures(self) -> List[ItemResult]:
        return [r for r in self.results if r.persist_error is not None]

    def fallbacks(self) -> List[ItemResult]:
        return [r for r in self.results if r.generation_error is not None]

    def failure_messages(self) -> List[str]:
        totals = Counter(r.kind for r in self.results)
        failed = Counter(r.kind for r in self.failures())
        return [
            f"{failed[kind]} of {totals[kind]} {kind} failed to save"
            for kind in totals
            if failed[kind]
        ]

    def summary(self) -> Dict[str, Any]:
        return {
            "npcs": len(self.npcs),
            "locations": len(self.locations),
            "lore": len(self.lore),
            "encounters": len(self.encounters),
            "timeline_events": len(self.timeline_events),
            "quests": len(self.quests),
            "session_zero_locations": len(self.session_zero_locations),
            "world_map": self.world_map is not None,
            "map_error": self.map_error,
            "fallbacks": len(self.fallbacks()),
            "failures": self.failure_messages(),
        }


class ContentOrchestrator:
    """Generates and persists starter content for a completed campaign frame.

    Items are produced one at a time in a fixed order. A failed AI call falls
    back to offline content for that item only; a failed persistence call is
    recorded on the item's :class:`ItemResult` and the loop carries on.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        entity_store: EntityStore,
        *,
        blob_store: Optional[BlobStore] = None,
        rng: Optional[random.Random] = None,
        progress: Optional[ProgressCallback] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.backend = backend
        self.entity_store = entity_store
        self.maps = MapGenerator(backend, blob_store)
        self.rng = rng or random.Random()
        self.progress = progress
        self.sleep = sleep

    def report(self, message: str) -> None:
        logger.info(message)
        if self.progress is not None:
            self.progress(message)

    def generate_campaign_content(
        self,
        frame: CampaignFrame,
        campaign: Campaign,
        api_key: Optional[str] = None,
        provider: str = config.DEFAULT_PROVIDER,
        *,
        image_api_key: Optional[str] = None,
        generate_image: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> GeneratedContentBatch:
        use_ai = bool(api_key)
        templates = TemplateGenerator(campaign.game_system, self.rng)
        context = GenerationContext(campaign=campaign, frame=frame)
        batch = GeneratedContentBatch()

        def ai(prompt_for, category: str):
            def call():
                self._pace()
                text = self.backend.generate_text(prompt_for(), api_key, provider)
                try:
                    return parser.parse(category, text)
                except Exception as exc:
                    raise GenerationError(f"Failed to parse {category} response: {exc}") from exc

            return call if use_ai else None

        self.report(f"Step 1/{TOTAL_STEPS}: Generating and saving {NPC_COUNT} NPCs...")
        for i in range(NPC_COUNT):
            self._check_cancel(cancel_event)
            result = self._produce(
                "npcs", i, ai(lambda: build_npc_prompt(context), "npc"), templates.random_npc, "template"
            )
            batch.npcs.append(result.record)
            context.existing_npcs.append(result.record.to_dict())
            self._persist(batch, result)

        self.report(f"Step 2/{TOTAL_STEPS}: Generating and saving {LOCATION_COUNT} locations...")
        for i in range(LOCATION_COUNT):
            self._check_cancel(cancel_event)
            result = self._produce(
                "locations",
                i,
                ai(lambda: build_location_prompt(context), "location"),
                templates.random_location,
                "template",
            )
            batch.locations.append(result.record)
            context.existing_locations.append(result.record.to_dict())
            self._persist(batch, result)

        self.report(f"Step 3/{TOTAL_STEPS}: Generating and saving {LORE_COUNT} lore entries...")
        for i in range(LORE_COUNT):
            self._check_cancel(cancel_event)
            result = self._produce(
                "lore",
                i,
                ai(lambda i=i: build_lore_prompt(context, i), "lore"),
                lambda i=i: fallbacks.lore_from_template(frame, i),
                "fallback",
            )
            batch.lore.append(result.record)
            context.existing_lore.append(result.record.to_dict())
            self._persist(batch, result)

        self.report(f"Step 4/{TOTAL_STEPS}: Generating and saving {ENCOUNTER_COUNT} encounters...")
        for i in range(ENCOUNTER_COUNT):
            self._check_cancel(cancel_event)
            difficulty = fallbacks.encounter_difficulty_for(i)
            encounter_context = GenerationContext(
                campaign=campaign,
                frame=frame,
                requirements={"difficulty": difficulty},
                party_level=1,
                party_size=4,
            )
            result = self._produce(
                "encounters",
                i,
                ai(lambda c=encounter_context: build_encounter_prompt(c), "encounter"),
                lambda d=difficulty: templates.random_encounter(difficulty=d, party_level=1),
                "fallback",
            )
            batch.encounters.append(result.record)
            self._persist(batch, result)

        events = fallbacks.timeline_events(frame)
        quests = [q for q in frame.starting_quests if q.name.strip()]
        places = [
            LocationRecord(
                name=p.name,
                type="other",
                description=p.description,
                notable_features=f"Mentioned by {p.mentioned_by}" if p.mentioned_by else "",
            )
            for p in frame.session_zero.player_locations
            if p.name.strip()
        ]
        self.report(
            f"Step 5/{TOTAL_STEPS}: Saving {len(events)} timeline events, {len(quests)} quests "
            f"and {len(places)} session zero locations..."
        )
        for i, event in enumerate(events):
            self._check_cancel(cancel_event)
            batch.timeline_events.append(event)
            self._persist(batch, ItemResult("timeline_events", i, event, "derived"))
        for i, quest in enumerate(quests):
            self._check_cancel(cancel_event)
            batch.quests.append(quest)
            self._persist(batch, ItemResult("quests", i, quest, "derived"))
        for i, place in enumerate(places):
            self._check_cancel(cancel_event)
            batch.session_zero_locations.append(place)
            self._persist(batch, ItemResult("locations", LOCATION_COUNT + i, place, "derived"))

        self._check_cancel(cancel_event)
        self.report(f"Step 6/{TOTAL_STEPS}: Generating world map...")
        self._world_map(
            batch,
            MapContext(campaign=campaign, frame=frame, locations=list(batch.locations)),
            api_key,
            provider,
            image_api_key=image_api_key,
            generate_image=generate_image,
        )
        return batch

    def _pace(self) -> None:
        wait = self.backend.rate_limiter.seconds_until_ready()
        if wait > 0:
            self.sleep(wait)

    def _produce(self, kind: str, index: int, ai_call, offline_call, offline_source: str) -> ItemResult:
        if ai_call is None:
            return ItemResult(kind, index, offline_call(), offline_source)
        try:
            return ItemResult(kind, index, ai_call(), "ai")
        except GenerationError as exc:
            logger.warning("Failed to generate %s %d, using %s: %s", kind, index + 1, offline_source, exc)
            return ItemResult(kind, index, offline_call(), offline_source, generation_error=str(exc))

    def _persist(self, batch: GeneratedContentBatch, result: ItemResult) -> None:
        batch.results.append(result)
        record = result.record
        payload = record.to_dict()
        payload["source"] = result.source
        try:
            result.entity_id = self.entity_store.create(result.kind, payload)
        except Exception as exc:
            logger.error("Failed to save %s %d: %s", result.kind, result.index + 1, exc)
            result.persist_error = str(exc)

    def _world_map(
        self,
        batch: GeneratedContentBatch,
        context: MapContext,
        api_key: Optional[str],
        provider: str,
        *,
        image_api_key: Optional[str],
        generate_image: bool,
    ) -> None:
        try:
            if api_key:
                self._pace()
                world_map = self.maps.generate_map(
                    context,
                    api_key,
                    provider,
                    image_api_key=image_api_key,
                    generate_image=generate_image,
                )
                source = "ai"
            else:
                world_map = generate_simple_map(context)
                source = "template"
        except Exception as exc:
            logger.warning("World map generation failed: %s", exc)
            batch.map_error = str(exc)
            return
        batch.world_map = world_map
        self._persist(batch, ItemResult("maps", 0, world_map, source))

    @staticmethod
    def _check_cancel(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise OrchestrationCancelled("Campaign content generation was cancelled")


def complete_campaign(
    wizard: CampaignWizard,
    orchestrator: ContentOrchestrator,
    campaign: Campaign,
    settings: Optional[GenerationSettings] = None,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> GeneratedContentBatch:
    """Finalize the wizard's frame, then generate starter content for it.

    Only the finalize step is fatal (:class:`FinalizeError`); content that was
    persisted before a later exception stays persisted.
    """
    settings = settings or GenerationSettings()
    orchestrator.report("Finalizing campaign frame...")
    try:
        frame = wizard.complete()
    except Exception as exc:
        logger.error("Failed to finalize campaign frame for %s: %s", campaign.campaign_id, exc)
        raise FinalizeError(f"Failed to finalize campaign frame: {exc}") from exc

    batch = orchestrator.generate_campaign_content(
        frame,
        campaign,
        settings.api_key,
        settings.provider,
        image_api_key=settings.image_api_key,
        generate_image=settings.generate_image,
        cancel_event=cancel_event,
    )
    for message in batch.failure_messages():
        logger.warning(message)
    orchestrator.report("Campaign content ready.")
    return batch
