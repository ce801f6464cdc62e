from __future__ import annotations

import random
import threading
from typing import List

import pytest
from conftest import (
    NPC_JSON,
    MemoryDraftStore,
    RecordingEntityStore,
    SequencedGateway,
    make_backend,
)

from framesmith.generation import parser
from framesmith.generation.records import NPCRecord
from framesmith.llm.types import GenerationError
from framesmith.service.orchestrator import (
    ContentOrchestrator,
    FinalizeError,
    GenerationSettings,
    OrchestrationCancelled,
    complete_campaign,
)
from framesmith.wizard.builder import CampaignWizard

# five NPCs, four locations, three lore entries and two encounters precede the map call
CONTENT_CALLS = 14


def make_orchestrator(gateway, store, progress: List[str] = None) -> ContentOrchestrator:
    return ContentOrchestrator(
        make_backend(gateway),
        store,
        rng=random.Random(1),
        progress=progress.append if progress is not None else None,
        sleep=lambda _: None,
    )


def sources(batch, kind: str) -> List[str]:
    return [r.source for r in batch.results if r.kind == kind]


def test_generates_fixed_quantities(campaign, filled_frame) -> None:
    gateway = SequencedGateway()
    store = RecordingEntityStore()

    batch = make_orchestrator(gateway, store).generate_campaign_content(filled_frame, campaign, "k")

    assert len(batch.npcs) == 5
    assert len(batch.locations) == 4
    assert len(batch.lore) == 3
    assert len(batch.encounters) == 2
    assert len(gateway.prompts) == CONTENT_CALLS + 1
    assert batch.world_map is not None
    assert batch.map_error is None
    assert not batch.failures()


def test_everything_is_persisted_in_order(campaign, filled_frame) -> None:
    store = RecordingEntityStore()

    make_orchestrator(SequencedGateway(), store).generate_campaign_content(filled_frame, campaign, "k")

    kinds = [kind for kind, _ in store.calls]
    assert kinds == (
        ["npcs"] * 5
        + ["locations"] * 4
        + ["lore"] * 3
        + ["encounters"] * 2
        + ["timeline_events"] * 3
        + ["quests"]
        + ["locations"]
        + ["maps"]
    )
    assert store.kinds("npcs")[0]["name"] == "Mirelle Vantorr"
    assert store.kinds("npcs")[0]["source"] == "ai"
    assert store.kinds("quests")[0]["name"] == "Relight the Beacon"
    assert store.kinds("locations")[-1]["name"] == "Grey Hollow"
    assert store.kinds("locations")[-1]["notable_features"] == "Mentioned by Ben"


def test_single_generation_failure_falls_back_for_that_item_only(campaign, filled_frame) -> None:
    gateway = SequencedGateway(outputs=[NPC_JSON, NPC_JSON, GenerationError("model overloaded")])
    store = RecordingEntityStore()

    batch = make_orchestrator(gateway, store).generate_campaign_content(filled_frame, campaign, "k")

    assert len(batch.npcs) == 5
    assert all(isinstance(npc, NPCRecord) for npc in batch.npcs)
    assert sources(batch, "npcs") == ["ai", "ai", "template", "ai", "ai"]
    assert len(store.kinds("npcs")) == 5
    fallback = batch.fallbacks()
    assert len(fallback) == 1
    assert fallback[0].index == 2
    assert "model overloaded" in fallback[0].generation_error


def test_encounter_and_lore_failures_use_fallback_content(campaign, filled_frame) -> None:
    outputs = [NPC_JSON] * 9 + [GenerationError("lore down")] + [NPC_JSON] * 2 + [GenerationError("x")]
    store = RecordingEntityStore()

    batch = make_orchestrator(SequencedGateway(outputs=outputs), store).generate_campaign_content(
        filled_frame, campaign, "k"
    )

    assert sources(batch, "lore") == ["fallback", "ai", "ai"]
    assert batch.lore[0].title == "The Founding Era"
    assert sources(batch, "encounters") == ["fallback", "ai"]
    assert batch.encounters[0].difficulty == "easy"


def test_persistence_failure_does_not_stop_the_run(campaign, filled_frame) -> None:
    store = RecordingEntityStore(fail_on={("npcs", 2)})

    batch = make_orchestrator(SequencedGateway(), store).generate_campaign_content(
        filled_frame, campaign, "k"
    )

    assert len(store.kinds("npcs")) == 5
    assert len(store.kinds("lore")) == 3
    failures = batch.failures()
    assert [(f.kind, f.index) for f in failures] == [("npcs", 1)]
    assert batch.failure_messages() == ["1 of 5 npcs failed to save"]
    assert batch.summary()["failures"] == ["1 of 5 npcs failed to save"]


def test_map_failure_is_not_fatal(campaign, filled_frame) -> None:
    gateway = SequencedGateway(outputs=[NPC_JSON] * CONTENT_CALLS + ["I cannot draw maps."])
    store = RecordingEntityStore()

    batch = make_orchestrator(gateway, store).generate_campaign_content(filled_frame, campaign, "k")

    assert batch.world_map is None
    assert "Failed to parse map description" in batch.map_error
    assert store.kinds("maps") == []
    assert len(store.kinds("npcs")) == 5
    assert batch.summary()["world_map"] is False


def test_offline_mode_uses_templates_and_simple_map(campaign, filled_frame) -> None:
    gateway = SequencedGateway()
    store = RecordingEntityStore()

    batch = make_orchestrator(gateway, store).generate_campaign_content(filled_frame, campaign, None)

    assert gateway.prompts == []
    assert set(sources(batch, "npcs")) == {"template"}
    assert set(sources(batch, "lore")) == {"fallback"}
    assert [e.difficulty for e in batch.encounters] == ["easy", "medium"]
    assert batch.world_map.name == "Ashes of Vael Map"
    assert store.kinds("maps")[0]["source"] == "template"
    assert batch.fallbacks() == []


def test_progress_reports_every_step(campaign, filled_frame) -> None:
    progress: List[str] = []

    make_orchestrator(SequencedGateway(), RecordingEntityStore(), progress).generate_campaign_content(
        filled_frame, campaign, "k"
    )

    steps = [message.split(":")[0] for message in progress]
    assert steps == [f"Step {n}/6" for n in range(1, 7)]
    assert "5 NPCs" in progress[0]
    assert "3 timeline events, 1 quests and 1 session zero locations" in progress[4]


def test_cancellation_stops_between_items(campaign, filled_frame) -> None:
    cancel = threading.Event()

    class CancellingStore(RecordingEntityStore):
        def create(self, kind, record):
            entity_id = super().create(kind, record)
            if len(self.calls) == 2:
                cancel.set()
            return entity_id

    store = CancellingStore()
    orchestrator = make_orchestrator(SequencedGateway(), store)

    with pytest.raises(OrchestrationCancelled):
        orchestrator.generate_campaign_content(filled_frame, campaign, "k", cancel_event=cancel)

    assert len(store.calls) == 2


def test_complete_campaign_finalizes_then_generates(campaign, filled_frame) -> None:
    drafts = MemoryDraftStore()
    wizard = CampaignWizard("c1", draft_store=drafts)
    wizard.update_data("pitch", filled_frame.pitch)
    progress: List[str] = []
    store = RecordingEntityStore()

    batch = complete_campaign(
        wizard,
        make_orchestrator(SequencedGateway(), store, progress),
        campaign,
        GenerationSettings(api_key="k"),
    )

    assert wizard.is_complete
    assert drafts.finalized[0][1]["pitch"] == filled_frame.pitch
    assert progress[0] == "Finalizing campaign frame..."
    assert progress[-1] == "Campaign content ready."
    assert batch.summary()["npcs"] == 5


def test_finalize_failure_aborts_before_generation(campaign) -> None:
    wizard = CampaignWizard("c1", draft_store=MemoryDraftStore(fail_finalize=True))
    gateway = SequencedGateway()
    store = RecordingEntityStore()

    with pytest.raises(FinalizeError, match="store unavailable"):
        complete_campaign(wizard, make_orchestrator(gateway, store), campaign)

    assert not wizard.is_complete
    assert gateway.prompts == []
    assert store.calls == []


def test_overflowing_party_level_does_not_abort_the_run(campaign, filled_frame) -> None:
    outputs = [NPC_JSON] * 12 + ['{"name": "Flood Crossing", "partyLevel": 1e999}']
    store = RecordingEntityStore()

    batch = make_orchestrator(SequencedGateway(outputs=outputs), store).generate_campaign_content(
        filled_frame, campaign, "k"
    )

    assert len(batch.encounters) == 2
    assert batch.encounters[0].name == "Flood Crossing"
    assert batch.encounters[0].party_level == 1
    assert len(store.kinds("encounters")) == 2


def test_parse_exception_falls_back_for_that_item_only(
    campaign, filled_frame, monkeypatch: pytest.MonkeyPatch
) -> None:
    real_parse = parser.parse
    calls = []

    def flaky_parse(category, text):
        calls.append(category)
        if category == "encounter" and calls.count("encounter") == 1:
            raise OverflowError("cannot convert float infinity to integer")
        return real_parse(category, text)

    monkeypatch.setattr(parser, "parse", flaky_parse)
    store = RecordingEntityStore()

    batch = make_orchestrator(SequencedGateway(), store).generate_campaign_content(
        filled_frame, campaign, "k"
    )

    assert sources(batch, "encounters") == ["fallback", "ai"]
    assert len(store.kinds("encounters")) == 2
    failed = [r for r in batch.fallbacks() if r.kind == "encounters"]
    assert "Failed to parse encounter response" in failed[0].generation_error
    assert batch.world_map is not None
