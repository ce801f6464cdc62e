from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from framesmith import config
from framesmith.frames.models import Campaign, CampaignFrame, Quest, SessionZero
from framesmith.llm.backend import GenerationBackend, RateLimiter
from framesmith.llm.gateway import FakeImageGateway
from framesmith.llm.types import LLMResult, Provider


NPC_JSON = """Here you go:
```json
{
  "name": "Mirelle Vantorr",
  "occupation": "Archivist",
  "location": "The Glass Library",
  "relationship": "ally",
  "description": "Tall and soft-spoken.",
  "notes": "Keeps a forbidden ledger.",
  "firstMet": "In the stacks at midnight."
}
```"""


@pytest.fixture()
def temp_data_root(tmp_path: Path) -> Path:
    dest = tmp_path / "data"
    original = config.DATA_ROOT
    config.set_data_root(dest)
    try:
        yield dest
    finally:
        config.set_data_root(original)


@pytest.fixture()
def temp_cache_root(tmp_path: Path) -> Path:
    dest = tmp_path / "cache"
    original = config.CACHE_ROOT
    config.set_cache_root(dest)
    try:
        yield dest
    finally:
        config.set_cache_root(original)


class MemoryCheckpoint:
    def __init__(self) -> None:
        self.records: Dict[str, Dict[str, Any]] = {}
        self.writes: List[Tuple[str, Dict[str, Any]]] = []
        self.cleared: List[str] = []

    def write(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        self.writes.append((campaign_id, json.loads(json.dumps(payload))))
        self.records[campaign_id] = json.loads(json.dumps(payload))

    def read(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        return self.records.get(campaign_id)

    def clear(self, campaign_id: str) -> None:
        self.cleared.append(campaign_id)
        self.records.pop(campaign_id, None)


class MemoryDraftStore(MemoryCheckpoint):
    def __init__(self, fail_finalize: bool = False) -> None:
        super().__init__()
        self.finalized: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_finalize = fail_finalize

    def finalize(self, campaign_id: str, payload: Dict[str, Any]) -> None:
        if self.fail_finalize:
            raise RuntimeError("store unavailable")
        self.finalized.append((campaign_id, json.loads(json.dumps(payload))))


@dataclass
class RecordingEntityStore:
    fail_on: Set[Tuple[str, int]] = field(default_factory=set)
    calls: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def create(self, kind: str, record: Dict[str, Any]) -> str:
        self.calls.append((kind, record))
        attempt = sum(1 for k, _ in self.calls if k == kind)
        if (kind, attempt) in self.fail_on:
            raise RuntimeError(f"write rejected for {kind} #{attempt}")
        return f"{kind}-{len(self.calls)}"

    def kinds(self, kind: str) -> List[Dict[str, Any]]:
        return [record for k, record in self.calls if k == kind]


@dataclass
class SequencedGateway:
    """Returns queued outputs in order; queued exceptions are raised instead."""

    outputs: List[Union[str, Exception]] = field(default_factory=list)
    default: str = NPC_JSON
    prompts: List[str] = field(default_factory=list)

    def generate(self, *, prompt: str, api_key: str, model: Optional[str] = None) -> LLMResult:
        self.prompts.append(prompt)
        item = self.outputs.pop(0) if self.outputs else self.default
        if isinstance(item, Exception):
            raise item
        return LLMResult(output_text=item, response_id=f"resp-{len(self.prompts)}")


def make_backend(gateway, **kwargs: Any) -> GenerationBackend:
    return GenerationBackend(
        gateways={Provider.ANTHROPIC: gateway, Provider.OPENAI: gateway},
        image_gateway=kwargs.pop("image_gateway", FakeImageGateway()),
        rate_limiter=RateLimiter(min_interval=0),
        **kwargs,
    )


@pytest.fixture()
def campaign() -> Campaign:
    return Campaign(campaign_id="c1", name="Ashes of Vael", description="A grim frontier.")


@pytest.fixture()
def filled_frame() -> CampaignFrame:
    return CampaignFrame(
        pitch="Heroes defend a dying frontier against a creeping blight.",
        tone_and_feel=["Gritty", "Hopeful"],
        themes=["Survival", "Sacrifice", "Family", "Hope"],
        touchstones=["The Last of Us"],
        overview="The kingdom of Vael collapsed a generation ago. " * 6,
        inciting_incident="The beacon tower at Emberfall goes dark.",
        starting_quests=[Quest(name="Relight the Beacon", description="Reach the tower.")],
        session_zero=SessionZero.from_dict(
            {
                "world_facts": [{"fact": "The river runs red in spring", "established_by": "Ana"}],
                "player_locations": [
                    {"name": "Grey Hollow", "description": "A mining village", "mentioned_by": "Ben"}
                ],
            }
        ),
    )
