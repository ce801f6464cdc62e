from __future__ import annotations

import copy
import logging
from typing import Any, List, Optional

from framesmith.frames.models import CampaignFrame
from framesmith.frames.templates import FrameTemplate
from framesmith.wizard.checkpoints import Checkpoint, DraftStore
from framesmith.wizard.state import (
    LAST_DATA_STEP,
    REVIEW_STEP,
    WizardState,
    step_key,
)

logger = logging.getLogger(__name__)

# step index -> (minimum length, kind); steps absent from the table are optional
_STEP_GATES = {
    0: (10, "text"),
    1: (0, "list"),
    2: (0, "list"),
    3: (0, "list"),
    4: (20, "text"),
    11: (10, "text"),
}


class CampaignWizard:
    """Linear campaign frame questionnaire with two-tier checkpointing.

    Progress (step index + completed steps) is mirrored to a debounced local
    cache on every navigation change. The full frame is written to the
    durable draft store only by :meth:`next_step` and :meth:`save_draft`.
    """

    def __init__(
        self,
        campaign_id: str,
        *,
        draft_store: Optional[DraftStore] = None,
        local_cache: Optional[Checkpoint] = None,
        advance_limit: int = LAST_DATA_STEP,
    ) -> None:
        self.state = WizardState(campaign_id=campaign_id)
        self.draft_store = draft_store
        self.local_cache = local_cache
        self.advance_limit = advance_limit

    @classmethod
    def restore(
        cls,
        campaign_id: str,
        *,
        draft_store: Optional[DraftStore] = None,
        local_cache: Optional[Checkpoint] = None,
        advance_limit: int = LAST_DATA_STEP,
    ) -> "CampaignWizard":
        wizard = cls(
            campaign_id,
            draft_store=draft_store,
            local_cache=local_cache,
            advance_limit=advance_limit,
        )
        draft = draft_store.read(campaign_id) if draft_store is not None else None
        if draft:
            wizard.state = WizardState.from_snapshot(campaign_id, draft)
            return wizard

        cached = local_cache.read(campaign_id) if local_cache is not None else None
        if cached:
            restored = WizardState.from_snapshot(campaign_id, cached)
            wizard.state.current_step = restored.current_step
            wizard.state.completed_steps = restored.completed_steps
        return wizard

    @property
    def campaign_id(self) -> str:
        return self.state.campaign_id

    @property
    def current_step(self) -> int:
        return self.state.current_step

    @property
    def completed_steps(self) -> List[int]:
        return list(self.state.completed_steps)

    @property
    def frame(self) -> CampaignFrame:
        return self.state.frame

    @property
    def template_used(self) -> Optional[str]:
        return self.state.template_used

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    def update_data(self, key: str, value: Any) -> None:
        self.state.frame.set(key, value)

    def load_template(self, template: FrameTemplate) -> None:
        self.state.frame = template.build_frame()
        self.state.template_used = template.template_id

    def can_visit(self, index: int) -> bool:
        return 0 <= index <= self.state.current_step or index in self.state.completed_steps

    def go_to_step(self, index: int) -> None:
        self.state.current_step = index
        self._touch_progress()

    def go_to_review(self) -> None:
        self.go_to_step(REVIEW_STEP)

    def next_step(self) -> None:
        current = self.state.current_step
        if current not in self.state.completed_steps:
            self.state.completed_steps.append(current)

        next_index = current + 1 if current < self.advance_limit else current
        if self.draft_store is not None:
            snapshot = self.state.snapshot(status="draft", current_step=next_index)
            self.draft_store.write(self.campaign_id, snapshot)

        self.state.current_step = next_index
        self._touch_progress()

    def previous_step(self) -> None:
        if self.state.current_step > 0:
            self.state.current_step -= 1
            self._touch_progress()

    def save_draft(self) -> None:
        if self.draft_store is None:
            return
        self.draft_store.write(self.campaign_id, self.state.snapshot(status="draft"))

    def can_proceed(self) -> bool:
        index = self.state.current_step
        gate = _STEP_GATES.get(index)
        if gate is None:
            return True
        minimum, kind = gate
        value = self.state.frame.get(step_key(index))
        if kind == "list":
            return isinstance(value, list) and len(value) > minimum
        return isinstance(value, str) and len(value) > minimum

    def complete(self) -> CampaignFrame:
        """Finalize the frame and lock the wizard.

        Without a draft store nothing is persisted; the wizard is still marked
        complete and the returned frame is the in-memory copy. A failing
        ``finalize`` leaves the wizard open.
        """
        if self.draft_store is not None:
            self.draft_store.finalize(self.campaign_id, self.state.frame_snapshot())
        if self.local_cache is not None:
            self.local_cache.clear(self.campaign_id)
        self.state.is_complete = True
        return copy.deepcopy(self.state.frame)

    def _touch_progress(self) -> None:
        if self.local_cache is None:
            return
        self.local_cache.write(self.campaign_id, self.state.progress_dict())
