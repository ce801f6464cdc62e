from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from framesmith.frames.models import FRAME_FIELDS, CampaignFrame

STEP_KEYS = FRAME_FIELDS
LAST_DATA_STEP = len(STEP_KEYS) - 1
REVIEW_STEP = len(STEP_KEYS)

STEP_TITLES = {
    "pitch": "Pitch",
    "tone_and_feel": "Tone & Feel",
    "themes": "Themes",
    "touchstones": "Touchstones",
    "overview": "Overview",
    "communities": "Communities",
    "ancestries": "Ancestries",
    "classes": "Classes",
    "player_principles": "Player Principles",
    "gm_principles": "GM Principles",
    "distinctions": "Distinctions",
    "inciting_incident": "Inciting Incident",
    "starting_quests": "Starting Quests",
    "campaign_mechanics": "Campaign Mechanics",
    "session_zero": "Session Zero",
}


def now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def step_key(index: int) -> Optional[str]:
    if 0 <= index < len(STEP_KEYS):
        return STEP_KEYS[index]
    return None


def step_title(index: int) -> str:
    key = step_key(index)
    if key is None:
        return "Review"
    return STEP_TITLES[key]


def strip_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


@dataclass
class WizardState:
    campaign_id: str
    current_step: int = 0
    completed_steps: List[int] = field(default_factory=list)
    frame: CampaignFrame = field(default_factory=CampaignFrame)
    template_used: Optional[str] = None
    is_complete: bool = False

    def progress_dict(self) -> Dict[str, Any]:
        return {
            "current_step": self.current_step,
            "completed_steps": list(self.completed_steps),
        }

    def snapshot(
        self,
        *,
        status: str,
        current_step: Optional[int] = None,
        completed_steps: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        payload = self.frame.to_dict()
        payload.update(
            {
                "current_step": self.current_step if current_step is None else current_step,
                "completed_steps": list(
                    self.completed_steps if completed_steps is None else completed_steps
                ),
                "template_used": self.template_used,
                "status": status,
            }
        )
        return strip_none(payload)

    def frame_snapshot(self) -> Dict[str, Any]:
        payload = self.frame.to_dict()
        payload["template_used"] = self.template_used
        return strip_none(payload)

    @classmethod
    def from_snapshot(cls, campaign_id: str, data: Dict[str, Any]) -> "WizardState":
        return cls(
            campaign_id=campaign_id,
            current_step=int(data.get("current_step") or 0),
            completed_steps=_unique_ints(data.get("completed_steps") or []),
            frame=CampaignFrame.from_dict(data),
            template_used=data.get("template_used") or None,
        )


def _unique_ints(values: List[Any]) -> List[int]:
    seen: List[int] = []
    for value in values:
        try:
            index = int(value)
        except (TypeError, ValueError):
            continue
        if index not in seen:
            seen.append(index)
    return seen
