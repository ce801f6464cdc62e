from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from framesmith import config
from framesmith.frames.models import Campaign, CampaignFrame
from framesmith.generation import parser
from framesmith.generation.template_generator import TemplateGenerator
from framesmith.llm.backend import GenerationBackend
from framesmith.llm.types import GenerationError
from framesmith.prompts.builder import build_frame_field_prompt

logger = logging.getLogger(__name__)

LIST_STEPS = frozenset(
    {"tone_and_feel", "themes", "touchstones", "player_principles", "gm_principles", "session_zero"}
)
TEXT_STEPS = frozenset({"pitch", "overview", "inciting_incident"})


class FrameAssistant:
    """Suggests content for a single wizard field."""

    def __init__(
        self,
        backend: Optional[GenerationBackend] = None,
        templates: Optional[TemplateGenerator] = None,
    ) -> None:
        self.backend = backend
        self.templates = templates

    def suggest(
        self,
        step: str,
        campaign: Campaign,
        existing: Optional[CampaignFrame] = None,
        requirements: Optional[Dict[str, Any]] = None,
        *,
        api_key: Optional[str] = None,
        provider: str = config.DEFAULT_PROVIDER,
    ) -> Union[List[str], str]:
        if not api_key or self.backend is None:
            return self._offline(step, campaign)

        prompt = build_frame_field_prompt(step, campaign, existing, requirements)
        response = self.backend.generate_text(prompt, api_key, provider)
        logger.debug("Suggestion for %s: %d chars", step, len(response))
        if step in LIST_STEPS:
            return parser.parse_array(response)
        return parser.parse_text(response)

    def _offline(self, step: str, campaign: Campaign) -> Union[List[str], str]:
        generator = self.templates or TemplateGenerator(campaign.game_system)
        offline = {
            "pitch": generator.pitch,
            "tone_and_feel": generator.tone_and_feel,
            "themes": generator.themes,
            "player_principles": generator.player_principles,
            "gm_principles": generator.gm_principles,
            "inciting_incident": generator.inciting_incident,
            "session_zero": generator.session_zero_questions,
        }
        if step not in offline:
            raise GenerationError(f"An API key is required to suggest {step}")
        return offline[step]()
