from __future__ import annotations

import random

import pytest
from conftest import SequencedGateway, make_backend

from framesmith.frames.models import CampaignFrame
from framesmith.generation import tables
from framesmith.generation.frame_assist import FrameAssistant
from framesmith.generation.template_generator import TemplateGenerator
from framesmith.llm.types import GenerationError


def test_list_step_suggestion_is_parsed_as_array(campaign) -> None:
    gateway = SequencedGateway(outputs=['```json\n["Grim", "Hopeful", "Tense"]\n```'])
    assistant = FrameAssistant(make_backend(gateway))

    tone = assistant.suggest(
        "tone_and_feel", campaign, CampaignFrame(pitch="A dying frontier."), api_key="k"
    )

    assert tone == ["Grim", "Hopeful", "Tense"]
    assert "Campaign Pitch: A dying frontier." in gateway.prompts[0]


def test_text_step_suggestion_is_plain_text(campaign) -> None:
    gateway = SequencedGateway(outputs=["  The beacon at Emberfall goes dark.  "])
    assistant = FrameAssistant(make_backend(gateway))

    incident = assistant.suggest("inciting_incident", campaign, api_key="k", provider="openai")

    assert incident == "The beacon at Emberfall goes dark."


def test_generation_errors_propagate(campaign) -> None:
    gateway = SequencedGateway(outputs=[GenerationError("Authentication failed")])
    assistant = FrameAssistant(make_backend(gateway))

    with pytest.raises(GenerationError, match="Authentication failed"):
        assistant.suggest("pitch", campaign, api_key="k")


def test_offline_suggestions_come_from_tables(campaign) -> None:
    assistant = FrameAssistant(templates=TemplateGenerator(rng=random.Random(2)))

    themes = assistant.suggest("themes", campaign)
    pitch = assistant.suggest("pitch", campaign)
    questions = assistant.suggest("session_zero", campaign)

    assert len(themes) == 5
    assert set(themes) <= set(tables.FANTASY.themes)
    assert pitch in tables.PITCHES
    assert set(questions) <= set(tables.SESSION_ZERO_QUESTIONS)


def test_offline_mode_is_used_without_api_key(campaign) -> None:
    gateway = SequencedGateway()
    assistant = FrameAssistant(make_backend(gateway))

    principles = assistant.suggest("gm_principles", campaign, api_key=None)

    assert len(principles) == 3
    assert gateway.prompts == []


def test_offline_touchstones_need_a_key(campaign) -> None:
    with pytest.raises(GenerationError, match="API key is required"):
        FrameAssistant().suggest("touchstones", campaign)
