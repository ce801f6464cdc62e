from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from framesmith import config
from framesmith.frames.models import Campaign
from framesmith.frames.templates import available_templates, get_template
from framesmith.generation.frame_assist import FrameAssistant
from framesmith.llm.backend import GenerationBackend
from framesmith.llm.types import GenerationError, RateLimitError
from framesmith.service.orchestrator import (
    ContentOrchestrator,
    FinalizeError,
    GenerationSettings,
    complete_campaign,
)
from framesmith.storage.blobs import LocalBlobStore
from framesmith.storage.entities import JsonEntityStore
from framesmith.wizard.builder import CampaignWizard
from framesmith.wizard.checkpoints import FrameStoreError, JsonFrameStore, LocalCheckpointCache
from framesmith.wizard.state import REVIEW_STEP, step_key, step_title

logger = logging.getLogger(__name__)


class CampaignInfo(BaseModel):
    name: str = ""
    description: str = ""
    game_system: str = "daggerheart"


class UpdateDataRequest(BaseModel):
    key: str
    value: Any = None


class TemplateRequest(BaseModel):
    template_id: str


class GotoRequest(BaseModel):
    step: int = Field(ge=0, le=REVIEW_STEP)


class SuggestRequest(CampaignInfo):
    step: Optional[str] = None
    requirements: Dict[str, Any] = Field(default_factory=dict)


class CompleteRequest(CampaignInfo):
    pass


class WizardResponse(BaseModel):
    campaign_id: str
    current_step: int
    step_key: Optional[str] = None
    step_title: str
    completed_steps: List[int]
    can_proceed: bool
    template_used: Optional[str] = None
    is_complete: bool
    frame: Dict[str, Any]


def _wizard_response(wizard: CampaignWizard) -> WizardResponse:
    return WizardResponse(
        campaign_id=wizard.campaign_id,
        current_step=wizard.current_step,
        step_key=step_key(wizard.current_step),
        step_title=step_title(wizard.current_step),
        completed_steps=wizard.completed_steps,
        can_proceed=wizard.can_proceed(),
        template_used=wizard.template_used,
        is_complete=wizard.is_complete,
        frame=wizard.frame.to_dict(),
    )


def _campaign(campaign_id: str, info: CampaignInfo) -> Campaign:
    return Campaign(
        campaign_id=campaign_id,
        name=info.name or campaign_id,
        description=info.description,
        game_system=info.game_system,
    )


def create_app(
    *,
    backend: Optional[GenerationBackend] = None,
    settings: Optional[GenerationSettings] = None,
    data_root: Optional[Path] = None,
    cache_root: Optional[Path] = None,
    debounce_seconds: float = config.CHECKPOINT_DEBOUNCE_SECONDS,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    app = FastAPI(title="Framesmith API")
    app.state.backend = backend or GenerationBackend()
    app.state.settings = settings or GenerationSettings(
        api_key=config.resolve_api_key(config.DEFAULT_PROVIDER),
        provider=config.DEFAULT_PROVIDER,
        image_api_key=config.resolve_api_key("openai"),
    )
    app.state.frame_store = JsonFrameStore(data_root)
    app.state.local_cache = LocalCheckpointCache(cache_root, debounce_seconds=debounce_seconds)
    app.state.data_root = data_root
    app.state.rng = rng
    app.state.wizards = {}

    def wizard_for(campaign_id: str) -> CampaignWizard:
        wizard = app.state.wizards.get(campaign_id)
        if wizard is None:
            wizard = CampaignWizard.restore(
                campaign_id,
                draft_store=app.state.frame_store,
                local_cache=app.state.local_cache,
            )
            if app.state.frame_store.load_completed(campaign_id):
                wizard.state.is_complete = True
            app.state.wizards[campaign_id] = wizard
        return wizard

    def open_wizard(campaign_id: str) -> CampaignWizard:
        wizard = wizard_for(campaign_id)
        if wizard.is_complete:
            raise HTTPException(status_code=409, detail="Campaign frame is already completed")
        return wizard

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/templates")
    def templates() -> dict:
        return {
            "templates": [
                {
                    "id": t.template_id,
                    "name": t.name,
                    "complexity": t.complexity,
                    "game_system": t.game_system,
                }
                for t in available_templates()
            ]
        }

    @app.get("/campaigns/{campaign_id}/wizard", response_model=WizardResponse)
    def get_wizard(campaign_id: str) -> WizardResponse:
        return _wizard_response(wizard_for(campaign_id))

    @app.post("/campaigns/{campaign_id}/wizard/data", response_model=WizardResponse)
    def update_data(campaign_id: str, payload: UpdateDataRequest) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        try:
            wizard.update_data(payload.key, payload.value)
        except (KeyError, TypeError, AttributeError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/template", response_model=WizardResponse)
    def load_template(campaign_id: str, payload: TemplateRequest) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        template = get_template(payload.template_id)
        if template is None:
            raise HTTPException(status_code=404, detail=f"Unknown template '{payload.template_id}'")
        wizard.load_template(template)
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/next", response_model=WizardResponse)
    def next_step(campaign_id: str) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        if not wizard.can_proceed():
            raise HTTPException(
                status_code=409, detail=f"Step '{step_title(wizard.current_step)}' is incomplete"
            )
        try:
            wizard.next_step()
        except FrameStoreError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/previous", response_model=WizardResponse)
    def previous_step(campaign_id: str) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        wizard.previous_step()
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/goto", response_model=WizardResponse)
    def goto_step(campaign_id: str, payload: GotoRequest) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        if not wizard.can_visit(payload.step):
            raise HTTPException(status_code=400, detail=f"Step {payload.step} has not been reached")
        wizard.go_to_step(payload.step)
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/save", response_model=WizardResponse)
    def save_draft(campaign_id: str) -> WizardResponse:
        wizard = open_wizard(campaign_id)
        try:
            wizard.save_draft()
        except FrameStoreError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _wizard_response(wizard)

    @app.post("/campaigns/{campaign_id}/wizard/suggest")
    def suggest(campaign_id: str, payload: SuggestRequest) -> dict:
        wizard = wizard_for(campaign_id)
        step = payload.step or step_key(wizard.current_step)
        if step is None:
            raise HTTPException(status_code=400, detail="No field to suggest on the review step")
        settings = app.state.settings
        assistant = FrameAssistant(app.state.backend)
        try:
            suggestion = assistant.suggest(
                step,
                _campaign(campaign_id, payload),
                wizard.frame,
                payload.requirements,
                api_key=settings.api_key,
                provider=settings.provider,
            )
        except RateLimitError as exc:
            raise HTTPException(status_code=429, detail=str(exc)) from exc
        except GenerationError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"step": step, "suggestion": suggestion}

    @app.post("/campaigns/{campaign_id}/wizard/complete")
    def complete(campaign_id: str, payload: CompleteRequest) -> dict:
        wizard = open_wizard(campaign_id)
        campaign = _campaign(campaign_id, payload)
        orchestrator = ContentOrchestrator(
            app.state.backend,
            JsonEntityStore(campaign_id, app.state.data_root),
            blob_store=LocalBlobStore(config.resolve_blob_root(app.state.data_root)),
            rng=app.state.rng,
        )
        try:
            batch = complete_campaign(wizard, orchestrator, campaign, app.state.settings)
        except FinalizeError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"campaign_id": campaign_id, "summary": batch.summary()}

    return app
