from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from framesmith import config
from framesmith.frames.models import Campaign, CampaignMechanic, Distinction, Quest, section_is_empty
from framesmith.frames.templates import available_templates, get_template
from framesmith.generation.frame_assist import LIST_STEPS, TEXT_STEPS, FrameAssistant
from framesmith.llm.backend import GenerationBackend, RateLimiter
from framesmith.llm.gateway import FakeGateway, FakeImageGateway
from framesmith.llm.types import GenerationError, Provider
from framesmith.service.orchestrator import (
    ContentOrchestrator,
    FinalizeError,
    GenerationSettings,
    complete_campaign,
)
from framesmith.storage.blobs import LocalBlobStore
from framesmith.storage.entities import JsonEntityStore
from framesmith.wizard.builder import CampaignWizard
from framesmith.wizard.checkpoints import JsonFrameStore, LocalCheckpointCache
from framesmith.wizard.state import LAST_DATA_STEP, STEP_KEYS, step_key, step_title

FAKE_API_KEY = "fake-key"

HELP_TEXT = (
    "Commands: :next :back :goto N :review :save :templates :template ID "
    ":suggest :complete :quit"
)


def setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _build_backend(use_fake: bool) -> GenerationBackend:
    if use_fake:
        return GenerationBackend(
            gateways={provider: FakeGateway() for provider in Provider},
            image_gateway=FakeImageGateway(),
            rate_limiter=RateLimiter(min_interval=0),
        )
    return GenerationBackend()


def _settings(args: argparse.Namespace) -> GenerationSettings:
    if args.fake_gateway:
        return GenerationSettings(api_key=FAKE_API_KEY, provider=args.provider)
    image_key = config.resolve_api_key("openai")
    return GenerationSettings(
        api_key=config.resolve_api_key(args.provider),
        provider=args.provider,
        image_api_key=image_key,
        generate_image=bool(image_key),
    )


def _format_value(value) -> str:
    if isinstance(value, list):
        if not value:
            return "(empty)"
        return "; ".join(getattr(item, "name", None) or str(item) for item in value)
    if hasattr(value, "to_data"):
        return "(empty)" if section_is_empty(value) else str(value.to_data())
    if hasattr(value, "questions"):
        return "; ".join(value.questions) or "(no questions)"
    return value or "(empty)"


def _print_step(wizard: CampaignWizard) -> None:
    index = wizard.current_step
    key = step_key(index)
    if key is None:
        print("\n== Review ==")
        for i, field_key in enumerate(STEP_KEYS):
            print(f"  {i + 1:>2}. {step_title(i)}: {_format_value(wizard.frame.get(field_key))}")
        print("Type :complete to finish or :goto N to revisit a step.")
        return
    marker = "*" if index in wizard.completed_steps else " "
    print(f"\n[{index + 1}/{len(STEP_KEYS)}]{marker} {step_title(index)}")
    print(f"Current: {_format_value(wizard.frame.get(key))}")


def _split_entry(text: str):
    name, _, description = text.partition(":")
    return name.strip(), description.strip()


def _apply_input(wizard: CampaignWizard, text: str) -> None:
    key = step_key(wizard.current_step)
    if key is None:
        print("Nothing to edit on the review step.")
        return
    frame = wizard.frame
    if key in ("tone_and_feel", "themes", "touchstones", "player_principles", "gm_principles"):
        wizard.update_data(key, [part.strip() for part in text.split(",") if part.strip()])
    elif key in ("communities", "ancestries", "classes"):
        wizard.update_data(key, text)
    elif key == "distinctions":
        name, description = _split_entry(text)
        wizard.update_data(key, frame.distinctions + [Distinction(name, description)])
    elif key == "starting_quests":
        name, description = _split_entry(text)
        wizard.update_data(key, frame.starting_quests + [Quest(name, description)])
    elif key == "campaign_mechanics":
        name, description = _split_entry(text)
        wizard.update_data(key, frame.campaign_mechanics + [CampaignMechanic(name, description)])
    elif key == "session_zero":
        session_zero = frame.session_zero.to_dict()
        session_zero["questions"].append(text)
        wizard.update_data(key, session_zero)
    else:
        wizard.update_data(key, text)


def _suggest(
    wizard: CampaignWizard,
    assistant: FrameAssistant,
    campaign: Campaign,
    settings: GenerationSettings,
) -> None:
    key = step_key(wizard.current_step)
    if key not in LIST_STEPS and key not in TEXT_STEPS:
        print("No suggestions are available for this step.")
        return
    try:
        suggestion = assistant.suggest(
            key, campaign, wizard.frame, api_key=settings.api_key, provider=settings.provider
        )
    except GenerationError as exc:
        print(f"Suggestion failed: {exc}", file=sys.stderr)
        return
    if key == "session_zero":
        session_zero = wizard.frame.session_zero.to_dict()
        session_zero["questions"] = list(suggestion)
        wizard.update_data(key, session_zero)
    elif key in LIST_STEPS:
        wizard.update_data(key, suggestion if isinstance(suggestion, list) else [suggestion])
    else:
        wizard.update_data(key, suggestion)
    print(f"Suggested: {_format_value(wizard.frame.get(key))}")


def _complete(
    wizard: CampaignWizard,
    campaign: Campaign,
    backend: GenerationBackend,
    settings: GenerationSettings,
) -> bool:
    orchestrator = ContentOrchestrator(
        backend,
        JsonEntityStore(campaign.campaign_id),
        blob_store=LocalBlobStore(),
        progress=print,
    )
    try:
        batch = complete_campaign(wizard, orchestrator, campaign, settings)
    except FinalizeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return False
    summary = batch.summary()
    print(
        f"Created {summary['npcs']} NPCs, {summary['locations']} locations, {summary['lore']} lore "
        f"entries, {summary['encounters']} encounters, {summary['timeline_events']} timeline events."
    )
    if batch.map_error:
        print(f"World map skipped: {batch.map_error}")
    for message in summary["failures"]:
        print(f"Warning: {message}", file=sys.stderr)
    return True


def _run(
    wizard: CampaignWizard,
    campaign: Campaign,
    backend: GenerationBackend,
    settings: GenerationSettings,
) -> None:
    assistant = FrameAssistant(backend)
    while True:
        _print_step(wizard)
        text = input("> ").strip()
        if not text:
            continue
        if not text.startswith(":"):
            _apply_input(wizard, text)
            continue

        command, _, argument = text[1:].partition(" ")
        command = command.lower()
        argument = argument.strip()
        if command in {"quit", "exit"}:
            print("Goodbye.")
            break
        if command == "next":
            if not wizard.can_proceed():
                print("This step needs more content before moving on.")
                continue
            wizard.next_step()
        elif command == "back":
            wizard.previous_step()
        elif command == "goto":
            try:
                index = int(argument) - 1
            except ValueError:
                print("Usage: :goto N")
                continue
            if not wizard.can_visit(index):
                print("You can only jump to steps you have already reached.")
                continue
            wizard.go_to_step(index)
        elif command == "review":
            if wizard.current_step < LAST_DATA_STEP and LAST_DATA_STEP not in wizard.completed_steps:
                print("Finish the remaining steps before reviewing.")
                continue
            wizard.go_to_review()
        elif command == "save":
            wizard.save_draft()
            print("Draft saved.")
        elif command == "templates":
            for template in available_templates():
                print(f"  {template.template_id}: {template.name} ({template.game_system})")
        elif command == "template":
            template = get_template(argument)
            if template is None:
                print(f"Unknown template '{argument}'.")
                continue
            wizard.load_template(template)
            print(f"Loaded template '{template.name}'.")
        elif command == "suggest":
            _suggest(wizard, assistant, campaign, settings)
        elif command == "complete":
            if _complete(wizard, campaign, backend, settings):
                break
            raise SystemExit(1)
        else:
            print(HELP_TEXT)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Framesmith campaign frame wizard")
    parser.add_argument("--campaign", required=True, help="Campaign id (folder name under data/campaigns/)")
    parser.add_argument("--name", default=None, help="Campaign display name")
    parser.add_argument("--game-system", default="daggerheart", help="Game system id, e.g. starwarsd6")
    parser.add_argument("--template", default=None, help="Frame template id to start from")
    parser.add_argument(
        "--provider",
        default=config.DEFAULT_PROVIDER,
        choices=[p.value for p in Provider],
        help="Text generation provider",
    )
    parser.add_argument(
        "--fake-gateway",
        action="store_true",
        help="Use a deterministic fake LLM gateway (no network calls).",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(args.debug)

    frame_store = JsonFrameStore()
    if frame_store.load_completed(args.campaign):
        print(f"Campaign frame for '{args.campaign}' is already completed.")
        return

    campaign = Campaign(
        campaign_id=args.campaign,
        name=args.name or args.campaign,
        game_system=args.game_system,
    )
    backend = _build_backend(args.fake_gateway)
    settings = _settings(args)
    local_cache = LocalCheckpointCache()
    wizard = CampaignWizard.restore(args.campaign, draft_store=frame_store, local_cache=local_cache)

    if args.template and wizard.template_used is None:
        template = get_template(args.template)
        if template is None:
            raise SystemExit(f"Unknown template '{args.template}'.")
        wizard.load_template(template)

    print("")
    print(f"Framesmith ready. Campaign='{campaign.name}' System='{campaign.game_system}'")
    if not settings.api_key:
        print("No API key configured; content will come from offline tables.")
    print(HELP_TEXT)

    try:
        _run(wizard, campaign, backend, settings)
    finally:
        local_cache.flush()


if __name__ == "__main__":
    main()
