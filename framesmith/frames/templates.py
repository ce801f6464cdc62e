from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from framesmith import config
from framesmith.frames.models import CampaignFrame
from framesmith.frames.schema import load_schema

BLANK_TEMPLATE_ID = "blank"

_TEMPLATE_CACHE: Dict[str, List["FrameTemplate"]] = {}


@dataclass
class TemplateValidationError(Exception):
    errors: List[str]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return "Template validation failed: " + "; ".join(self.errors)


@dataclass(frozen=True)
class FrameTemplate:
    template_id: str
    name: str
    complexity: int
    game_system: str
    frame: CampaignFrame

    def build_frame(self) -> CampaignFrame:
        return copy.deepcopy(self.frame)


def _validate(payload: List[Any]) -> None:
    validator = Draft202012Validator(load_schema())
    errors: List[str] = []
    for index, item in enumerate(payload):
        for e in sorted(validator.iter_errors(item), key=lambda e: list(e.path)):
            errors.append(f"{e.message} at template[{index}]{list(e.path)}")
    if errors:
        raise TemplateValidationError(errors)


def load_templates(path: Optional[Path] = None) -> List[FrameTemplate]:
    templates_path = path or config.TEMPLATES_PATH
    cache_key = str(templates_path)
    if cache_key in _TEMPLATE_CACHE:
        return _TEMPLATE_CACHE[cache_key]

    payload = json.loads(templates_path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise TemplateValidationError([f"Expected a list of templates in {templates_path}"])
    _validate(payload)

    templates = [
        FrameTemplate(
            template_id=str(item["id"]),
            name=str(item["name"]),
            complexity=int(item.get("complexity", 1)),
            game_system=str(item.get("game_system", "")),
            frame=CampaignFrame.from_dict(item),
        )
        for item in payload
    ]
    _TEMPLATE_CACHE[cache_key] = templates
    return templates


def get_template(template_id: str, path: Optional[Path] = None) -> Optional[FrameTemplate]:
    for template in load_templates(path):
        if template.template_id == template_id:
            return template
    return None


def available_templates(path: Optional[Path] = None) -> List[FrameTemplate]:
    return [t for t in load_templates(path) if t.template_id != BLANK_TEMPLATE_ID]


def blank_template(path: Optional[Path] = None) -> Optional[FrameTemplate]:
    return get_template(BLANK_TEMPLATE_ID, path)
