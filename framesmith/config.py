from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_DATA = Path(__file__).resolve().parent / "data"

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_OPENAI_MODEL = "gpt-4-turbo-preview"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_PROVIDER = "anthropic"
MAX_TOKENS = 2048

RATE_LIMIT_SECONDS = float(os.getenv("FRAMESMITH_RATE_LIMIT_SECONDS", "2.0"))
CHECKPOINT_DEBOUNCE_SECONDS = float(
    os.getenv("FRAMESMITH_CHECKPOINT_DEBOUNCE_SECONDS", "2.0")
)

SCHEMA_PATH = PACKAGE_DATA / "campaign-frame.schema.json"
TEMPLATES_PATH = PACKAGE_DATA / "frame_templates.json"

DATA_ROOT: Path = Path(os.getenv("FRAMESMITH_DATA_ROOT", PROJECT_ROOT / "data"))
CACHE_ROOT: Path = Path(os.getenv("FRAMESMITH_CACHE_ROOT", PROJECT_ROOT / ".cache"))

_API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def set_data_root(path: Path) -> None:
    global DATA_ROOT
    DATA_ROOT = path


def set_cache_root(path: Path) -> None:
    global CACHE_ROOT
    CACHE_ROOT = path


def read_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    return path.read_text(encoding="utf-8").strip()


def read_json(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def resolve_api_key(provider: str) -> Optional[str]:
    env_name = _API_KEY_ENV.get(provider)
    if env_name is None:
        return None
    return os.getenv(env_name) or None


def resolve_frame_path(campaign_id: str, data_root: Optional[Path] = None) -> Path:
    root = data_root or DATA_ROOT
    return root / "campaigns" / campaign_id / "frame.json"


def resolve_entity_dir(
    campaign_id: str, kind: str, data_root: Optional[Path] = None
) -> Path:
    root = data_root or DATA_ROOT
    return root / "campaigns" / campaign_id / kind


def resolve_blob_root(data_root: Optional[Path] = None) -> Path:
    root = data_root or DATA_ROOT
    return root / "blobs"


def resolve_checkpoint_path(campaign_id: str, cache_root: Optional[Path] = None) -> Path:
    root = cache_root or CACHE_ROOT
    return root / f"wizard_state_{campaign_id}.json"
