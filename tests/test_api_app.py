from __future__ import annotations

import json
import random
from pathlib import Path

from conftest import SequencedGateway, make_backend
from fastapi.testclient import TestClient

from framesmith import config
from framesmith.apps.api_app import create_app
from framesmith.llm.types import GenerationError
from framesmith.service.orchestrator import GenerationSettings

PITCH = "Heroes defend a dying frontier against a creeping blight."


def _build_app(tmp_path: Path, gateway=None, api_key: str = "k"):
    return create_app(
        backend=make_backend(gateway or SequencedGateway()),
        settings=GenerationSettings(api_key=api_key),
        data_root=tmp_path / "data",
        cache_root=tmp_path / "cache",
        debounce_seconds=0,
        rng=random.Random(1),
    )


def _build_client(tmp_path: Path, gateway=None, api_key: str = "k") -> TestClient:
    return TestClient(_build_app(tmp_path, gateway, api_key))


def test_health_endpoint(tmp_path: Path) -> None:
    response = _build_client(tmp_path).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_templates_endpoint_lists_starter_frames(tmp_path: Path) -> None:
    response = _build_client(tmp_path).get("/templates")

    ids = [t["id"] for t in response.json()["templates"]]
    assert "witherwild" in ids
    assert "blank" not in ids


def test_new_wizard_starts_at_pitch(tmp_path: Path) -> None:
    body = _build_client(tmp_path).get("/campaigns/c1/wizard").json()

    assert body["current_step"] == 0
    assert body["step_key"] == "pitch"
    assert body["completed_steps"] == []
    assert body["can_proceed"] is False


def test_next_is_refused_until_gate_passes(tmp_path: Path) -> None:
    client = _build_client(tmp_path)

    refused = client.post("/campaigns/c1/wizard/next")
    client.post("/campaigns/c1/wizard/data", json={"key": "pitch", "value": PITCH})
    advanced = client.post("/campaigns/c1/wizard/next")

    assert refused.status_code == 409
    assert advanced.status_code == 200
    assert advanced.json()["current_step"] == 1
    assert advanced.json()["completed_steps"] == [0]
    draft = json.loads(config.resolve_frame_path("c1", tmp_path / "data").read_text(encoding="utf-8"))
    assert draft["pitch"] == PITCH
    assert draft["status"] == "draft"


def test_unknown_field_is_rejected(tmp_path: Path) -> None:
    response = _build_client(tmp_path).post(
        "/campaigns/c1/wizard/data", json={"key": "dragons", "value": "many"}
    )

    assert response.status_code == 400


def test_goto_only_reached_steps(tmp_path: Path) -> None:
    client = _build_client(tmp_path)
    client.post("/campaigns/c1/wizard/data", json={"key": "pitch", "value": PITCH})
    client.post("/campaigns/c1/wizard/next")

    assert client.post("/campaigns/c1/wizard/goto", json={"step": 5}).status_code == 400
    assert client.post("/campaigns/c1/wizard/goto", json={"step": 99}).status_code == 422
    back = client.post("/campaigns/c1/wizard/goto", json={"step": 0})
    assert back.status_code == 200
    assert back.json()["current_step"] == 0


def test_load_template(tmp_path: Path) -> None:
    client = _build_client(tmp_path)

    missing = client.post("/campaigns/c1/wizard/template", json={"template_id": "nope"})
    loaded = client.post("/campaigns/c1/wizard/template", json={"template_id": "witherwild"})

    assert missing.status_code == 404
    assert loaded.json()["template_used"] == "witherwild"
    assert loaded.json()["frame"]["pitch"]
    assert loaded.json()["can_proceed"] is True


def test_position_survives_app_restart(tmp_path: Path) -> None:
    client = _build_client(tmp_path)
    client.post("/campaigns/c1/wizard/data", json={"key": "pitch", "value": PITCH})
    client.post("/campaigns/c1/wizard/next")

    body = _build_client(tmp_path).get("/campaigns/c1/wizard").json()

    assert body["current_step"] == 1
    assert body["frame"]["pitch"] == PITCH


def test_suggest_returns_parsed_list(tmp_path: Path) -> None:
    gateway = SequencedGateway(outputs=['["Grim", "Hopeful"]'])
    client = _build_client(tmp_path, gateway)

    response = client.post(
        "/campaigns/c1/wizard/suggest", json={"name": "Ashes of Vael", "step": "tone_and_feel"}
    )

    assert response.status_code == 200
    assert response.json() == {"step": "tone_and_feel", "suggestion": ["Grim", "Hopeful"]}
    assert '"Ashes of Vael"' in gateway.prompts[0]


def test_suggest_generation_error_is_bad_gateway(tmp_path: Path) -> None:
    gateway = SequencedGateway(outputs=[GenerationError("Authentication failed")])

    response = _build_client(tmp_path, gateway).post("/campaigns/c1/wizard/suggest", json={})

    assert response.status_code == 502
    assert "Authentication failed" in response.json()["detail"]


def test_complete_generates_content_and_locks_wizard(tmp_path: Path) -> None:
    client = _build_client(tmp_path)
    client.post("/campaigns/c1/wizard/template", json={"template_id": "witherwild"})

    response = client.post("/campaigns/c1/wizard/complete", json={"name": "Ashes of Vael"})

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["npcs"] == 5
    assert summary["locations"] == 4
    assert summary["lore"] == 3
    assert summary["encounters"] == 2
    assert summary["world_map"] is True
    assert summary["failures"] == []
    assert len(list((tmp_path / "data" / "campaigns" / "c1" / "npcs").glob("*.json"))) == 5
    assert client.get("/campaigns/c1/wizard").json()["is_complete"] is True
    assert client.post("/campaigns/c1/wizard/next").status_code == 409


def test_complete_without_api_key_uses_offline_content(tmp_path: Path) -> None:
    gateway = SequencedGateway()
    client = _build_client(tmp_path, gateway, api_key="")

    response = client.post("/campaigns/c1/wizard/complete", json={})

    assert response.status_code == 200
    assert response.json()["summary"]["npcs"] == 5
    assert gateway.prompts == []


def test_finalize_failure_returns_bad_gateway(tmp_path: Path, monkeypatch) -> None:
    app = _build_app(tmp_path)
    client = TestClient(app)

    def fail(campaign_id, payload):
        raise OSError("disk full")

    monkeypatch.setattr(app.state.frame_store, "finalize", fail)
    response = client.post("/campaigns/c1/wizard/complete", json={})

    assert response.status_code == 502
    assert "disk full" in response.json()["detail"]
    assert not (tmp_path / "data" / "campaigns" / "c1" / "npcs").exists()


def test_list_field_accepts_a_single_string(tmp_path: Path) -> None:
    response = _build_client(tmp_path).post(
        "/campaigns/c1/wizard/data", json={"key": "tone_and_feel", "value": "Grim"}
    )

    assert response.status_code == 200
    assert response.json()["frame"]["tone_and_feel"] == ["Grim"]
