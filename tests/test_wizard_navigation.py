from __future__ import annotations

from conftest import MemoryCheckpoint, MemoryDraftStore

from framesmith.wizard.builder import CampaignWizard
from framesmith.wizard.state import LAST_DATA_STEP, REVIEW_STEP


def test_next_step_grows_completed_steps_without_duplicates() -> None:
    wizard = CampaignWizard("c1")
    previous: set = set()

    for _ in range(20):
        wizard.next_step()
        completed = set(wizard.completed_steps)
        assert len(completed) == len(wizard.completed_steps)
        assert completed >= previous
        assert wizard.current_step <= LAST_DATA_STEP
        previous = completed

    assert wizard.current_step == LAST_DATA_STEP
    assert sorted(wizard.completed_steps) == list(range(LAST_DATA_STEP + 1))


def test_next_step_writes_draft_with_advanced_index() -> None:
    store = MemoryDraftStore()
    wizard = CampaignWizard("c1", draft_store=store)
    wizard.update_data("pitch", "A long enough pitch for the gate.")

    wizard.next_step()

    campaign_id, snapshot = store.writes[-1]
    assert campaign_id == "c1"
    assert snapshot["current_step"] == 1
    assert snapshot["completed_steps"] == [0]
    assert snapshot["status"] == "draft"
    assert snapshot["pitch"] == "A long enough pitch for the gate."
    assert "template_used" not in snapshot


def test_previous_step_floors_at_zero() -> None:
    wizard = CampaignWizard("c1")
    wizard.next_step()

    wizard.previous_step()
    wizard.previous_step()

    assert wizard.current_step == 0


def test_navigation_mirrors_progress_to_local_cache() -> None:
    cache = MemoryCheckpoint()
    wizard = CampaignWizard("c1", local_cache=cache)

    wizard.next_step()
    wizard.next_step()
    wizard.previous_step()

    assert cache.records["c1"] == {"current_step": 1, "completed_steps": [0, 1]}
    assert "pitch" not in cache.records["c1"]


def test_save_draft_does_not_advance_or_complete() -> None:
    store = MemoryDraftStore()
    wizard = CampaignWizard("c1", draft_store=store)

    wizard.save_draft()

    assert wizard.current_step == 0
    assert wizard.completed_steps == []
    assert store.writes[-1][1]["current_step"] == 0


def test_review_is_reached_explicitly() -> None:
    wizard = CampaignWizard("c1")
    for _ in range(LAST_DATA_STEP):
        wizard.next_step()

    wizard.go_to_review()

    assert wizard.current_step == REVIEW_STEP
    assert wizard.can_visit(3)


def test_advance_limit_can_include_review_step() -> None:
    wizard = CampaignWizard("c1", advance_limit=REVIEW_STEP)
    for _ in range(REVIEW_STEP + 3):
        wizard.next_step()

    assert wizard.current_step == REVIEW_STEP


def test_can_visit_only_reached_steps() -> None:
    wizard = CampaignWizard("c1")
    wizard.next_step()
    wizard.next_step()

    assert wizard.can_visit(0)
    assert wizard.can_visit(2)
    assert not wizard.can_visit(3)


def test_complete_finalizes_and_clears_cache() -> None:
    store = MemoryDraftStore()
    cache = MemoryCheckpoint()
    wizard = CampaignWizard("c1", draft_store=store, local_cache=cache)
    wizard.update_data("pitch", "A long enough pitch for the gate.")
    wizard.next_step()

    frame = wizard.complete()

    assert wizard.is_complete
    assert cache.cleared == ["c1"]
    campaign_id, payload = store.finalized[0]
    assert campaign_id == "c1"
    assert payload["pitch"] == frame.pitch
    assert "current_step" not in payload


def test_complete_without_draft_store_still_locks_wizard() -> None:
    cache = MemoryCheckpoint()
    wizard = CampaignWizard("c1", local_cache=cache)
    wizard.update_data("pitch", "A long enough pitch for the gate.")

    frame = wizard.complete()

    assert wizard.is_complete
    assert frame.pitch == "A long enough pitch for the gate."
    assert cache.cleared == ["c1"]
