from framesmith.wizard.builder import CampaignWizard
from framesmith.wizard.checkpoints import FrameStoreError, JsonFrameStore, LocalCheckpointCache
from framesmith.wizard.state import LAST_DATA_STEP, REVIEW_STEP, STEP_KEYS, WizardState

__all__ = [
    "CampaignWizard",
    "FrameStoreError",
    "JsonFrameStore",
    "LocalCheckpointCache",
    "LAST_DATA_STEP",
    "REVIEW_STEP",
    "STEP_KEYS",
    "WizardState",
]
