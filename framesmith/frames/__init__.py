from framesmith.frames.models import (
    Campaign,
    CampaignFrame,
    CampaignMechanic,
    Distinction,
    FreeText,
    Quest,
    SessionZero,
    Structured,
)
from framesmith.frames.templates import FrameTemplate, available_templates, get_template

__all__ = [
    "Campaign",
    "CampaignFrame",
    "CampaignMechanic",
    "Distinction",
    "FreeText",
    "Quest",
    "SessionZero",
    "Structured",
    "FrameTemplate",
    "available_templates",
    "get_template",
]
