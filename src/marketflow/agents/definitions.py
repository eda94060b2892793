"""Marketing agent catalogue and configuration model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AgentConfig(BaseModel):
    """User-editable configuration of one marketing agent."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    name: str = Field(..., min_length=1, description="Display name")
    description: str | None = None
    active: bool = True
    model: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=1.0)
    max_tokens: int | None = Field(None, ge=1, le=8192)
    properties: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class AgentDefinition:
    """A marketing agent in the fixed six-step pipeline."""

    type: str
    label: str
    emoji: str
    color: str
    description: str
    tools: tuple[str, ...]
    default_config: AgentConfig
    category: str = "marketing"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "label": self.label,
            "emoji": self.emoji,
            "category": self.category,
            "color": self.color,
            "description": self.description,
            "tools": list(self.tools),
            "defaultConfig": self.default_config.model_dump(by_alias=True, exclude_none=True),
        }


MARKETING_AGENTS: tuple[AgentDefinition, ...] = (
    AgentDefinition(
        type="strategy",
        label="Strategy Agent",
        emoji="🧠",
        color="blue",
        description="Plans content strategy, tone, and calendar",
        tools=(
            "OpenAI GPT-4",
            "Claude",
            "Gemini",
            "Google Calendar",
            "Notion",
            "Trello",
            "Airtable",
        ),
        default_config=AgentConfig(
            name="Content Strategy Planner",
            description="Plans content strategy, tone, and calendar for marketing campaigns",
            model="gpt-4",
            temperature=0.7,
            max_tokens=2048,
            properties={
                "planningHorizon": "3 months",
                "contentTypes": ["blog", "social", "email", "video"],
                "targetAudience": "professionals",
                "contentGoals": ["engagement", "conversion", "brand awareness"],
            },
        ),
    ),
    AgentDefinition(
        type="copyGen",
        label="Copy Generation Agent",
        emoji="✍️",
        color="amber",
        description="Generates captions, hooks, hashtags",
        tools=("OpenAI GPT-4", "Claude", "Gemini", "RiteTag API", "Grammarly API"),
        default_config=AgentConfig(
            name="Content Copy Generator",
            description="Generates engaging captions, hooks, and hashtags for marketing content",
            model="gpt-4",
            temperature=0.8,
            max_tokens=1024,
            properties={
                "toneOfVoice": "professional",
                "contentLength": "medium",
                "includeHashtags": True,
                "hashtagCount": 5,
                "includeEmojis": True,
            },
        ),
    ),
    AgentDefinition(
        type="design",
        label="Design Agent",
        emoji="🎨",
        color="green",
        description="Creates static visuals, carousels, memes",
        tools=(
            "Canva API",
            "DALL·E",
            "Midjourney",
            "Stable Diffusion",
            "Remove.bg",
            "Cleanup.pictures",
            "Brandfetch API",
        ),
        default_config=AgentConfig(
            name="Visual Content Designer",
            description="Creates static visuals, carousels, and memes for marketing campaigns",
            properties={
                "designStyle": "modern",
                "colorPalette": "brand",
                "imageRatio": "1:1",
                "includeText": True,
                "textPlacement": "center",
                "outputFormats": ["png", "jpg"],
            },
        ),
    ),
    AgentDefinition(
        type="videoGen",
        label="Video Generation Agent",
        emoji="🎬",
        color="red",
        description="Generates or edits short videos, reels",
        tools=(
            "Descript API",
            "Runway ML API",
            "Lumen5",
            "Pictory",
            "ElevenLabs",
            "Play.ht",
            "Synthesia",
            "HeyGen",
        ),
        default_config=AgentConfig(
            name="Video Content Creator",
            description="Generates or edits short videos and reels for marketing campaigns",
            properties={
                "videoDuration": "30 seconds",
                "resolution": "1080p",
                "aspectRatio": "9:16",
                "includeSubtitles": True,
                "includeVoiceover": True,
                "voiceGender": "female",
                "musicType": "upbeat",
            },
        ),
    ),
    AgentDefinition(
        type="approval",
        label="Approval Agent",
        emoji="✅",
        color="purple",
        description="Routes drafts for internal/client approval",
        tools=(
            "Slack API",
            "Discord API",
            "Gmail API",
            "Notion",
            "Trello",
            "Airtable",
            "Google Sheets",
        ),
        default_config=AgentConfig(
            name="Content Approval Manager",
            description="Routes drafts for internal and client approval",
            properties={
                "approvalWorkflow": "sequential",
                "approvers": ["internal-team", "client"],
                "notificationChannel": "slack",
                "reminderFrequency": "24 hours",
                "autoApproveAfter": "72 hours",
            },
        ),
    ),
    AgentDefinition(
        type="scheduler",
        label="Scheduler Agent",
        emoji="📆",
        color="indigo",
        description="Schedules and posts content across platforms",
        tools=(
            "Buffer API",
            "Hootsuite API",
            "Meta Graph API",
            "Twitter API",
            "LinkedIn API",
            "YouTube API",
            "TikTok API",
        ),
        default_config=AgentConfig(
            name="Content Publishing Scheduler",
            description="Schedules and posts content across multiple platforms",
            properties={
                "platforms": ["instagram", "facebook", "twitter", "linkedin"],
                "postFrequency": "optimal",
                "timeZone": "UTC",
                "bestTimeToPost": True,
                "recycleContent": False,
            },
        ),
    ),
)

AGENT_TYPES: tuple[str, ...] = tuple(a.type for a in MARKETING_AGENTS)

# One toggle per gap between consecutive agents
CONNECTION_COUNT = len(MARKETING_AGENTS) - 1


def get_agent(agent_type: str) -> AgentDefinition | None:
    for agent in MARKETING_AGENTS:
        if agent.type == agent_type:
            return agent
    return None


def default_configs() -> dict[str, AgentConfig]:
    """Fresh, independently mutable copies of every default config."""
    return {a.type: a.default_config.model_copy(deep=True) for a in MARKETING_AGENTS}
