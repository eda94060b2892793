"""Per-type node configuration models.

Each palette type has its own pydantic model keyed by the type string in
``NODE_DATA_MODELS``. Wire names are camelCase (``systemPrompt``) to match
the canvas JSON; extra keys are allowed so fields from other node types or
newer clients are preserved in storage.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from marketflow.errors import ValidationError


class NodeDataBase(BaseModel):
    """Fields shared by every node type."""

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    label: str | None = None
    color: str | None = None
    name: str | None = None


# AI model nodes


class AIModelData(NodeDataBase):
    system_prompt: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, ge=1, le=128000)
    model_version: str | None = None
    stream_response: bool | None = None
    response_format: Literal["text", "json", "markdown"] | None = None


class CustomLLMData(NodeDataBase):
    model_url: str | None = None
    api_key: str | None = None
    stream_response: bool | None = None
    response_format: Literal["text", "json", "markdown"] | None = None


# Data source nodes


class CRMData(NodeDataBase):
    source: str | None = None
    entity: str | None = None


class CMSData(NodeDataBase):
    cms_type: str | None = None
    content_type: str | None = None


class DatabaseData(NodeDataBase):
    database: str | None = None
    table: str | None = None


class GoogleSheetsData(NodeDataBase):
    sheet_id: str | None = None
    range: str | None = None
    authentication: str | None = None
    refresh_interval: str | None = None


# Processing nodes


class FilterData(NodeDataBase):
    condition: str | None = None


class TransformData(NodeDataBase):
    transformation: str | None = None


class MergeData(NodeDataBase):
    merge_strategy: str | None = None


# Output nodes


class EmailData(NodeDataBase):
    template: str | None = None
    send_via: str | None = None


class SocialData(NodeDataBase):
    platform: str | None = None
    post_type: str | None = None


class WebhookData(NodeDataBase):
    webhook_url: str | None = None
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] | None = None


# Marketing nodes


class AdGeneratorData(NodeDataBase):
    platform: str | None = None
    ad_type: str | None = None
    audience: str | None = None
    cta: str | None = None
    industry_vertical: str | None = None


class CampaignPlannerData(NodeDataBase):
    campaign_type: str | None = None
    duration: str | None = None
    channels: list[str] | None = None
    budget: float | None = Field(None, ge=0)
    kpis: list[str] | None = None


class ContentWriterData(NodeDataBase):
    content_type: str | None = None
    tone: str | None = None
    target_word_count: int | None = Field(None, ge=0)
    seo_keywords: list[str] | None = None
    include_images: bool | None = None


# Sales nodes


class LeadGeneratorData(NodeDataBase):
    source: str | None = None
    target_audience: str | None = None
    minimum_score: int | None = Field(None, ge=0, le=100)
    output_format: str | None = None


class OutreachSequenceData(NodeDataBase):
    steps: int | None = Field(None, ge=1)
    channel: str | None = None
    follow_up_days: int | None = Field(None, ge=0)
    personalization_level: str | None = None


class SalesAnalyticsData(NodeDataBase):
    metrics: list[str] | None = None
    period: str | None = None
    visualization: str | None = None


NODE_DATA_MODELS: dict[str, type[NodeDataBase]] = {
    "gpt4": AIModelData,
    "claude": AIModelData,
    "custom-llm": CustomLLMData,
    "crm": CRMData,
    "cms": CMSData,
    "database": DatabaseData,
    "google-sheets": GoogleSheetsData,
    "filter": FilterData,
    "transform": TransformData,
    "merge": MergeData,
    "email": EmailData,
    "social": SocialData,
    "webhook": WebhookData,
    "ad-generator": AdGeneratorData,
    "campaign-planner": CampaignPlannerData,
    "content-writer": ContentWriterData,
    "lead-generator": LeadGeneratorData,
    "outreach-sequence": OutreachSequenceData,
    "sales-analytics": SalesAnalyticsData,
}


def model_for(node_type: str) -> type[NodeDataBase]:
    """Return the data model for a node type (base model for unknown types)."""
    return NODE_DATA_MODELS.get(node_type, NodeDataBase)


def editable_fields(node_type: str) -> list[str]:
    """camelCase field names a property panel should offer for ``node_type``."""
    model = model_for(node_type)
    return [info.alias or name for name, info in model.model_fields.items()]


def validate_node_data(node_type: str, data: dict[str, Any]) -> dict[str, Any]:
    """Validate ``data`` against the model for ``node_type``.

    Only keys present in ``data`` are returned, spelled as the caller spelled
    them; nothing is defaulted in. Values come back coerced by the model.

    Raises:
        ValidationError: If a known field has the wrong type or range.
    """
    model = model_for(node_type)
    try:
        parsed = model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(
            f"Invalid data for node type '{node_type}'", errors=errors
        ) from e

    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        names[info.alias or name] = name
    extra = parsed.model_extra or {}
    result = {}
    for key, value in data.items():
        if key in names:
            result[key] = getattr(parsed, names[key])
        else:
            result[key] = extra.get(key, value)
    return result
