"""Built-in node palette for the workflow builder."""

from __future__ import annotations

from .models import NodeDefinition

CATEGORIES = ("ai", "data", "processing", "output", "sales", "marketing")

# Color tokens used by the canvas for each node type
NODE_COLORS = {
    "gpt4": "nodeBlue",
    "claude": "nodeBlue",
    "crm": "nodeGreen",
    "cms": "nodeGreen",
    "database": "nodeGreen",
    "email": "nodeAmber",
    "social": "nodeAmber",
    "custom-llm": "secondary",
    "webhook": "secondary",
    "filter": "primary",
    "transform": "primary",
    "merge": "primary",
}


def _definition(node_type: str, label: str, category: str, color: str, **data) -> NodeDefinition:
    default_data = {"label": label, "color": color}
    default_data.update(data)
    return NodeDefinition(
        type=node_type,
        label=label,
        category=category,
        color=color,
        default_data=default_data,
    )


NODE_DEFINITIONS: list[NodeDefinition] = [
    _definition(
        "gpt4",
        "GPT-4 Model",
        "ai",
        "nodeBlue",
        name="GPT-4 Sales Assistant",
        systemPrompt=(
            "You are a sales assistant. Analyze the lead data and generate a personalized "
            "outreach message. Focus on their industry needs and pain points."
        ),
        temperature=0.7,
        maxTokens=2048,
        modelVersion="gpt-4-turbo",
        streamResponse=True,
        responseFormat="text",
    ),
    _definition(
        "ad-generator",
        "Ad Generator",
        "marketing",
        "primary",
        name="Social Media Ad Creator",
        platform="facebook",
        adType="image",
        audience="professionals",
        cta="Learn More",
        industryVertical="technology",
    ),
    _definition(
        "campaign-planner",
        "Campaign Planner",
        "marketing",
        "nodeBlue",
        name="Marketing Campaign Planner",
        campaignType="product-launch",
        duration="4 weeks",
        channels=["email", "social", "paid-ads"],
        budget=5000,
        kpis=["leads", "conversions", "engagement"],
    ),
    _definition(
        "content-writer",
        "Content Writer",
        "marketing",
        "nodeAmber",
        name="AI Content Creator",
        contentType="blog-post",
        tone="professional",
        targetWordCount=1200,
        seoKeywords=[],
        includeImages=True,
    ),
    _definition(
        "lead-generator",
        "Lead Generator",
        "sales",
        "nodeGreen",
        name="Sales Lead Generator",
        source="google-sheets",
        targetAudience="enterprise",
        minimumScore=80,
        outputFormat="prioritized",
    ),
    _definition(
        "outreach-sequence",
        "Outreach Sequence",
        "sales",
        "nodeBlue",
        name="Sales Outreach Sequence",
        steps=3,
        channel="email",
        followUpDays=3,
        personalizationLevel="high",
    ),
    _definition(
        "sales-analytics",
        "Sales Analytics",
        "sales",
        "primary",
        name="Sales Performance Analyzer",
        metrics=["conversion", "revenue", "pipeline"],
        period="monthly",
        visualization="chart",
    ),
    _definition(
        "google-sheets",
        "Google Sheets",
        "data",
        "nodeGreen",
        name="Leads Data Source",
        sheetId="",
        range="A1:Z1000",
        authentication="oauth",
        refreshInterval="hourly",
    ),
    _definition(
        "claude",
        "Claude Agent",
        "ai",
        "nodeAmber",
        name="Claude Assistant",
        systemPrompt="You are Claude, an AI assistant for sales. Help generate sales content.",
        temperature=0.7,
        maxTokens=2048,
        streamResponse=True,
        responseFormat="text",
    ),
    _definition(
        "custom-llm",
        "Custom LLM",
        "ai",
        "secondary",
        name="Custom Language Model",
        modelUrl="https://api.company.ai/v1/models/sales-1",
        apiKey="",
        streamResponse=False,
        responseFormat="json",
    ),
    _definition(
        "crm",
        "CRM Connector",
        "data",
        "nodeGreen",
        name="Salesforce CRM",
        source="Salesforce",
        entity="Leads",
    ),
    _definition(
        "cms",
        "CMS Content",
        "data",
        "nodeGreen",
        name="WordPress Content",
        cmsType="WordPress",
        contentType="Blog Posts",
    ),
    _definition(
        "database",
        "Database",
        "data",
        "nodeGreen",
        name="PostgreSQL Database",
        database="PostgreSQL",
        table="customers",
    ),
    _definition(
        "filter",
        "Filter Data",
        "processing",
        "primary",
        name="Lead Filter",
        condition="leadScore > 70 && lastContact < 30 days",
    ),
    _definition(
        "transform",
        "Transform",
        "processing",
        "primary",
        name="Data Transformer",
        transformation="data => ({ ...data, score: data.score * 1.5 })",
    ),
    _definition(
        "merge",
        "Merge Data",
        "processing",
        "primary",
        name="Data Merger",
        mergeStrategy="combine",
    ),
    _definition(
        "email",
        "Email Generator",
        "output",
        "nodeAmber",
        name="Email Outreach",
        template="Outreach-B2B",
        sendVia="Marketing Cloud",
    ),
    _definition(
        "social",
        "Social Media Post",
        "output",
        "nodeAmber",
        name="LinkedIn Post",
        platform="LinkedIn",
        postType="Article",
    ),
    _definition(
        "webhook",
        "Webhook",
        "output",
        "secondary",
        name="API Webhook",
        webhookUrl="https://example.com/webhook",
        method="POST",
    ),
]

_BY_TYPE = {d.type: d for d in NODE_DEFINITIONS}


def get_definition(node_type: str) -> NodeDefinition | None:
    """Look up a palette definition by node type."""
    return _BY_TYPE.get(node_type)


def definitions_by_category() -> dict[str, list[NodeDefinition]]:
    """Group palette definitions by category, in palette order."""
    grouped: dict[str, list[NodeDefinition]] = {c: [] for c in CATEGORIES}
    for definition in NODE_DEFINITIONS:
        grouped.setdefault(definition.category, []).append(definition)
    return grouped


def node_color(node_type: str) -> str:
    """Color token for a node type; unknown types render as ``primary``."""
    return NODE_COLORS.get(node_type, "primary")
