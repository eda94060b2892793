"""Input validation and sanitization helpers."""

from __future__ import annotations

import re

# Workflow names become file names on export
SAFE_NAME_PATTERN = re.compile(r"[^\w\-]")
MAX_NAME_LENGTH = 50


def sanitize_log_message(message: str, sensitive_patterns: list[str] | None = None) -> str:
    """Sanitize a log message to remove sensitive data.

    Args:
        message: Message to sanitize
        sensitive_patterns: Additional patterns to redact

    Returns:
        Sanitized message with sensitive data redacted
    """
    result = message

    default_patterns = [
        (r"sk-ant-[a-zA-Z0-9_-]{40,}", "[REDACTED_API_KEY]"),  # Anthropic keys
        (r"sk-[a-zA-Z0-9_-]{20,}", "[REDACTED_API_KEY]"),  # OpenAI keys
        (r"ya29\.[a-zA-Z0-9_-]{20,}", "[REDACTED_OAUTH_TOKEN]"),  # Google OAuth
        (r'api[_-]?key["\']?\s*[:=]\s*["\']?[^"\'\s,}]+', "api_key=[REDACTED]"),
        (r'password["\']?\s*[:=]\s*["\']?[^"\'\s]+', "password=[REDACTED]"),
        (r'token["\']?\s*[:=]\s*["\']?[^"\'\s]+', "token=[REDACTED]"),
    ]

    for pattern, replacement in default_patterns:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE)

    if sensitive_patterns:
        for pattern in sensitive_patterns:
            result = re.sub(pattern, "[REDACTED]", result, flags=re.IGNORECASE)

    return result


def safe_file_stem(name: str, fallback: str = "workflow") -> str:
    """Turn a workflow name into a file-system safe stem."""
    stem = SAFE_NAME_PATTERN.sub("_", name.lower())
    return stem.strip("_")[:MAX_NAME_LENGTH] or fallback
