"""Utility helpers."""

from .validation import safe_file_stem, sanitize_log_message

__all__ = ["safe_file_stem", "sanitize_log_message"]
