"""
Prompt assembly for heyi.

Turns a prompt template, template variables, preset options and context
sources into the final prompt text sent to the model.
"""

from .builder import ContextBuilder, ContextSource, RetrievedContent, format_context
from .preset import (
    FlagOptions,
    PresetConfig,
    ResolvedOptions,
    load_preset,
    merge_options,
)
from .variables import (
    Placeholder,
    extract_placeholders,
    find_missing,
    resolve_missing,
    substitute,
)

__all__ = [
    "ContextBuilder",
    "ContextSource",
    "RetrievedContent",
    "format_context",
    "FlagOptions",
    "PresetConfig",
    "ResolvedOptions",
    "load_preset",
    "merge_options",
    "Placeholder",
    "extract_placeholders",
    "find_missing",
    "resolve_missing",
    "substitute",
]
