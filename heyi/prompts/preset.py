"""
Preset loading and option merging.

A preset is a JSON file bundling a prompt with default options:

    {
      "prompt": "Summarize for {{audience}}",
      "model": "openai/gpt-4o",
      "format": "array",
      "schema": "z.string()",
      "crawler": "chrome",
      "files": ["notes.txt"],
      "urls": ["https://example.com"]
    }

Scalar options resolve as flag, then preset, then built-in default. List
options concatenate the preset's entries with the flag's entries.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..config import AppConfig
from ..constants import DEFAULT_FORMAT, OUTPUT_FORMATS
from ..errors import PresetError, PresetNotFoundError


logger = logging.getLogger(__name__)


PRESET_STRING_FIELDS = ("prompt", "model", "format", "schema", "crawler")
PRESET_LIST_FIELDS = ("files", "urls")


@dataclass
class PresetConfig:
    """Options stored in a preset file.

    Attributes:
        prompt: Prompt template, if the preset carries one.
        model: Model identifier.
        format: Output format (one of OUTPUT_FORMATS).
        schema: Schema description for object/array formats.
        crawler: URL retrieval strategy or browser path.
        files: File context sources.
        urls: URL context sources.
    """
    prompt: Optional[str] = None
    model: Optional[str] = None
    format: Optional[str] = None
    schema: Optional[str] = None
    crawler: Optional[str] = None
    files: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PresetConfig":
        """Create a PresetConfig from a validated dictionary, ignoring unknown keys."""
        return cls(
            prompt=data.get("prompt"),
            model=data.get("model"),
            format=data.get("format"),
            schema=data.get("schema"),
            crawler=data.get("crawler"),
            files=list(data.get("files") or []),
            urls=list(data.get("urls") or []),
        )


@dataclass
class FlagOptions:
    """Options given on the command line.

    Scalar fields are None when the flag was not passed at all, so a flag
    whose value equals the default still counts as explicit.
    """
    model: Optional[str] = None
    format: Optional[str] = None
    schema: Optional[str] = None
    crawler: Optional[str] = None
    files: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)


@dataclass
class ResolvedOptions:
    """Final options for one invocation."""
    model: str
    format: str
    schema: Optional[str]
    crawler: str
    files: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    variables: dict[str, str] = field(default_factory=dict)


def validate_preset(data: Any) -> tuple[bool, list[str]]:
    """Validate a parsed preset document.

    Args:
        data: The decoded JSON value.

    Returns:
        A tuple of (is_valid, errors).
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        return False, ["Preset must be a JSON object"]

    for name in PRESET_STRING_FIELDS:
        if name in data and not isinstance(data[name], str):
            errors.append(f"Field '{name}' must be a string")

    fmt = data.get("format")
    if isinstance(fmt, str) and fmt not in OUTPUT_FORMATS:
        errors.append(
            f"Field 'format' has invalid value '{fmt}'. "
            f"Valid values are: {', '.join(OUTPUT_FORMATS)}"
        )

    for name in PRESET_LIST_FIELDS:
        if name not in data:
            continue
        values = data[name]
        if not isinstance(values, list):
            errors.append(f"Field '{name}' must be an array")
            continue
        for i, value in enumerate(values):
            if not isinstance(value, str):
                errors.append(f"Field '{name}[{i}]' must be a string")

    return len(errors) == 0, errors


def parse_preset(text: str, path: str = "<preset>") -> PresetConfig:
    """Parse preset JSON text.

    Raises:
        PresetError: If the JSON is malformed or validation fails.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PresetError(path, [f"Invalid JSON: {e.msg}"], line=e.lineno, column=e.colno) from e

    is_valid, errors = validate_preset(data)
    if not is_valid:
        raise PresetError(path, errors)

    return PresetConfig.from_dict(data)


def load_preset(path: str) -> PresetConfig:
    """Load a preset file.

    Args:
        path: Path to the preset JSON file.

    Returns:
        The parsed PresetConfig.

    Raises:
        PresetNotFoundError: If the file does not exist.
        PresetError: If the file cannot be read or is malformed.
    """
    preset_path = Path(path).expanduser()
    try:
        text = preset_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise PresetNotFoundError(path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise PresetError(path, [str(e)]) from e

    preset = parse_preset(text, path)
    logger.debug(f"Loaded preset '{path}'")
    return preset


def merge_options(
    flags: FlagOptions,
    preset: Optional[PresetConfig],
    config: AppConfig,
) -> ResolvedOptions:
    """Resolve the options for one invocation.

    Args:
        flags: Options from the command line.
        preset: Loaded preset, or None outside preset mode.
        config: Environment configuration supplying the built-in defaults.

    Returns:
        The resolved options.
    """
    preset = preset or PresetConfig()

    def pick(flag_value: Optional[str], preset_value: Optional[str], default):
        if flag_value is not None:
            return flag_value
        if preset_value is not None:
            return preset_value
        return default

    return ResolvedOptions(
        model=pick(flags.model, preset.model, config.model),
        format=pick(flags.format, preset.format, DEFAULT_FORMAT),
        schema=pick(flags.schema, preset.schema, None),
        crawler=pick(flags.crawler, preset.crawler, config.crawler),
        files=[*preset.files, *flags.files],
        urls=[*preset.urls, *flags.urls],
        variables=dict(flags.variables),
    )
