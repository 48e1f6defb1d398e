"""
Placeholder scanning and substitution for prompt templates.

Templates reference variables with double braces, optionally annotated with
a description used when asking the user for a value:

    Translate this into {{language}}.
    Write for {{ audience description="Who is the reader?" }}.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional


logger = logging.getLogger(__name__)


# `name="..."` is accepted as an alias of `description="..."`
PLACEHOLDER_PATTERN = re.compile(
    r'\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*'
    r'(?:(?:description|name)\s*=\s*"([^"]*)")?'
    r'\s*\}\}'
)


@dataclass(frozen=True)
class Placeholder:
    """A variable referenced by a template.

    Attributes:
        name: Identifier inside the braces.
        description: Optional human-readable hint for interactive prompting.
    """
    name: str
    description: Optional[str] = None

    @property
    def label(self) -> str:
        """Text shown when asking the user for this variable."""
        if self.description:
            return f"{self.description} ({self.name})"
        return self.name


def extract_placeholders(template: str) -> list[Placeholder]:
    """Extract the distinct placeholders of a template in order of first use.

    When a name occurs more than once, the description of its first
    occurrence wins.

    Args:
        template: The prompt template.

    Returns:
        List of Placeholder objects, one per distinct name.

    Example:
        >>> extract_placeholders('{{a}} {{b description="Bee"}} {{a}}')
        [Placeholder(name='a', description=None), Placeholder(name='b', description='Bee')]
    """
    placeholders: list[Placeholder] = []
    seen: set[str] = set()

    for match in PLACEHOLDER_PATTERN.finditer(template):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        placeholders.append(Placeholder(name=name, description=match.group(2) or None))

    return placeholders


def find_missing(template: str, variables: Mapping[str, str]) -> list[Placeholder]:
    """Return the template placeholders that have no value in `variables`."""
    return [p for p in extract_placeholders(template) if p.name not in variables]


def resolve_missing(
    missing: Iterable[Placeholder],
    ask: Callable[[Placeholder], str],
) -> dict[str, str]:
    """Ask for a value for each missing placeholder, one at a time.

    Args:
        missing: Placeholders without a value, in template order.
        ask: Callable that asks the user for one placeholder and returns the
            answer. Empty answers are kept as empty strings.

    Returns:
        Mapping of the newly collected values.
    """
    collected: dict[str, str] = {}
    for placeholder in missing:
        if placeholder.name in collected:
            continue
        collected[placeholder.name] = ask(placeholder)
        logger.debug(f"Collected value for variable '{placeholder.name}'")
    return collected


def substitute(template: str, variables: Mapping[str, str]) -> str:
    """Replace known placeholders with their values.

    Replacement happens in a single pass, so placeholder syntax inside a
    substituted value is never expanded. Placeholders whose name is not in
    `variables` are left untouched.

    Args:
        template: The prompt template.
        variables: Mapping of variable names to values.

    Returns:
        The template with known placeholders replaced.

    Example:
        >>> substitute("Hi {{who}}, {{other}}", {"who": "Ada"})
        'Hi Ada, {{other}}'
    """
    def replace_var(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace_var, template)
