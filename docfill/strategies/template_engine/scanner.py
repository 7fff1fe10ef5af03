"""Placeholder scanning.

A placeholder is an opening brace, one or more characters that are not a
closing brace, and a closing brace: ``{object_name}``. The key is the
text between the braces with surrounding whitespace removed. There is no
escape syntax for literal braces.
"""

import re
from collections.abc import Iterator

from docfill.strategies.template_engine.models import PlaceholderMatch

PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")


def scan_placeholders(text: str | None) -> Iterator[PlaceholderMatch]:
    """Yield every placeholder in ``text``, left to right, non-overlapping."""
    if not text:
        return
    for match in PLACEHOLDER_PATTERN.finditer(text):
        yield PlaceholderMatch(
            start=match.start(),
            end=match.end(),
            text=match.group(0),
            key=match.group(1).strip(),
        )


def contains_placeholder(text: str | None) -> bool:
    """Return True if ``text`` holds at least one placeholder."""
    return bool(text) and PLACEHOLDER_PATTERN.search(text) is not None
