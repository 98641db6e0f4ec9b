"""Text normalization applied to both sides of a golden comparison."""

from __future__ import annotations

import re
from typing import Callable

Sanitizer = Callable[[str], str]

VALUE_PLACEHOLDER = "<VALUE>"

# Identity hashes (``@1b6d3586``), hex and decimal literals. Digits that are
# part of an identifier (``JVM_IR2``, ``x1``) are not values.
VALUE_PATTERN = re.compile(
    r"@[0-9a-fA-F]+\b|(?<![\w.])(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?)(?!\w)"
)

_TEMPLATE_TOKEN = re.compile(re.escape(VALUE_PLACEHOLDER) + "|" + VALUE_PATTERN.pattern)

_LINE_SEPARATORS = re.compile(r"\r\n|\r")


def identity(text: str) -> str:
    return text


def convert_line_separators(text: str) -> str:
    return _LINE_SEPARATORS.sub("\n", text)


def trim_trailing_whitespaces_and_add_newline_at_eof(text: str) -> str:
    trimmed = "\n".join(line.rstrip() for line in text.split("\n"))
    if not trimmed or trimmed.endswith("\n"):
        return trimmed
    return trimmed + "\n"


def default_sanitize(text: str) -> str:
    """Trim trailing whitespace, unify line endings, end with one newline.

    Empty (or whitespace-only) text stays empty.
    """
    return trim_trailing_whitespaces_and_add_newline_at_eof(
        convert_line_separators(text.rstrip())
    )


def apply_default_and_custom_sanitizer(text: str, sanitizer: Sanitizer = identity) -> str:
    """Default normalization first, then the caller's transform."""
    return sanitizer(default_sanitize(text))


class ValueAgnosticSanitizer:
    """Compare text by shape, ignoring concrete literal values.

    The golden template replaces every literal value of the actual text with
    :data:`VALUE_PLACEHOLDER`. When comparing, the actual text gets a
    placeholder exactly where the golden file has one, so golden lines that
    spell a value out are still compared literally.
    """

    def __init__(self, actual: str):
        self.actual = actual

    def generate_expected_text(self) -> str:
        """Sanitized template of the actual text, used to bootstrap a golden file."""
        return VALUE_PATTERN.sub(VALUE_PLACEHOLDER, apply_default_and_custom_sanitizer(self.actual))

    def generate_sanitized_actual_text_based_on_expect_placeholders(self, expected: str) -> str:
        """Mask actual values at the positions the golden text holds placeholders.

        Values are paired with golden tokens (placeholder or literal) by
        ordinal position; surplus actual values are kept verbatim.
        """
        placeholder_slots = [
            token.group(0) == VALUE_PLACEHOLDER for token in _TEMPLATE_TOKEN.finditer(expected)
        ]
        index = 0

        def mask(match: re.Match[str]) -> str:
            nonlocal index
            slot = index
            index += 1
            if slot < len(placeholder_slots) and placeholder_slots[slot]:
                return VALUE_PLACEHOLDER
            return match.group(0)

        return VALUE_PATTERN.sub(mask, apply_default_and_custom_sanitizer(self.actual))
