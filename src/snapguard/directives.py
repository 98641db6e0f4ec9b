"""In-text directives: ``// NAME`` and ``// NAME: value`` comment lines.

Parsing scans the whole artifact. Rewriting (adding or removing a directive
line) is limited to the leading run of ``//`` lines, modelled by
:class:`HeaderBlock`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator

DIRECTIVE_PATTERN = re.compile(r"^//\s*([A-Z_0-9]+)(:[ \t]*(.*))?$", re.MULTILINE)

COMMENT_PREFIX = "//"


class Directives:
    """Ordered multimap from directive name to its values.

    A bare directive (``// NAME``) is stored with value ``None``. Names keep
    the order they were first seen in; values keep file order.
    """

    def __init__(self) -> None:
        self._values: dict[str, list[str | None]] = {}

    def put(self, name: str, value: str | None) -> None:
        self._values.setdefault(name, []).append(value)

    def contains(self, name: str) -> bool:
        return name in self._values

    __contains__ = contains

    def get(self, name: str) -> str | None:
        """First value recorded for ``name`` (None if absent or bare)."""
        values = self._values.get(name)
        return values[0] if values else None

    def last(self, name: str) -> str | None:
        values = self._values.get(name)
        return values[-1] if values else None

    def list_values(self, name: str) -> list[str]:
        """All values of ``name``, comma-separated items split out.

        ``// IGNORE_BACKEND: JVM, JS`` gives ``["JVM", "JS"]``.
        """
        result: list[str] = []
        for value in self._values.get(name, []):
            if value is None:
                continue
            result.extend(item.strip() for item in value.split(",") if item.strip())
        return result

    def names(self) -> list[str]:
        return list(self._values)

    def items(self) -> Iterator[tuple[str, str | None]]:
        for name, values in self._values.items():
            for value in values:
                yield name, value

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"Directives({self._values!r})"


def parse_directives(text: str, directives: Directives | None = None) -> Directives:
    """Collect every directive line in ``text``.

    Pass an existing ``directives`` to accumulate several files into one
    result. Never fails: text without directives yields an empty map.
    """
    if directives is None:
        directives = Directives()
    for match in DIRECTIVE_PATTERN.finditer(text):
        value = match.group(3)
        directives.put(match.group(1), value.strip() if value is not None else None)
    return directives


def directive_name(prefix: str) -> str:
    """Directive name of an ignore prefix: ``"// IGNORE_BACKEND: "`` -> ``IGNORE_BACKEND``."""
    name = prefix.strip()
    if name.startswith(COMMENT_PREFIX):
        name = name[len(COMMENT_PREFIX):]
    return name.strip().rstrip(":").strip()


@dataclass
class HeaderBlock:
    """Leading comment run of a test artifact and the text that follows it.

    ``lines`` hold the header lines without their terminators. The header is
    every line from offset 0 that starts with ``//``.
    """

    lines: list[str] = field(default_factory=list)
    body: str = ""
    # False when the last header line was also the last line of the file
    # and had no line terminator.
    terminated: bool = True

    @classmethod
    def parse(cls, text: str) -> HeaderBlock:
        lines: list[str] = []
        pos = 0
        terminated = True
        while text.startswith(COMMENT_PREFIX, pos):
            end = text.find("\n", pos)
            if end < 0:
                lines.append(text[pos:])
                pos = len(text)
                terminated = False
                break
            lines.append(text[pos:end])
            pos = end + 1
        return cls(lines=lines, body=text[pos:], terminated=terminated)

    def has(self, line: str) -> bool:
        return line in self.lines

    def add(self, line: str) -> bool:
        """Append ``line`` at the end of the header. False if already present."""
        if self.has(line):
            return False
        self.lines.append(line)
        return True

    def remove(self, line: str) -> bool:
        """Drop every header line equal to ``line``. False if none matched."""
        kept = [existing for existing in self.lines if existing != line]
        removed = len(kept) != len(self.lines)
        self.lines = kept
        return removed

    def render(self) -> str:
        if not self.lines:
            return self.body
        header = "\n".join(self.lines)
        if self.terminated or self.body:
            header += "\n"
        return header + self.body


def insert_directive(text: str, directive: str) -> str:
    """Append ``directive`` to the leading comment run of ``text``.

    Creates the run when the text does not start with a comment. Returns
    ``text`` unchanged when the directive is already in the header.
    """
    block = HeaderBlock.parse(text)
    if not block.add(directive.rstrip("\n")):
        return text
    block.terminated = True
    return block.render()


def remove_directive(text: str, directive: str) -> str:
    """Remove ``directive`` from the leading comment run of ``text``.

    Matching is exact, backend name included. Lines outside the header are
    never touched. Returns ``text`` unchanged when nothing matched.
    """
    block = HeaderBlock.parse(text)
    if not block.remove(directive.rstrip("\n")):
        return text
    return block.render()


def remove_directive_value(text: str, name: str, value: str) -> str:
    """Drop ``value`` from every ``// NAME: a, b`` list in the leading comment run.

    A line left with no values is removed. Other entries of the list are kept
    in order. Returns ``text`` unchanged when no header line lists ``value``.
    """
    block = HeaderBlock.parse(text)
    changed = False
    kept: list[str] = []
    for line in block.lines:
        match = DIRECTIVE_PATTERN.fullmatch(line)
        if match is None or match.group(1) != name or match.group(3) is None:
            kept.append(line)
            continue
        values = [item.strip() for item in match.group(3).split(",") if item.strip()]
        remaining = [item for item in values if item != value]
        if len(remaining) == len(values):
            kept.append(line)
            continue
        changed = True
        if remaining:
            kept.append(f"{COMMENT_PREFIX} {name}: {', '.join(remaining)}")
    if not changed:
        return text
    block.lines = kept
    return block.render()
