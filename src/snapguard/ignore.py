"""Decide whether a test artifact is declared ignored for a backend."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .backends import IGNORE_BACKEND_DIRECTIVE_PREFIXES, TargetBackend
from .directives import DIRECTIVE_PATTERN, Directives, directive_name, parse_directives
from .fileio import read_text


def ignored_backends(directives: Directives, prefixes: Sequence[str]) -> list[str]:
    """Backend names listed by any of the ``prefixes`` directives, in prefix order."""
    names: list[str] = []
    for prefix in prefixes:
        names.extend(directives.list_values(directive_name(prefix)))
    return names


def is_ignored_target(
    target: TargetBackend,
    text: str,
    prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    *,
    include_any: bool = True,
) -> bool:
    """True when ``text`` ignores ``target`` under any of ``prefixes``.

    With ``include_any``, an ``ANY`` entry ignores every backend.
    """
    ignored = ignored_backends(parse_directives(text), prefixes)
    if target.name in ignored:
        return True
    return include_any and TargetBackend.ANY.name in ignored


def matching_directive(
    target: TargetBackend,
    text: str,
    prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    *,
    include_any: bool = True,
) -> str | None:
    """First directive (``prefix + backend``) that ignores ``target``, if any."""
    directives = parse_directives(text)
    candidates = [target.name]
    if include_any and target is not TargetBackend.ANY:
        candidates.append(TargetBackend.ANY.name)
    for prefix in prefixes:
        listed = directives.list_values(directive_name(prefix))
        for name in candidates:
            if name in listed:
                return prefix + name
    return None


def matching_directive_lines(
    target: TargetBackend,
    text: str,
    prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    *,
    include_any: bool = True,
) -> list[str]:
    """Directive lines of ``text``, verbatim, that ignore ``target``.

    Unlike :func:`matching_directive` this reports the line as written, so
    ``// IGNORE_BACKEND: JVM, JS`` and ``// IGNORE_BACKEND: ANY`` come back
    unchanged.
    """
    names = {directive_name(prefix) for prefix in prefixes}
    candidates = {target.name}
    if include_any:
        candidates.add(TargetBackend.ANY.name)

    lines: list[str] = []
    for match in DIRECTIVE_PATTERN.finditer(text):
        if match.group(1) not in names or match.group(3) is None:
            continue
        listed = {item.strip() for item in match.group(3).split(",")}
        line = match.group(0).rstrip()
        if listed & candidates and line not in lines:
            lines.append(line)
    return lines


def is_ignored_file(
    target: TargetBackend,
    path: Path,
    prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    *,
    include_any: bool = True,
) -> bool:
    return is_ignored_target(target, read_text(Path(path)), prefixes, include_any=include_any)


@dataclass(frozen=True)
class IgnoreResolver:
    """Ignore resolution for one family of directive prefixes.

    With ``require_compatible_agreement`` a test counts as ignored only when
    it is ignored for both the backend and the backend it is compatible
    with. A failure that shows up only on the compatible backend is then
    reported instead of being masked.
    """

    prefixes: tuple[str, ...] = IGNORE_BACKEND_DIRECTIVE_PREFIXES
    require_compatible_agreement: bool = False

    def is_ignored(self, target: TargetBackend, text: str) -> bool:
        ignored = is_ignored_target(target, text, self.prefixes)
        if ignored and self.require_compatible_agreement:
            ignored = is_ignored_target(target.compatible_with, text, self.prefixes)
        return ignored

    def is_ignored_file(self, target: TargetBackend, path: Path) -> bool:
        return self.is_ignored(target, read_text(Path(path)))
