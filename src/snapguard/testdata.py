"""Helpers for locating and slicing test data files."""

from __future__ import annotations

import re
from enum import StrEnum
from pathlib import Path

from .fileio import read_text

FILE_DIRECTIVE_PATTERN = re.compile(r"^//\s*FILE:\s*(.*)$", re.MULTILINE)


class CommentType(StrEnum):
    ALL = "all"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


def replace_extension(path: Path, new_extension: str | None) -> Path:
    """``a/b.kt`` -> ``a/b.txt``; ``None`` drops the extension."""
    path = Path(path)
    # Only the last extension goes: ``a.kt.txt`` -> ``a.kt``.
    stem = path.name.rsplit(".", 1)[0] if "." in path.name else path.name
    return path.with_name(stem if new_extension is None else f"{stem}.{new_extension}")


def is_all_files_present_test(test_name: str) -> bool:
    return test_name.lower().startswith("allfilespresentin")


def is_multi_extension_name(name: str) -> bool:
    """True for names like ``test.fir.kt`` that carry more than one extension."""
    first_dot = name.find(".")
    if first_dot == -1:
        return False
    return name.find(".", first_dot + 1) != -1


def last_comments_in_text(
    text: str,
    comment_type: CommentType = CommentType.ALL,
    must_exist: bool = True,
    name: str = "<text>",
) -> list[str]:
    """Comments at the very end of ``text``, last one first.

    Collection stops at the first trailing element that is not a comment.
    Comment markers are removed and the content stripped.

    Raises:
        ValueError: If ``must_exist`` and the text does not end in a comment
            of ``comment_type``
    """
    comments: list[str] = []
    rest = text.rstrip()

    while rest:
        if rest.endswith("*/"):
            start = rest.rfind("/*")
            if start == -1:
                break
            if comment_type in (CommentType.ALL, CommentType.BLOCK_COMMENT):
                comments.append(rest[start + 2 : -2].strip())
            rest = rest[:start].rstrip()
            continue

        line_start = rest.rfind("\n") + 1
        last_line = rest[line_start:]
        marker = last_line.find("//")
        if marker == -1:
            break
        if comment_type in (CommentType.ALL, CommentType.LINE_COMMENT):
            comments.append(last_line[marker + 2 :].strip())
        rest = rest[: line_start + marker].rstrip()
        if last_line[:marker].strip():
            # Trailing comment after code on the same line.
            break

    if not comments and must_exist:
        raise ValueError(
            f"Test file '{name}' should end in a comment of type {comment_type.name}"
        )
    return comments


def last_comment_in_text(text: str, name: str = "<text>") -> str:
    return last_comments_in_text(text, CommentType.ALL, True, name)[0]


def split_test_files(text: str) -> list[tuple[str, str]]:
    """Split a multi-file test on ``// FILE: name`` markers.

    Each section's text starts at its marker line. Text without markers is a
    single unnamed section.
    """
    markers = list(FILE_DIRECTIVE_PATTERN.finditer(text))
    if not markers:
        return [("", text)]

    sections: list[tuple[str, str]] = []
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
        sections.append((marker.group(1).strip(), text[marker.start() : end]))
    return sections


def load_before_after_text(path: Path) -> list[str]:
    """Load the "before" and "after" sections of a two-file test.

    The marker line of each section is dropped and trailing whitespace
    trimmed.

    Raises:
        ValueError: If the file does not hold exactly two sections
    """
    sections = split_test_files(read_text(Path(path)))
    texts = []
    for _name, section in sections:
        first_line_end = section.find("\n")
        body = section[first_line_end + 1 :] if first_line_end != -1 else ""
        texts.append(body.rstrip())

    if len(texts) != 2:
        raise ValueError(f"Exactly two files expected in {path}, found {len(texts)}")
    return texts
