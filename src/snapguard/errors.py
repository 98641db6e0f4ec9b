"""Exception hierarchy for golden-file comparison and test lifecycle control.

Failures that a test runner should report as test failures derive from
:class:`SnapguardError`, which is itself an :class:`AssertionError`.
"""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Sequence


class SnapguardError(AssertionError):
    """Base class for test failures raised by snapguard."""


class MissingGoldenFileError(SnapguardError):
    """The expected golden artifact does not exist.

    ``generated`` is True when the sanitized actual text was written as a
    new baseline (local runs). In CI nothing is written.
    """

    def __init__(self, path: Path, *, generated: bool):
        self.path = path
        self.generated = generated
        if generated:
            message = f"Expected data file did not exist. Generating: {path}"
        else:
            message = f"Expected data file {path} did not exist"
        super().__init__(message)


class ContentMismatchError(SnapguardError):
    """Sanitized actual text differs from the golden artifact.

    Carries the payload external tooling needs to render a diff or offer an
    "accept new baseline" action: the golden file path, its raw bytes in
    ``encoding`` and the sanitized actual text.
    """

    def __init__(
        self,
        message: str,
        *,
        expected_file: Path,
        expected_bytes: bytes,
        actual: str,
        encoding: str = "utf-8",
    ):
        self.expected_file = expected_file
        self.expected_bytes = expected_bytes
        self.actual = actual
        self.encoding = encoding
        super().__init__(message)

    @property
    def file_name(self) -> str:
        return self.expected_file.name

    @property
    def expected(self) -> str:
        return self.expected_bytes.decode(self.encoding)

    def unified_diff(self) -> str:
        """Render a unified diff from the golden text to the actual text."""
        lines = difflib.unified_diff(
            self.expected.splitlines(keepends=True),
            self.actual.splitlines(keepends=True),
            fromfile=str(self.expected_file),
            tofile="actual",
        )
        return "".join(lines)


class SpuriousPassError(SnapguardError):
    """A test marked as ignored passed; its ignore directive is stale."""

    def __init__(self, directives: Sequence[str], path: Path | None = None):
        self.directives = tuple(directives)
        self.path = path
        joined = ", ".join(self.directives)
        super().__init__(
            f'Looks like this test can be unmuted. Remove "{joined}" directive.'
        )


class DirectiveRewriteError(SnapguardError):
    """Writing an ignore directive back into a test artifact failed.

    Always raised ``from`` the failure that triggered the rewrite so the
    original test failure stays visible.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to update directives in {path}: {reason}")


class ConfigError(RuntimeError):
    """Raised when the snapguard configuration file is invalid."""
