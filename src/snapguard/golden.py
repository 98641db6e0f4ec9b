"""Golden-file comparison.

Loads the expected artifact (bootstrapping it on local runs), sanitizes both
sides through the same pipeline and reports mismatches as a structured
:class:`~snapguard.errors.ContentMismatchError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .config import is_ci
from .errors import ContentMismatchError, MissingGoldenFileError
from .fileio import GOLDEN_ENCODING, atomic_write_text, read_text
from .sanitize import (
    Sanitizer,
    ValueAgnosticSanitizer,
    apply_default_and_custom_sanitizer,
    identity,
)

logger = logging.getLogger(__name__)

ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT = "Actual data differs from file content"


@dataclass(frozen=True)
class FileComparisonResult:
    """Outcome of comparing one golden file with the actual text."""

    expected_file: Path
    expected_text: str
    expected_sanitized_text: str
    actual_sanitized_text: str

    @property
    def does_equal(self) -> bool:
        return self.expected_sanitized_text == self.actual_sanitized_text


def try_load_expected_file(
    expected_file: Path,
    get_sanitized_actual_text: Callable[[], str],
    *,
    ci: bool | None = None,
) -> str:
    """Return the golden file's text.

    A missing golden file always fails. On a local run the sanitized actual
    text is written as the new baseline first, so it can be reviewed and
    committed; under CI nothing is written.

    Raises:
        MissingGoldenFileError: If ``expected_file`` does not exist
        OSError: If the file exists but cannot be read
    """
    expected_file = Path(expected_file)
    if not expected_file.exists():
        under_ci = is_ci() if ci is None else ci
        if under_ci:
            raise MissingGoldenFileError(expected_file, generated=False)
        atomic_write_text(expected_file, get_sanitized_actual_text())
        logger.warning("Generated missing golden file %s", expected_file)
        raise MissingGoldenFileError(expected_file, generated=True)
    return read_text(expected_file)


def compare_expect_file_with_actual_text(
    expected_file: Path,
    actual: str,
    sanitizer: Sanitizer = identity,
    *,
    ci: bool | None = None,
) -> FileComparisonResult:
    expected_file = Path(expected_file)

    def get_actual_sanitized_text() -> str:
        return apply_default_and_custom_sanitizer(actual, sanitizer)

    expected_text = try_load_expected_file(expected_file, get_actual_sanitized_text, ci=ci)
    expected_sanitized_text = apply_default_and_custom_sanitizer(expected_text, sanitizer)

    return FileComparisonResult(
        expected_file=expected_file,
        expected_text=expected_text,
        expected_sanitized_text=expected_sanitized_text,
        actual_sanitized_text=get_actual_sanitized_text(),
    )


def fail_if_not_equal(message: str, result: FileComparisonResult) -> None:
    """Raise :class:`ContentMismatchError` unless the result is equal."""
    if result.does_equal:
        return
    raise ContentMismatchError(
        f"{message}: {result.expected_file.name}",
        expected_file=result.expected_file.absolute(),
        expected_bytes=result.expected_text.encode(GOLDEN_ENCODING),
        actual=result.actual_sanitized_text,
        encoding=GOLDEN_ENCODING,
    )


def assert_equals_to_file(
    expected_file: Path,
    actual: str,
    sanitizer: Sanitizer = identity,
    *,
    message: str = ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT,
    ci: bool | None = None,
) -> None:
    fail_if_not_equal(
        message,
        compare_expect_file_with_actual_text(expected_file, actual, sanitizer, ci=ci),
    )


def compare_value_agnostic(
    expected_file: Path,
    actual: str,
    *,
    ci: bool | None = None,
) -> FileComparisonResult:
    """Compare by shape: golden ``<VALUE>`` placeholders match any literal value."""
    expected_file = Path(expected_file)
    sanitizer = ValueAgnosticSanitizer(actual)

    expected_text = try_load_expected_file(expected_file, sanitizer.generate_expected_text, ci=ci)
    expected_sanitized_text = apply_default_and_custom_sanitizer(expected_text)
    actual_sanitized_text = apply_default_and_custom_sanitizer(
        sanitizer.generate_sanitized_actual_text_based_on_expect_placeholders(
            expected_sanitized_text
        )
    )

    return FileComparisonResult(
        expected_file=expected_file,
        expected_text=expected_text,
        expected_sanitized_text=expected_sanitized_text,
        actual_sanitized_text=actual_sanitized_text,
    )


def assert_value_agnostic_equals_to_file(
    expected_file: Path,
    actual: str,
    *,
    ci: bool | None = None,
) -> None:
    fail_if_not_equal(
        ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT,
        compare_value_agnostic(expected_file, actual, ci=ci),
    )


def accept_actual(expected_file: Path, actual: str, sanitizer: Sanitizer = identity) -> bool:
    """Overwrite the golden file with the sanitized actual text.

    Returns True when the file content changed.
    """
    expected_file = Path(expected_file)
    new_text = apply_default_and_custom_sanitizer(actual, sanitizer)
    old_text = read_text(expected_file) if expected_file.exists() else None
    if old_text == new_text:
        return False
    atomic_write_text(expected_file, new_text)
    logger.info("Accepted new baseline for %s", expected_file)
    return True
