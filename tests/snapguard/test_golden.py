"""Tests for golden file loading, bootstrapping and comparison."""

from __future__ import annotations

from pathlib import Path

import pytest

from snapguard.errors import ContentMismatchError, MissingGoldenFileError
from snapguard.golden import (
    ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT,
    FileComparisonResult,
    accept_actual,
    assert_equals_to_file,
    assert_value_agnostic_equals_to_file,
    compare_expect_file_with_actual_text,
    compare_value_agnostic,
    try_load_expected_file,
)
from snapguard.sanitize import VALUE_PLACEHOLDER, apply_default_and_custom_sanitizer


# --- comparison result ---


def test_does_equal_uses_sanitized_fields_only(tmp_path: Path) -> None:
    result = FileComparisonResult(
        expected_file=tmp_path / "a.txt",
        expected_text="raw differs",
        expected_sanitized_text="same\n",
        actual_sanitized_text="same\n",
    )
    assert result.does_equal


def test_compare_equal_after_sanitizing(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("line one\nline two\n", encoding="utf-8")

    result = compare_expect_file_with_actual_text(golden, "line one  \r\nline two\r\n\r\n")

    assert result.does_equal
    assert result.expected_text == "line one\nline two\n"
    assert result.actual_sanitized_text == "line one\nline two\n"


def test_compare_is_reflexive(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("alpha \n\nbeta\t\n", encoding="utf-8")

    loaded = golden.read_text(encoding="utf-8")
    result = compare_expect_file_with_actual_text(golden, apply_default_and_custom_sanitizer(loaded))

    assert result.does_equal


def test_custom_sanitizer_applied_to_both_sides(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("Hello\n", encoding="utf-8")

    result = compare_expect_file_with_actual_text(golden, "HELLO", str.lower)

    assert result.does_equal
    assert result.expected_sanitized_text == "hello\n"


# --- missing golden files ---


def test_missing_golden_in_ci_writes_nothing(tmp_path: Path) -> None:
    golden = tmp_path / "expected" / "missing.txt"

    with pytest.raises(MissingGoldenFileError) as exc_info:
        compare_expect_file_with_actual_text(golden, "actual", ci=True)

    assert exc_info.value.generated is False
    assert str(golden) in str(exc_info.value)
    assert list(tmp_path.iterdir()) == []


def test_missing_golden_ci_detected_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CI", "true")
    golden = tmp_path / "missing.txt"

    with pytest.raises(MissingGoldenFileError):
        assert_equals_to_file(golden, "actual")

    assert not golden.exists()


def test_missing_golden_locally_is_generated_and_still_fails(tmp_path: Path) -> None:
    golden = tmp_path / "nested" / "missing.txt"

    with pytest.raises(MissingGoldenFileError) as exc_info:
        assert_equals_to_file(golden, "value  \r\nnext", ci=False)

    assert exc_info.value.generated is True
    assert str(golden) in str(exc_info.value)
    assert golden.read_text(encoding="utf-8") == "value\nnext\n"
    # No temp files left behind next to the generated golden.
    assert [p.name for p in golden.parent.iterdir()] == ["missing.txt"]


def test_generated_golden_passes_on_next_run(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    with pytest.raises(MissingGoldenFileError):
        assert_equals_to_file(golden, "stable output", ci=False)

    assert_equals_to_file(golden, "stable output", ci=False)


def test_read_errors_propagate(tmp_path: Path) -> None:
    golden = tmp_path / "golden_dir"
    golden.mkdir()

    with pytest.raises(OSError):
        try_load_expected_file(golden, lambda: "unused", ci=False)


# --- mismatch payload ---


def test_mismatch_carries_payload(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("expected ü\n", encoding="utf-8")

    with pytest.raises(ContentMismatchError) as exc_info:
        assert_equals_to_file(golden, "actual")

    error = exc_info.value
    assert str(error) == f"{ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT}: out.txt"
    assert error.expected_file == golden.absolute()
    assert error.file_name == "out.txt"
    assert error.expected_bytes == "expected ü\n".encode("utf-8")
    assert error.actual == "actual\n"
    assert isinstance(error, AssertionError)


def test_mismatch_custom_message_and_diff(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("a\nb\n", encoding="utf-8")

    with pytest.raises(ContentMismatchError) as exc_info:
        assert_equals_to_file(golden, "a\nc\n", message="Dump differs")

    assert str(exc_info.value).startswith("Dump differs: ")
    diff = exc_info.value.unified_diff()
    assert "-b" in diff
    assert "+c" in diff


# --- value agnostic ---


def test_value_agnostic_bootstraps_template(tmp_path: Path) -> None:
    golden = tmp_path / "values.txt"

    with pytest.raises(MissingGoldenFileError):
        assert_value_agnostic_equals_to_file(golden, "count = 12\n", ci=False)

    assert golden.read_text(encoding="utf-8") == f"count = {VALUE_PLACEHOLDER}\n"


def test_value_agnostic_matches_any_values(tmp_path: Path) -> None:
    golden = tmp_path / "values.txt"
    golden.write_text(f"count = {VALUE_PLACEHOLDER}\nid = {VALUE_PLACEHOLDER}\n", encoding="utf-8")

    assert_value_agnostic_equals_to_file(golden, "count = 99\nid = 0xFF\n")


def test_value_agnostic_detects_shape_change(tmp_path: Path) -> None:
    golden = tmp_path / "values.txt"
    golden.write_text(f"count = {VALUE_PLACEHOLDER}\n", encoding="utf-8")

    result = compare_value_agnostic(golden, "total = 99\n")
    assert not result.does_equal


# --- accept ---


def test_accept_actual_overwrites_once(tmp_path: Path) -> None:
    golden = tmp_path / "out.txt"
    golden.write_text("old\n", encoding="utf-8")

    assert accept_actual(golden, "new  ") is True
    assert golden.read_text(encoding="utf-8") == "new\n"
    assert accept_actual(golden, "new") is False
