"""Golden-file comparison and directive-driven test muting."""

from .backends import (
    IGNORE_BACKEND_DIRECTIVE_PREFIX,
    IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    IGNORE_BACKEND_K1_DIRECTIVE_PREFIX,
    IGNORE_BACKEND_K2_DIRECTIVE_PREFIX,
    IGNORE_BACKEND_K2_DIRECTIVE_PREFIXES,
    TargetBackend,
)
from .config import LifecyclePolicy, is_ci, load_policy
from .directives import Directives, parse_directives
from .errors import (
    ConfigError,
    ContentMismatchError,
    DirectiveRewriteError,
    MissingGoldenFileError,
    SnapguardError,
    SpuriousPassError,
)
from .golden import (
    ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT,
    FileComparisonResult,
    assert_equals_to_file,
    assert_value_agnostic_equals_to_file,
    compare_expect_file_with_actual_text,
)
from .ignore import IgnoreResolver, is_ignored_target
from .lifecycle import MuteLifecycleWrapper, MuteOutcome, run_test
from .sanitize import apply_default_and_custom_sanitizer

__all__ = [
    "ACTUAL_DATA_DIFFERS_FROM_FILE_CONTENT",
    "ConfigError",
    "ContentMismatchError",
    "DirectiveRewriteError",
    "Directives",
    "FileComparisonResult",
    "IGNORE_BACKEND_DIRECTIVE_PREFIX",
    "IGNORE_BACKEND_DIRECTIVE_PREFIXES",
    "IGNORE_BACKEND_K1_DIRECTIVE_PREFIX",
    "IGNORE_BACKEND_K2_DIRECTIVE_PREFIX",
    "IGNORE_BACKEND_K2_DIRECTIVE_PREFIXES",
    "IgnoreResolver",
    "LifecyclePolicy",
    "MissingGoldenFileError",
    "MuteLifecycleWrapper",
    "MuteOutcome",
    "SnapguardError",
    "SpuriousPassError",
    "TargetBackend",
    "apply_default_and_custom_sanitizer",
    "assert_equals_to_file",
    "assert_value_agnostic_equals_to_file",
    "compare_expect_file_with_actual_text",
    "is_ci",
    "is_ignored_target",
    "load_policy",
    "parse_directives",
    "run_test",
]
