"""Run a test body under in-text ignore directives.

:class:`MuteLifecycleWrapper` executes a test once and classifies the result
against the artifact's ``IGNORE_BACKEND``-style directives:

* failure, not ignored: the original exception propagates;
* failure, ignored: suppressed, a one-line diagnostic is logged;
* pass, ignored: :class:`~snapguard.errors.SpuriousPassError` asks for the
  stale directive to be removed;
* pass, not ignored: nothing to report.

With ``auto_mute_failures`` a failing test gets the running backend's
directive appended to its leading comment block; with ``auto_unmute_passes``
a spuriously passing test has it removed before the error is raised.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Callable, Protocol, Sequence, runtime_checkable

from .backends import (
    IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    IGNORE_BACKEND_K2_DIRECTIVE_PREFIXES,
    TargetBackend,
    ignore_directive,
)
from .config import LifecyclePolicy
from .directives import directive_name, insert_directive, remove_directive_value
from .errors import DirectiveRewriteError, SpuriousPassError
from .fileio import read_text, rewrite_if_changed
from .ignore import IgnoreResolver, is_ignored_target, matching_directive, matching_directive_lines
from .mute_db import MuteDatabase, NullMuteDatabase, RunBody, identity_of

logger = logging.getLogger(__name__)

DoTest = Callable[[str], None]


class MuteOutcome(StrEnum):
    """How a wrapped test invocation ended without raising."""

    PASSED = "passed"
    MUTED = "muted"
    MUTED_IN_DATABASE = "muted_in_database"
    BYPASSED = "bypassed"


@runtime_checkable
class CustomLifecycle(Protocol):
    """Test types that run their own retry/mute logic.

    Declare ``custom_lifecycle = True`` on the class (subclasses inherit it)
    to have the body invoked without any wrapping.
    """

    custom_lifecycle: bool


def has_custom_lifecycle(test_case: object) -> bool:
    return isinstance(test_case, CustomLifecycle) and test_case.custom_lifecycle is True


def prefixes_for(test: object) -> tuple[str, ...]:
    """Ignore-directive family for a test: K2 tests also honour ``IGNORE_BACKEND_K2``."""
    if str(getattr(test, "frontend", "")).upper() == "K2":
        return IGNORE_BACKEND_K2_DIRECTIVE_PREFIXES
    return IGNORE_BACKEND_DIRECTIVE_PREFIXES


class MuteLifecycleWrapper:
    """Applies a :class:`LifecyclePolicy` around test bodies."""

    def __init__(
        self,
        policy: LifecyclePolicy | None = None,
        mute_db: MuteDatabase | None = None,
    ):
        self.policy = policy or LifecyclePolicy()
        self.mute_db = mute_db or NullMuteDatabase()

    def resolver(self, prefixes: Sequence[str]) -> IgnoreResolver:
        return IgnoreResolver(
            prefixes=tuple(prefixes),
            require_compatible_agreement=self.policy.require_compatible_backend_agreement,
        )

    def invoke(
        self,
        test: DoTest,
        test_data_path: Path | str,
        target: TargetBackend = TargetBackend.ANY,
        prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    ) -> MuteOutcome:
        """Run ``test`` once against ``test_data_path`` and classify the result."""
        prefixes = tuple(prefixes)
        if not prefixes:
            raise ValueError("At least one ignore directive prefix is required")

        path = Path(test_data_path)
        text = read_text(path)
        ignored = self.resolver(prefixes).is_ignored(target, text)
        directive = ignore_directive(prefixes[0], target)

        try:
            test(str(path))
        except Exception as failure:
            if self.policy.auto_mute_failures:
                self._add_directive(path, directive, failure)

            if self.policy.run_ignored_as_regular or not ignored:
                raise

            reason = matching_directive(target, text, prefixes) or prefixes[0].strip()
            if self.policy.verbose_ignored_output:
                logger.warning("MUTED TEST with `%s`", reason, exc_info=failure)
            else:
                logger.warning("MUTED TEST with `%s`", reason)
            return MuteOutcome.MUTED

        if ignored:
            stale = matching_directive_lines(target, text, prefixes) or [directive]
            if self.policy.auto_unmute_passes:
                self._remove_directives(path, target, prefixes)
            raise SpuriousPassError(stale, path)

        return MuteOutcome.PASSED

    def wrap(
        self,
        test: DoTest,
        target: TargetBackend = TargetBackend.ANY,
        prefixes: Sequence[str] = IGNORE_BACKEND_DIRECTIVE_PREFIXES,
    ) -> Callable[[str], MuteOutcome]:
        """Bind ``test`` to a backend; the result takes the test data path."""

        def wrapped(test_data_path: str) -> MuteOutcome:
            return self.invoke(test, test_data_path, target, prefixes)

        return wrapped

    def run(
        self,
        test: DoTest,
        test_data_path: Path | str,
        *,
        target: TargetBackend = TargetBackend.ANY,
        prefixes: Sequence[str] | None = None,
        test_case: object | None = None,
    ) -> MuteOutcome:
        """Full lifecycle: custom-lifecycle bypass, mute database, directives.

        ``prefixes`` defaults to the family :func:`prefixes_for` picks for
        ``test``.
        """
        path = str(test_data_path)

        if test_case is not None and has_custom_lifecycle(test_case):
            test(path)
            return MuteOutcome.BYPASSED

        wrapped = self.wrap(test, target, prefixes if prefixes is not None else prefixes_for(test))
        if test_case is None:
            return wrapped(path)

        outcomes: list[MuteOutcome] = []
        replacement = self.mute_db.wrap_if_muted(
            identity_of(test_case), lambda: outcomes.append(wrapped(path))
        )
        if replacement is None:
            return wrapped(path)
        replacement()
        return outcomes[0] if outcomes else MuteOutcome.MUTED_IN_DATABASE

    def run_body(self, test_case: object, body: RunBody) -> None:
        """Run a plain body through the mute database only (no directives)."""
        if not has_custom_lifecycle(test_case):
            replacement = self.mute_db.wrap_if_muted(identity_of(test_case), body)
            if replacement is not None:
                replacement()
                return
        body()

    def _add_directive(self, path: Path, directive: str, failure: Exception) -> None:
        try:
            text = read_text(path)
            if rewrite_if_changed(path, text, insert_directive(text, directive)):
                logger.warning('"%s" was added to "%s"', directive, path)
        except OSError as io_error:
            raise DirectiveRewriteError(path, str(io_error)) from failure

    def _remove_directives(
        self, path: Path, target: TargetBackend, prefixes: Sequence[str]
    ) -> None:
        try:
            text = read_text(path)
            new_text = text
            for prefix in prefixes:
                updated = remove_directive_value(new_text, directive_name(prefix), target.name)
                if updated != new_text:
                    logger.warning(
                        '"%s" was removed from "%s"', ignore_directive(prefix, target), path
                    )
                new_text = updated
            rewrite_if_changed(path, text, new_text)
        except OSError as io_error:
            raise DirectiveRewriteError(path, str(io_error)) from io_error

        if is_ignored_target(target, new_text, prefixes):
            logger.warning(
                "%s is still ignored for %s; remove the remaining directive by hand",
                path,
                target.name,
            )


def run_test(
    test: DoTest,
    test_data_path: Path | str,
    target: TargetBackend = TargetBackend.ANY,
    *,
    policy: LifecyclePolicy | None = None,
    prefixes: Sequence[str] | None = None,
    test_case: object | None = None,
    mute_db: MuteDatabase | None = None,
) -> MuteOutcome:
    """Convenience wrapper using the environment policy when none is given."""
    wrapper = MuteLifecycleWrapper(policy or LifecyclePolicy.from_env(), mute_db)
    return wrapper.run(test, test_data_path, target=target, prefixes=prefixes, test_case=test_case)
