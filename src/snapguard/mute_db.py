"""Contract with the external mute database.

The mute database tracks tests muted globally, independent of in-text
directives. snapguard only asks it to wrap a test body; muting bookkeeping
stays on the database side.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

RunBody = Callable[[], None]


@runtime_checkable
class MuteDatabase(Protocol):
    def wrap_if_muted(self, test_identity: str, body: RunBody) -> RunBody | None:
        """Return a replacement body when ``test_identity`` is muted, else None."""
        ...


class NullMuteDatabase:
    """Mute database with no muted tests."""

    def wrap_if_muted(self, test_identity: str, body: RunBody) -> RunBody | None:
        return None


class StaticMuteDatabase:
    """Mute database backed by a fixed set of test identities.

    A muted body still runs; its failure is logged and suppressed.
    """

    def __init__(self, muted: Iterable[str] = ()):
        self.muted = frozenset(muted)

    def wrap_if_muted(self, test_identity: str, body: RunBody) -> RunBody | None:
        if test_identity not in self.muted:
            return None

        def run_muted() -> None:
            try:
                body()
            except Exception as exc:
                logger.warning("MUTED IN DATABASE: %s (%s)", test_identity, exc)
                return
            logger.info("Test %s passed but is muted in database", test_identity)

        return run_muted


def identity_of(test_case: object) -> str:
    """Stable identity of a test case: explicit ``test_id`` or ``module.Class.name``."""
    explicit = getattr(test_case, "test_id", None)
    if isinstance(explicit, str) and explicit:
        return explicit
    cls = type(test_case)
    name = getattr(test_case, "name", None)
    base = f"{cls.__module__}.{cls.__qualname__}"
    return f"{base}.{name}" if name else base
