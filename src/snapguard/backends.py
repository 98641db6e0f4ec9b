"""Execution backends and the ignore-directive prefixes that target them."""

from __future__ import annotations

from enum import StrEnum


class TargetBackend(StrEnum):
    """Backend a test runs against.

    ``ANY`` matches regardless of the actual backend and is the fallback
    compatibility target.
    """

    ANY = "ANY"
    JVM = "JVM"
    JVM_IR = "JVM_IR"
    JVM_IR_SERIALIZE = "JVM_IR_SERIALIZE"
    JS = "JS"
    JS_IR = "JS_IR"
    JS_IR_ES6 = "JS_IR_ES6"
    WASM = "WASM"
    NATIVE = "NATIVE"

    @property
    def compatible_with(self) -> TargetBackend:
        return _COMPATIBLE_WITH.get(self, TargetBackend.ANY)

    @classmethod
    def parse(cls, name: str) -> TargetBackend:
        """Look a backend up by its canonical name (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(member.name for member in cls)
            raise ValueError(f"Unknown backend {name!r}. Valid backends: {valid}") from None


_COMPATIBLE_WITH: dict[TargetBackend, TargetBackend] = {
    TargetBackend.JVM_IR: TargetBackend.JVM,
    TargetBackend.JVM_IR_SERIALIZE: TargetBackend.JVM_IR,
    TargetBackend.JS_IR: TargetBackend.JS,
    TargetBackend.JS_IR_ES6: TargetBackend.JS_IR,
}


IGNORE_BACKEND_DIRECTIVE_PREFIX = "// IGNORE_BACKEND: "
IGNORE_BACKEND_K1_DIRECTIVE_PREFIX = "// IGNORE_BACKEND_K1: "
IGNORE_BACKEND_K2_DIRECTIVE_PREFIX = "// IGNORE_BACKEND_K2: "

IGNORE_BACKEND_DIRECTIVE_PREFIXES: tuple[str, ...] = (
    IGNORE_BACKEND_DIRECTIVE_PREFIX,
    IGNORE_BACKEND_K1_DIRECTIVE_PREFIX,
)

IGNORE_BACKEND_K2_DIRECTIVE_PREFIXES: tuple[str, ...] = (
    IGNORE_BACKEND_DIRECTIVE_PREFIX,
    IGNORE_BACKEND_K2_DIRECTIVE_PREFIX,
)


def ignore_directive(prefix: str, backend: TargetBackend) -> str:
    """Directive line ignoring ``backend``: ``// IGNORE_BACKEND: JVM``."""
    return prefix + backend.name
