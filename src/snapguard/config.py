"""Lifecycle policy configuration.

Policy comes from the ``lifecycle`` section of ``.snapguard/config.yaml``
with environment toggles layered on top. The resulting
:class:`LifecyclePolicy` is passed explicitly to the lifecycle wrapper.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from io import StringIO
from pathlib import Path
from typing import Mapping

from ruamel.yaml import YAML

from .errors import ConfigError
from .fileio import atomic_write_text

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".snapguard"
CONFIG_FILENAME = "config.yaml"

_TRUTHY_VALUES = {"1", "true", "yes", "on"}

# Policy field -> environment variable
ENV_TOGGLES: dict[str, str] = {
    "run_ignored_as_regular": "SNAPGUARD_RUN_IGNORED_AS_REGULAR",
    "verbose_ignored_output": "SNAPGUARD_VERBOSE_IGNORED",
    "require_compatible_backend_agreement": "SNAPGUARD_REQUIRE_COMPATIBLE_BACKEND",
    "auto_mute_failures": "SNAPGUARD_AUTO_MUTE",
    "auto_unmute_passes": "SNAPGUARD_AUTO_UNMUTE",
}

_CI_ENV_VARS = [
    "CI",
    "GITHUB_ACTIONS",
    "JENKINS_HOME",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
    "TEAMCITY_VERSION",
]


def _is_truthy(raw_value: str | None) -> bool:
    return (raw_value or "").strip().lower() in _TRUTHY_VALUES


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when running under a continuous-integration service."""
    env = os.environ if environ is None else environ
    return any(env.get(var) for var in _CI_ENV_VARS)


@dataclass(frozen=True, slots=True)
class LifecyclePolicy:
    """Switches controlling how ignored tests are treated."""

    auto_mute_failures: bool = False
    auto_unmute_passes: bool = False
    require_compatible_backend_agreement: bool = False
    run_ignored_as_regular: bool = False
    verbose_ignored_output: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, object] | None) -> LifecyclePolicy:
        if not isinstance(data, Mapping):
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ConfigError(
                f"Unknown lifecycle option(s): {', '.join(unknown)}. "
                f"Valid options: {', '.join(sorted(known))}"
            )

        values: dict[str, bool] = {}
        for key, value in data.items():
            if isinstance(value, bool):
                values[str(key)] = value
            elif isinstance(value, str):
                values[str(key)] = _is_truthy(value)
            else:
                raise ConfigError(
                    f"Invalid value for lifecycle.{key}: expected a boolean, got {value!r}"
                )
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LifecyclePolicy:
        """Build a policy from environment toggles alone."""
        return cls().merged_with_env(environ)

    def merged_with_env(self, environ: Mapping[str, str] | None = None) -> LifecyclePolicy:
        """Return a copy where every toggle set in the environment wins."""
        env = os.environ if environ is None else environ
        overrides = {
            name: _is_truthy(env[var])
            for name, var in ENV_TOGGLES.items()
            if var in env
        }
        return replace(self, **overrides) if overrides else self


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_DIRNAME / CONFIG_FILENAME


def load_policy(
    project_root: Path,
    environ: Mapping[str, str] | None = None,
) -> LifecyclePolicy:
    """Load the lifecycle policy for a project.

    Missing config file means defaults. Environment toggles are applied last.

    Raises:
        ConfigError: If the config file is not valid YAML or has bad values
    """
    path = config_path(project_root)
    policy = LifecyclePolicy()

    if path.exists():
        yaml = YAML(typ="safe")
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = yaml.load(handle) or {}
        except Exception as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc

        section = payload.get("lifecycle") if isinstance(payload, dict) else None
        policy = LifecyclePolicy.from_dict(section)
        logger.debug("Loaded lifecycle policy from %s: %s", path, policy)

    return policy.merged_with_env(environ)


def save_policy(project_root: Path, policy: LifecyclePolicy) -> None:
    """Persist the policy into the config file, preserving other sections.

    The file is replaced atomically so a concurrent reader never sees a
    truncated config.
    """
    path = config_path(project_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.preserve_quotes = True

    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    else:
        payload = {}

    if not isinstance(payload, dict):
        payload = {}

    payload["lifecycle"] = policy.to_dict()

    buffer = StringIO()
    yaml.dump(payload, buffer)
    atomic_write_text(path, buffer.getvalue())
    logger.debug("Saved lifecycle policy to %s", path)
