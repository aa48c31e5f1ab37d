"""
ProjectConfig: Project-level configuration loader for innerbag.

This module provides:

- find_config_file: Walk up directories to locate .innerbag.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- BaggingSettings: Fully resolved bagging settings
- ProjectConfig: Main config object with load/resolve interface

Configuration is loaded from `.innerbag.toml` with optional
`.innerbag.local.toml` overrides. The resolution order is:

    [bagging] → named profile → local overrides

Example:
    >>> config = ProjectConfig.load()
    >>> settings = config.resolve("fast")
    >>> settings.inner_bags
    8

A minimal `.innerbag.toml`::

    [project]
    name = "churn-model"
    default_profile = "default"

    [bagging]
    seed = 42
    inner_bags = 25

    [profiles.fast]
    inner_bags = 0
    invariant_checks = false
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from innerbag._invariants import set_invariant_checks

CONFIG_FILENAME = ".innerbag.toml"
LOCAL_CONFIG_FILENAME = ".innerbag.local.toml"

DEFAULT_PROFILE = "default"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.innerbag.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Neither input is mutated; a new dict is returned.

    Args:
        base: The base dictionary.
        override: The override dictionary whose values take precedence.

    Returns:
        A new merged dictionary.
    """
    merged: dict[str, Any] = {}

    for key in base.keys() | override.keys():
        if key in base and key in override:
            base_val = base[key]
            over_val = override[key]
            if isinstance(base_val, dict) and isinstance(over_val, dict):
                merged[key] = deep_merge(base_val, over_val)
            else:
                merged[key] = over_val
        elif key in base:
            merged[key] = base[key]
        else:
            merged[key] = override[key]

    return merged


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BaggingSettings:
    """
    Fully resolved bagging settings for one profile.

    Attributes:
        profile: The profile these settings were resolved for.
        seed: Base seed for the bag RNG streams.
        inner_bags: Number of bootstrap bags (0 for a single flat bag).
        invariant_checks: Whether optional invariant checks run.
        log_level: Logging level name for the CLI.
    """

    profile: str = DEFAULT_PROFILE
    seed: int = 0
    inner_bags: int = 0
    invariant_checks: bool = __debug__
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if (
            isinstance(self.inner_bags, bool)
            or not isinstance(self.inner_bags, int)
            or self.inner_bags < 0
        ):
            raise ValueError(
                f"inner_bags must be a non-negative integer, got {self.inner_bags!r}"
            )
        if not isinstance(self.invariant_checks, bool):
            raise ValueError(
                f"invariant_checks must be true or false, got {self.invariant_checks!r}"
            )
        if str(self.log_level).upper() not in _LOG_LEVELS:
            raise ValueError(
                f"Unknown log_level {self.log_level!r}. "
                f"Expected one of: {', '.join(_LOG_LEVELS)}"
            )

    @property
    def logging_level(self) -> int:
        """The numeric :mod:`logging` level for ``log_level``."""
        return getattr(logging, self.log_level.upper())

    def apply(self) -> None:
        """Push process-wide settings (invariant checks) into effect."""
        set_invariant_checks(self.invariant_checks)


@dataclass
class ProjectConfig:
    """
    Main project configuration loaded from ``.innerbag.toml``.

    Holds the parsed ``[bagging]`` defaults, named profiles and any local
    overrides from ``.innerbag.local.toml``. Use :meth:`resolve` to produce
    :class:`BaggingSettings` for a specific profile.

    Typical usage::

        config = ProjectConfig.load()
        settings = config.resolve()          # uses default_profile
        settings = config.resolve("fast")    # explicit profile
    """

    name: str = ""
    default_profile: str | None = None
    bagging: dict[str, Any] = field(default_factory=dict)
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)
    _local_overrides: dict[str, Any] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, start_dir: Path | None = None) -> ProjectConfig:
        """
        Find and load project configuration.

        Walks up from *start_dir* (default: cwd) to locate ``.innerbag.toml``,
        parses it, and optionally deep-merges ``.innerbag.local.toml`` from
        the same directory.

        Raises:
            FileNotFoundError: If no ``.innerbag.toml`` is found.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            raise FileNotFoundError(
                f"Could not find {CONFIG_FILENAME} in {start_dir or Path.cwd()} "
                f"or any parent directory"
            )

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        local_overrides: dict[str, Any] = {}
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            with open(local_path, "rb") as f:
                local_overrides = tomllib.load(f)

        return cls.from_dict(data, local_overrides=local_overrides)

    @classmethod
    def load_or_default(cls, start_dir: Path | None = None) -> ProjectConfig:
        """Like :meth:`load`, but return an empty config when no file exists."""
        try:
            return cls.load(start_dir)
        except FileNotFoundError:
            return cls()

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        local_overrides: dict[str, Any] | None = None,
    ) -> ProjectConfig:
        """
        Create a :class:`ProjectConfig` from a parsed TOML dict.

        Args:
            data: Parsed TOML data (from the base config file).
            local_overrides: Optional parsed TOML data from the local override
                file. These are stored and applied during :meth:`resolve`.
        """
        project_raw = data.get("project", {})
        return cls(
            name=project_raw.get("name", ""),
            default_profile=project_raw.get("default_profile"),
            bagging=dict(data.get("bagging", {})),
            profiles={
                name: dict(profile)
                for name, profile in data.get("profiles", {}).items()
            },
            _local_overrides=local_overrides or {},
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, profile: str | None = None) -> BaggingSettings:
        """
        Resolve a named profile into :class:`BaggingSettings`.

        Merging order:

        1. ``[bagging]``
        2. ``[profiles.NAME]``
        3. Local ``[bagging]`` then local ``[profiles.NAME]``

        If *profile* is ``None``, uses ``project.default_profile`` (including
        local overrides), falling back to ``"default"``. The ``"default"``
        profile need not be declared.

        Raises:
            ValueError: If the profile does not exist or a value is invalid.
        """
        local_project = self._local_overrides.get("project", {})
        profile = (
            profile
            or local_project.get("default_profile", self.default_profile)
            or DEFAULT_PROFILE
        )

        local_profiles = self._local_overrides.get("profiles", {})
        if (
            profile != DEFAULT_PROFILE
            and profile not in self.profiles
            and profile not in local_profiles
        ):
            available = ", ".join(sorted(self.profiles)) or "(none)"
            raise ValueError(
                f"Unknown profile {profile!r}. Available profiles: {available}"
            )

        merged = deep_merge(self.bagging, self.profiles.get(profile, {}))
        merged = deep_merge(merged, self._local_overrides.get("bagging", {}))
        merged = deep_merge(merged, local_profiles.get(profile, {}))

        unknown = set(merged) - {"seed", "inner_bags", "invariant_checks", "log_level"}
        if unknown:
            raise ValueError(
                f"Unknown bagging setting(s): {', '.join(sorted(unknown))}"
            )

        return BaggingSettings(profile=profile, **merged)
