"""Settings shared by the CLI commands, optionally loaded from a config file."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from shiftplan.core.errors import ShiftPlanValueError


@dataclass(frozen=True)
class ShiftPlanSettings:
    """Defaults applied to a CLI invocation.

    Attributes
    ----------
    allow_weekend:
        Accept ``Sat``/``Sun`` sessions in schedule files.
    limit:
        Stop the search after this many timetables (``None`` for no budget).
    show:
        Number of ranked timetables rendered by ``generate``.
    telemetry_log:
        JSONL file receiving a run record per command.
    filters_path:
        Filter set loaded before command-line filters are applied.
    """

    allow_weekend: bool = False
    limit: int | None = None
    show: int = 5
    telemetry_log: Path | None = None
    filters_path: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            item.name: str(value) if isinstance(value, Path) else value
            for item in fields(self)
            for value in [getattr(self, item.name)]
        }


_PATH_KEYS = {"telemetry_log", "filters_path"}


def _read_config(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json", ".toml"}:
        raise ShiftPlanValueError("Unsupported config format. Use YAML, TOML, or JSON.")
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ShiftPlanValueError(f"Could not parse config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ShiftPlanValueError(f"Config file {path} must contain a mapping")
    # TOML users may nest everything under [shiftplan].
    if set(data) == {"shiftplan"} and isinstance(data["shiftplan"], dict):
        data = data["shiftplan"]
    return data


def merge_settings(settings: ShiftPlanSettings, **overrides: Any) -> ShiftPlanSettings:
    """Apply overrides, ignoring ``None`` values and normalising paths."""
    known = {item.name for item in fields(ShiftPlanSettings)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        allowed = ", ".join(sorted(known))
        raise ShiftPlanValueError(
            f"Unknown setting(s) {', '.join(unknown)}. Allowed keys: {allowed}."
        )
    updates: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in _PATH_KEYS:
            value = Path(value)
        elif key in {"limit", "show"}:
            if isinstance(value, bool):
                raise ShiftPlanValueError(f"Setting '{key}' must be an integer (got {value!r})")
            try:
                value = int(value)
            except (TypeError, ValueError) as exc:
                raise ShiftPlanValueError(
                    f"Setting '{key}' must be an integer (got {value!r})"
                ) from exc
            if value < 0:
                raise ShiftPlanValueError(f"Setting '{key}' must be non-negative")
        elif key == "allow_weekend":
            if not isinstance(value, bool):
                raise ShiftPlanValueError(
                    f"Setting 'allow_weekend' must be true or false (got {value!r})"
                )
        updates[key] = value
    return replace(settings, **updates)


def load_settings(path: Path | str | None) -> ShiftPlanSettings:
    """Load settings from YAML/TOML/JSON; ``None`` returns the defaults."""
    if path is None:
        return ShiftPlanSettings()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    return merge_settings(ShiftPlanSettings(), **_read_config(path))


__all__ = ["ShiftPlanSettings", "load_settings", "merge_settings"]
