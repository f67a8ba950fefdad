"""Save and load filter sets as JSON or YAML."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from shiftplan.core.errors import ShiftPlanValueError
from shiftplan.filters.models import TimetableFilters

_YAML_SUFFIXES = {".yaml", ".yml"}


def save_filters(path: Path | str, filters: TimetableFilters) -> Path:
    """Write ``filters`` to ``path``; YAML for ``.yaml``/``.yml``, JSON otherwise."""
    path = Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    payload = filters.model_dump(mode="json")
    if path.suffix.lower() in _YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def load_filters(path: Path | str) -> TimetableFilters:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ShiftPlanValueError(f"Could not read filters from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ShiftPlanValueError(f"Filters file {path} must contain a mapping")
    try:
        return TimetableFilters.model_validate(data)
    except ValidationError as exc:
        raise ShiftPlanValueError(f"Invalid filters in {path}: {exc}") from exc


__all__ = ["save_filters", "load_filters"]
