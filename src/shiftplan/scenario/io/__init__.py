"""Schedule IO helpers."""

from .loaders import load_schedule, parse_line, parse_schedule

__all__ = ["load_schedule", "parse_line", "parse_schedule"]
