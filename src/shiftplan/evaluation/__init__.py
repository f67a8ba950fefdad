"""Evaluation layer (tabular summaries)."""

from .summary import BLOCK_COLUMNS, SUMMARY_COLUMNS, blocks_frame, timetable_summary_frame

__all__ = ["BLOCK_COLUMNS", "SUMMARY_COLUMNS", "blocks_frame", "timetable_summary_frame"]
