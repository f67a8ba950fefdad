"""shiftplan: enumerate, filter and rank clash-free weekly class timetables."""

__version__ = "0.1.0"
