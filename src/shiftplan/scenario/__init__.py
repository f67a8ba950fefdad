"""Schedule inputs (file parsing)."""
