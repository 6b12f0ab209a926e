"""User-facing output helpers."""

from .render import OutcomeRenderer, format_outcome

__all__ = ["OutcomeRenderer", "format_outcome"]
