"""Shared helpers."""

from .formatting import format_for_log, indent, pretty_json, scrub

__all__ = ["format_for_log", "indent", "pretty_json", "scrub"]
