"""Helpers for keeping credentials and large bodies out of logs."""

from __future__ import annotations


def mask_secret(value: str, visible: int = 4) -> str:
    """Return a redacted form of a credential, e.g. ``abcd…(36 chars)``.

    Secrets shorter than twice ``visible`` are fully masked so the prefix
    never reveals most of the value.
    """
    if not value:
        return "<unset>"
    if len(value) < visible * 2:
        return f"***({len(value)} chars)"
    return f"{value[:visible]}…({len(value)} chars)"


def truncate_for_logging(text: str, limit: int = 500) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"… [{len(text) - limit} more chars]"
