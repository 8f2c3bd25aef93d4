"""Markup escaping for server-supplied strings."""

from __future__ import annotations

import html
from typing import Any


def escape(value: Any) -> str:
    """Return ``value`` as text that is safe to embed in markup.

    ``None`` and empty values become the empty string. Quotes are escaped
    too, so the result is safe inside attribute values.
    """
    if value is None or value == "":
        return ""
    return html.escape(str(value), quote=True)
