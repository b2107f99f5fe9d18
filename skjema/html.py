"""HTML attribute serialization for control output."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from markupsafe import Markup, escape


def html_attr(attrs: Mapping[str, Any]) -> Markup:
    """Render a mapping as an HTML attribute string.

    Returns '' or ' key="val" key2="val2"'. ``True`` renders a bare attribute
    (``checked``), ``False`` and ``None`` drop the attribute, and list values
    are space-joined (``class``).
    """
    parts = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        attr_name = attr_name_for(key)
        if value is True:
            parts.append(str(escape(attr_name)))
            continue
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
            value = " ".join(str(item) for item in value)
        parts.append(f'{escape(attr_name)}="{escape(str(value))}"')
    if not parts:
        return Markup("")
    return Markup(" " + " ".join(parts))


def attr_name_for(key: str) -> str:
    """Convert Python naming to HTML: class_ -> class, data_id -> data-id"""
    return key.rstrip("_").replace("_", "-")
