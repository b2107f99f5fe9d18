"""Logfire spans around hook dispatch, validation and rendering.

The host application calls ``configure(get_settings())`` once; until then,
or when logfire is missing or disabled, ``span`` yields None.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from skjema.config import Settings

_logfire = None
_configured = False


def is_available() -> bool:
    return _logfire is not None and _configured


def configure(settings: Settings) -> None:
    """Turn on tracing from the ``logfire`` settings section."""
    global _logfire, _configured

    if not settings.logfire.enabled:
        return

    try:
        import logfire as lf
    except ImportError:
        return

    kwargs: dict[str, Any] = {
        "service_name": settings.logfire.service_name,
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire.environment:
        kwargs["environment"] = settings.logfire.environment
    if settings.logfire.console:
        kwargs["console"] = lf.ConsoleOptions()

    lf.configure(**kwargs)
    _logfire = lf
    _configured = True


@contextmanager
def span(name: str, **attrs: Any):
    if is_available():
        with _logfire.span(name, **attrs) as s:
            yield s
    else:
        yield None
