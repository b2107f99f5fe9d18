"""Theme render service used by controls to produce their HTML.

A ``Theme`` wraps a Jinja2 environment and a set of template vars. Controls
open a buffer, assign their vars, render the first template in their
fallback list, and close the buffer, which restores the vars that were in
place before. Buffers nest, so a control may render child controls with
the same theme.

Template names are dotted identifiers (``control.text``) resolved to files
with an ``.html`` suffix. Bundled control templates live in
``skjema/templates``; directories configured in ``forms.template_dirs`` are
searched first, so a site theme can override any of them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import jinja2
from markupsafe import Markup

if TYPE_CHECKING:
    from skjema.config import Settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".html"


class Theme:
    """Template vars plus a stack of saved states for nested rendering."""

    def __init__(self, environment: jinja2.Environment) -> None:
        self.environment = environment
        self.vars: dict[str, Any] = {}
        self._stack: list[dict[str, Any]] = []

    # -- Vars --

    def assign(self, key: str, value: Any) -> None:
        self.vars[key] = value

    def __getitem__(self, key: str) -> Any:
        return self.vars[key]

    def __contains__(self, key: str) -> bool:
        return key in self.vars

    # -- Buffers --

    @property
    def depth(self) -> int:
        return len(self._stack)

    def start_buffer(self) -> None:
        """Save the current vars so end_buffer() can restore them."""
        self._stack.append(dict(self.vars))

    def end_buffer(self) -> None:
        """Restore the vars saved by the matching start_buffer()."""
        if not self._stack:
            raise RuntimeError("end_buffer() called without a matching start_buffer()")
        self.vars = self._stack.pop()

    @contextmanager
    def buffer(self) -> Iterator[Theme]:
        """Pair start_buffer()/end_buffer() even if rendering raises."""
        self.start_buffer()
        try:
            yield self
        finally:
            self.end_buffer()

    # -- Rendering --

    def display_fallback(self, candidates: str | Sequence[str], mode: str = "fetch") -> Markup:
        """Render the first template in ``candidates`` that exists.

        Raises jinja2.TemplatesNotFound when none of them resolve.
        """
        if mode != "fetch":
            raise ValueError(f"Unsupported display mode '{mode}'. Only 'fetch' is supported.")
        if isinstance(candidates, str):
            candidates = [candidates]

        names = [template_filename(candidate) for candidate in candidates]
        template = self.environment.select_template(names)
        logger.debug("Rendering %s for candidates %s", template.name, names)
        return Markup(template.render(**self.vars))

    def __repr__(self) -> str:
        return f"Theme(depth={self.depth}, vars={sorted(self.vars)!r})"


def template_filename(name: str) -> str:
    """control.text -> control.text.html"""
    if name.endswith(TEMPLATE_SUFFIX):
        return name
    return name + TEMPLATE_SUFFIX


def get_template_directories(settings: Settings | None = None) -> list[Path]:
    """Return template directories in priority order.

    1. Directories from ``forms.template_dirs`` (site theme overrides)
    2. The package's bundled control templates
    """
    from skjema.config import get_settings

    settings = settings or get_settings()
    dirs = [Path(d) for d in settings.forms.template_dirs if Path(d).is_dir()]
    dirs.append(TEMPLATE_DIR)
    return dirs


def create_theme(settings: Settings | None = None) -> Theme:
    """Build a Theme over the configured template directories."""
    from skjema.config import get_settings

    settings = settings or get_settings()
    environment = jinja2.Environment(
        loader=jinja2.FileSystemLoader(get_template_directories(settings)),
        autoescape=settings.forms.autoescape,
    )
    return Theme(environment)
