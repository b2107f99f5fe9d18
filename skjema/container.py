"""FormContainer - an ordered group of controls processed and rendered together."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from litestar import Request
from markupsafe import Markup, escape

from skjema.controls import FormControl, from_args

if TYPE_CHECKING:
    from skjema.theme import Theme

logger = logging.getLogger(__name__)


class FormContainer:
    """Owns a set of controls and runs their lifecycle as one form.

    Usage:
        form = FormContainer("profile", action="/profile")
        form.append("text", "email", "memory:profile", "Email")
        form.append(FormControlSubmit("save", caption="Save"))

        await form.load()
        await form.process_request(request)
        if not await form.validate():
            await form.save()
        html = form.get(theme)
    """

    def __init__(self, name: str, *, action: str = "", method: str = "post"):
        self.name = name
        self.action = action
        self.method = method
        self.controls: dict[str, FormControl] = {}

    # -- Building --

    def append(self, control: FormControl | str, *args: Any) -> FormControl:
        """Add a control, or build one from ``type, name, storage, caption, properties, settings``."""
        if not isinstance(control, FormControl):
            control = from_args([control, *args])
        elif args:
            raise TypeError("append() takes no extra arguments when given a control instance")

        if control.name in self.controls:
            logger.debug("Replacing control %r in form %r", control.name, self.name)
        control.set_container(self)
        self.controls[control.name] = control
        return control

    def remove(self, name: str) -> FormControl:
        control = self.controls.pop(name)
        control.set_container(None)
        return control

    # -- Access --

    def __iter__(self) -> Iterator[FormControl]:
        return iter(self.controls.values())

    def __getitem__(self, name: str) -> FormControl:
        return self.controls[name]

    def __contains__(self, name: str) -> bool:
        return name in self.controls

    def __len__(self) -> int:
        return len(self.controls)

    @property
    def errors(self) -> dict[str, list[str]]:
        """Errors from the last validate(), keyed by control name."""
        return {control.name: control.errors for control in self if control.errors}

    # -- Lifecycle --

    async def load(self) -> None:
        for control in self:
            await control.load()

    def process(self, form_data: Mapping[str, Any]) -> None:
        """Take every control's value from submitted form data."""
        for control in self:
            control.process(form_data)

    async def process_request(self, request: Request) -> None:
        """Process the form data posted with ``request``."""
        form_data = await request.form()
        self.process(form_data)

    async def validate(self) -> dict[str, list[str]]:
        """Validate every control; returns the errors of the failing ones."""
        for control in self:
            await control.validate()
        errors = self.errors
        if errors:
            logger.debug("Form %r failed validation: %s", self.name, sorted(errors))
        return errors

    async def save(self) -> None:
        for control in self:
            await control.save()

    # -- Rendering --

    def get(self, theme: Theme) -> Markup:
        """Render all controls inside the form template.

        Each control type's ``pre_out()`` is emitted once, before the first
        control of that type.
        """
        seen_types: set[str] = set()
        parts: list[str] = []
        for control in self:
            control_type = control.control_type()
            if control_type not in seen_types:
                seen_types.add(control_type)
                parts.append(control.pre_out())
            parts.append(str(control.get(theme)))
        body = Markup("".join(parts))

        with theme.buffer():
            theme.assign("form", self)
            theme.assign("controls", body)
            return theme.display_fallback([f"form.{self.name}", "form"])

    def open_tag(self) -> Markup:
        """The opening ``<form>`` tag."""
        html = f'<form method="{escape(self.method)}"'
        if self.action:
            html += f' action="{escape(self.action)}"'
        html += f' id="{escape(self.name)}">'
        return Markup(html)

    def __repr__(self) -> str:
        return f"FormContainer({self.name!r}, controls={list(self.controls)!r})"
