"""Concrete form controls."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skjema.controls.base import FormControl


class FormControlText(FormControl):
    """Single-line text input."""

    input_type = "text"

    def _extend(self) -> None:
        self.vars["input_type"] = self.input_type


class FormControlPassword(FormControlText):
    """Text input whose value is never written back into the page."""

    input_type = "password"

    def attributes(self) -> dict[str, Any]:
        attrs = super().attributes()
        if "value" not in self.properties:
            attrs.pop("value", None)
        return attrs


class FormControlEmail(FormControlText):
    input_type = "email"

    def _extend(self) -> None:
        super()._extend()
        self.add_validator("validate_email")


class FormControlHidden(FormControl):
    pass


class FormControlTextArea(FormControl):
    """Multi-line text; the value is rendered as element content."""

    def attributes(self) -> dict[str, Any]:
        attrs = super().attributes()
        if "value" not in self.properties:
            attrs.pop("value", None)
        return attrs


class FormControlCheckbox(FormControl):
    """A checkbox whose value is a bool.

    Browsers leave unchecked boxes out of the submitted data, so a missing
    input means False rather than an error.
    """

    def process(self, form_data: Mapping[str, Any]) -> None:
        submitted = form_data.get(self.input_name())
        self.value = submitted not in (None, "", "0", "false", "off")

    def attributes(self) -> dict[str, Any]:
        attrs = super().attributes()
        if "value" in attrs and "value" not in self.properties:
            attrs["value"] = "1"
        return attrs


class FormControlSelect(FormControl):
    """A drop-down list; ``options`` maps submitted values to labels."""

    def _extend(self) -> None:
        self.options: dict[str, str] = {}

    def set_options(self, options: Mapping[Any, Any] | list[Any]):
        if isinstance(options, Mapping):
            self.options = {str(key): str(label) for key, label in options.items()}
        else:
            self.options = {str(option): str(option) for option in options}
        return self

    def is_selected(self, key: str) -> bool:
        if isinstance(self.value, (list, tuple, set)):
            return key in {str(v) for v in self.value}
        return self.value is not None and str(self.value) == key

    def attributes(self) -> dict[str, Any]:
        attrs = super().attributes()
        if "value" not in self.properties:
            attrs.pop("value", None)
        return attrs


class FormControlSubmit(FormControl):
    """Submit button. Its caption is the button label and it stores nothing."""

    def _extend(self) -> None:
        self.storage = None

    def process(self, form_data: Mapping[str, Any]) -> None:
        self.value = form_data.get(self.input_name())

    def attributes(self) -> dict[str, Any]:
        attrs = super().attributes()
        if "value" not in self.properties:
            attrs["value"] = self.caption or self.name.replace("_", " ").title()
        return attrs


class FormControlStatic(FormControl):
    """Display-only content; it is never part of the submitted data."""

    def attributes(self) -> dict[str, Any]:
        return dict(self.properties)

    def process(self, form_data: Mapping[str, Any]) -> None:
        pass
