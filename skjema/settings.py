"""Typed behavioral settings for form controls."""

from __future__ import annotations

from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict, field_validator

# A plain string is used as-is (or as a %-format template for wraps); a
# callable computes the value at render time.
TextOrCallable = Union[str, Callable[..., Any]]


class ControlSettings(BaseModel):
    """Behavioral switches for a control, distinct from its HTML properties.

    A setting left at ``None`` is unset and falls back to the default passed
    to ``FormControl.get_setting()``.

    - ``template``: template fallback list tried by the theme (a single
      name is accepted and wrapped in a list)
    - ``template_html``: literal HTML (or ``(theme, control) -> str``) used
      instead of rendering a template
    - ``content``: literal HTML emitted before the rendered template
    - ``prefix_html`` / ``postfix_html``: HTML placed around the output
    - ``wrap``: %-template or ``(output, control) -> str`` applied when valid
    - ``error_wrap``: %-template or ``(output, errors) -> str`` applied when
      the control has errors. A %-template receives the escaped errors
      joined with ``<br>``
    - ``norender``: skip the template entirely
    - ``ignore_name``: do not inject the ``name`` attribute
    - ``internal_value``: do not inject the ``value`` attribute
    - ``input_name``: submitted-data key, when it differs from the name
    - ``control_id``: fixed id instead of the derived hash
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    template: list[str] | None = None
    template_html: TextOrCallable | None = None
    content: str | None = None
    prefix_html: str | None = None
    postfix_html: str | None = None
    wrap: TextOrCallable | None = None
    error_wrap: TextOrCallable | None = None
    norender: bool = False
    ignore_name: bool = False
    internal_value: bool = False
    input_name: str | None = None
    control_id: str | None = None

    @field_validator("template", mode="before")
    @classmethod
    def template_as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def get(self, name: str) -> Any:
        """Return a setting, or None when it is unset or unknown."""
        if name not in type(self).model_fields:
            return None
        value = getattr(self, name)
        if value is False:
            return None
        return value
