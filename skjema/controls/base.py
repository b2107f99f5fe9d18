"""FormControl base class: storage, settings, validation and rendering for one field."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, ClassVar

from markupsafe import Markup, escape

from skjema.controls.registry import derive_type_name, register_control
from skjema.exceptions import MissingFieldError
from skjema.html import html_attr
from skjema.lib.hooks import CONTROL_SAVED, CONTROL_VALIDATED, VALIDATOR_HOOK_PREFIX, hooks
from skjema.lib.observability import span
from skjema.settings import ControlSettings
from skjema.storage import FormStorage, resolve as resolve_storage
from skjema.validators import (
    ValidatorHandle,
    call_validator,
    resolve_callable,
    validator_key,
)

if TYPE_CHECKING:
    from skjema.container import FormContainer
    from skjema.theme import Theme

logger = logging.getLogger(__name__)


def default_error_wrap(output: str, errors: list[str]) -> str:
    items = "</li><li>".join(str(escape(error)) for error in errors)
    return (
        f'<div class="_control_error">{output}'
        f'<ol class="_control_error_list"><li>{items}</li></ol></div>'
    )


class FormControl:
    """Base class for a single form field.

    Lifecycle::

        control = FormControlText("email", "memory:profile", {"class": "wide"})
        await control.load()            # value from storage
        control.process(form_data)      # value from the submitted form
        if not await control.validate():
            await control.save()
        html = control.get(theme)

    Subclasses register under a type tag (see ``skjema.controls.registry``)
    and customize behavior by overriding ``_extend()``, ``attributes()`` or
    ``process()``.
    """

    _type_name: ClassVar[str] = "unknown"

    def __init_subclass__(
        cls,
        type_name: str | None = None,
        register: bool = True,
        **kwargs: Any,
    ):
        super().__init_subclass__(**kwargs)
        cls._type_name = type_name or derive_type_name(cls)
        if register:
            register_control(cls._type_name, cls)

    def __init__(
        self,
        name: str,
        storage: FormStorage | str | None = None,
        properties: dict[str, Any] | None = None,
        settings: ControlSettings | dict[str, Any] | None = None,
        *,
        caption: str | None = None,
    ):
        if not name:
            raise ValueError("A form control requires a non-empty name")
        self._name = name
        self.caption = caption
        self.storage: FormStorage | None = None
        self.properties: dict[str, Any] = {}
        self.settings = ControlSettings()
        self.value: Any = None
        self.container: FormContainer | None = None
        self.validators: dict[str, ValidatorHandle] = {}
        # Added to the theme for output by the template
        self.vars: dict[str, Any] = {}
        self.errors: list[str] = []

        self.set_storage(storage)
        self.set_properties(properties or {})
        self.set_settings(settings or {})

        self._extend()

    def _extend(self) -> None:
        """Called after __init__(). Subclasses hook their own setup in here."""

    @classmethod
    def create(
        cls,
        name: str,
        storage: FormStorage | str | None = None,
        properties: dict[str, Any] | None = None,
        settings: ControlSettings | dict[str, Any] | None = None,
        **kwargs: Any,
    ):
        """Create an instance of this class, for use in a fluent chain."""
        return cls(name, storage, properties, settings, **kwargs)

    @property
    def name(self) -> str:
        return self._name

    # -- Fluent setters --

    def set_storage(self, storage: FormStorage | str | None):
        """Bind a storage object, or resolve a ``scheme:target`` descriptor.

        None binds the configured ``forms.default_storage``.
        """
        if storage is None:
            from skjema.config import get_settings

            storage = get_settings().forms.default_storage
        if isinstance(storage, str):
            storage = resolve_storage(storage)
        if storage is not None and not isinstance(storage, FormStorage):
            raise TypeError(
                f"Storage for control '{self.name}' must provide field_load() and field_save(), "
                f"got {type(storage).__name__}"
            )
        self.storage = storage
        return self

    def set_properties(self, properties: Mapping[str, Any], override: bool = False):
        """Merge (or with ``override`` replace) the HTML properties. Later keys win."""
        if override:
            self.properties = dict(properties)
        else:
            self.properties = {**self.properties, **properties}
        return self

    def set_settings(self, settings: ControlSettings | Mapping[str, Any]):
        """Replace all settings."""
        if isinstance(settings, ControlSettings):
            self.settings = settings.model_copy()
        else:
            self.settings = ControlSettings.model_validate(dict(settings))
        return self

    def set_container(self, container: FormContainer | None):
        self.container = container
        return self

    def set_value(self, value: Any):
        self.value = value
        return self

    def set_caption(self, caption: str | None):
        self.caption = caption
        return self

    def set_template(self, template: str | list[str]):
        """Put template(s) ahead of the default fallback list."""
        templates = [template] if isinstance(template, str) else list(template)
        self.settings.template = templates + self._default_templates()
        return self

    def set_template_html(self, template: str | Callable[..., str]):
        """Use literal HTML, or a ``(theme, control)`` callable, instead of a template."""
        self.settings.template_html = template
        return self

    # -- Settings & identification --

    def get_setting(self, name: str, default: Any = None) -> Any:
        """Return a setting's value.

        If the setting is unset and ``default`` is callable, it is called
        with ``(name, control)`` and its result returned.
        """
        value = self.settings.get(name)
        if value is not None:
            return value
        if callable(default):
            return default(name, self)
        return default

    @classmethod
    def control_type(cls) -> str:
        """Lowercase type tag, used for template selection."""
        return cls._type_name

    def control_id(self) -> str:
        """An identifier that is the same every time the form is generated."""
        return self.get_setting(
            "control_id",
            lambda name, control: hashlib.md5(
                f"{type(control).__name__}-{control.name}".encode()
            ).hexdigest(),
        )

    def get_id(self) -> str:
        """HTML id of the control; defaults to (and stores) the name."""
        if "id" not in self.properties:
            self.properties["id"] = self.name
        return self.properties["id"]

    def input_name(self) -> str:
        """Key of this control in submitted form data."""
        return self.get_setting("input_name", self.name)

    def get_template(self) -> list[str]:
        """Template names in fallback order."""
        return self.get_setting("template", self._default_templates())

    def _default_templates(self) -> list[str]:
        return [f"control.{self.control_type()}", "control"]

    # -- Storage & input --

    async def load(self) -> None:
        """Load the initial value from storage."""
        if self.storage is not None:
            self.value = await self.storage.field_load(self.name)

    async def save(self) -> None:
        """Save the current value to storage."""
        if self.storage is not None:
            await self.storage.field_save(self.name, self.value)
            await hooks.do_action(CONTROL_SAVED, self)

    def process(self, form_data: Mapping[str, Any]) -> None:
        """Take the value from submitted form data.

        Raises MissingFieldError if the data has no entry for ``input_name()``.
        """
        key = self.input_name()
        try:
            self.value = form_data[key]
        except KeyError:
            raise MissingFieldError(self.name, key) from None

    # -- Validation --

    def add_validator(self, validator: Any, *args: Any, key: str | None = None):
        """Add a validator; extra arguments are passed to it after the standard ones.

        ``validator`` is a callable, an ``(owner, "method")`` pair, the name of
        a ``FormValidators`` function, or a name handled by the
        ``validator_<name>`` filter hook, whose returned errors are appended
        to the ones already collected. Adding a validator under an existing
        key replaces it.
        """
        if isinstance(validator, ValidatorHandle):
            handle = validator
        else:
            handle = ValidatorHandle(key or validator_key(validator), validator, args)
        self.validators[handle.key] = handle
        return self

    def remove_validator(self, validator: Any) -> bool:
        """Remove a validator by key, handle, or the object that was added."""
        if not isinstance(validator, (str, tuple)):
            for key, handle in self.validators.items():
                if handle is validator or handle.validator is validator:
                    del self.validators[key]
                    return True
            if not callable(validator):
                return False
        return self.validators.pop(validator_key(validator), None) is not None

    async def validate(self) -> list[str]:
        """Run every validator in the order added and collect their errors.

        Returns an empty list when the value is valid. The result is also
        stored on ``errors`` for rendering.
        """
        with span("control.validate", control=self.name, validators=len(self.validators)):
            errors: list[str] = []
            for handle in list(self.validators.values()):
                params = (self.value, self, self.container, *handle.args)
                fn = resolve_callable(handle.validator)
                if fn is not None:
                    errors.extend(await call_validator(fn, *params))
                    continue

                validator_name = handle.validator if isinstance(handle.validator, str) else handle.key
                hook_name = f"{VALIDATOR_HOOK_PREFIX}{validator_name}"
                if not hooks.has_filter(hook_name):
                    logger.warning(
                        "Validator %r on control %r matched no function and no %r hook",
                        validator_name,
                        self.name,
                        hook_name,
                    )
                new_errors = await hooks.apply_filters(hook_name, [], list(errors), *params)
                errors.extend(new_errors or [])

            self.errors = errors
            await hooks.do_action(CONTROL_VALIDATED, self, errors)
        return errors

    # -- Rendering --

    def attributes(self) -> dict[str, Any]:
        """HTML attributes for the control element.

        ``value`` and ``name`` come first unless suppressed by the
        ``internal_value`` / ``ignore_name`` settings; explicit properties
        override them.
        """
        injected: dict[str, Any] = {}
        if not self.settings.internal_value:
            injected["value"] = self.value
        if not self.settings.ignore_name:
            injected["name"] = self.name
        return {**injected, **self.properties}

    def get(self, theme: Theme) -> Markup:
        """Render the control with ``theme`` and return its HTML."""
        with span("control.render", control=self.name, control_type=self.control_type()):
            with theme.buffer():
                for key, value in self.vars.items():
                    theme.assign(key, value)
                theme.assign("value", self.value)
                theme.assign("control", self)
                theme.assign("id", self.get_id())
                theme.assign("attributes", html_attr(self.attributes()))

                output = self._render_output(theme)

                if self.errors:
                    error_wrap = self.get_setting("error_wrap") or default_error_wrap
                    if callable(error_wrap):
                        output = self.wrap_by(error_wrap, output, self.errors)
                    else:
                        joined = "<br>".join(str(escape(error)) for error in self.errors)
                        output = self.wrap_by(error_wrap, output, joined)
                else:
                    wrap = self.get_setting("wrap", "%s")
                    if callable(wrap):
                        output = self.wrap_by(wrap, output, self)
                    else:
                        output = self.wrap_by(wrap, output)

        return Markup(output)

    def _render_output(self, theme: Theme) -> str:
        parts = [self.get_setting("prefix_html", "")]
        content = self.get_setting("content")
        if content is not None:
            parts.append(content)
        if not self.settings.norender:
            template_html = self.get_setting("template_html")
            if template_html is None:
                parts.append(theme.display_fallback(self.get_template(), "fetch"))
            elif callable(template_html):
                parts.append(template_html(theme, self))
            else:
                parts.append(template_html)
        parts.append(self.get_setting("postfix_html", ""))
        # Markup.__radd__ would escape the plain-string parts
        return "".join(str(part) for part in parts)

    @staticmethod
    def wrap_by(wrapper: str | Callable[..., Any], *things: Any) -> str:
        """Apply a %-style template or a callable to ``things``."""
        if callable(wrapper):
            return wrapper(*things)
        return wrapper % things

    def pre_out(self) -> str:
        """HTML emitted once, before the first control of this type on a page."""
        return ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, value={self.value!r}, errors={self.errors!r})"
