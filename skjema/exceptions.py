"""Errors raised by form controls.

Validation failures are not exceptions: they are plain strings collected on
``FormControl.errors`` and rendered next to the control.
"""


class SkjemaError(Exception):
    """Base class for all form control errors."""


class InvalidControlTypeError(SkjemaError, LookupError):
    """No control class is registered under the requested type."""

    def __init__(self, control_type: str, available: list[str] | None = None):
        self.control_type = control_type
        self.available = sorted(available or [])
        message = f'The FormControl type "{control_type}" is invalid.'
        if self.available:
            message += f" Registered: {', '.join(self.available)}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class MissingFieldError(SkjemaError, LookupError):
    """Submitted form data does not contain the control's input."""

    def __init__(self, name: str, input_name: str | None = None):
        self.name = name
        self.input_name = input_name or name
        if self.input_name == name:
            message = f'Missing field "{name}" in submitted form data.'
        else:
            message = f'Missing field "{name}" (input "{self.input_name}") in submitted form data.'
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class StorageDescriptorError(SkjemaError, ValueError):
    """A storage descriptor string could not be resolved."""
