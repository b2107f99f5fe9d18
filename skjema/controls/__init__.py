"""Form controls and the type registry."""

from skjema.controls.base import FormControl
from skjema.controls.fields import (
    FormControlCheckbox,
    FormControlEmail,
    FormControlHidden,
    FormControlPassword,
    FormControlSelect,
    FormControlStatic,
    FormControlSubmit,
    FormControlText,
    FormControlTextArea,
)
from skjema.controls.registry import create, from_args, get_control_class, registered_types

__all__ = [
    "FormControl",
    "FormControlCheckbox",
    "FormControlEmail",
    "FormControlHidden",
    "FormControlPassword",
    "FormControlSelect",
    "FormControlStatic",
    "FormControlSubmit",
    "FormControlText",
    "FormControlTextArea",
    "create",
    "from_args",
    "get_control_class",
    "registered_types",
]
