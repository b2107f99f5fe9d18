"""skjema - form controls with storage, validation and themed rendering."""

from skjema.container import FormContainer
from skjema.controls import FormControl, create, from_args, get_control_class
from skjema.exceptions import (
    InvalidControlTypeError,
    MissingFieldError,
    SkjemaError,
    StorageDescriptorError,
)
from skjema.settings import ControlSettings
from skjema.storage import FormStorage, MappingStorage, MemoryStorage
from skjema.theme import Theme, create_theme
from skjema.validators import FormValidators, ValidatorHandle

__all__ = [
    "ControlSettings",
    "FormContainer",
    "FormControl",
    "FormStorage",
    "FormValidators",
    "InvalidControlTypeError",
    "MappingStorage",
    "MemoryStorage",
    "MissingFieldError",
    "SkjemaError",
    "StorageDescriptorError",
    "Theme",
    "ValidatorHandle",
    "create",
    "create_theme",
    "from_args",
    "get_control_class",
]
