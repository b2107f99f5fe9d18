"""Control type registry and factories.

Every ``FormControl`` subclass registers itself under a type tag when it is
defined. The tag is either given explicitly::

    class FormControlDate(FormControl, type_name="date"):
        ...

or derived from the class name by stripping the ``FormControl`` prefix
(``FormControlTextArea`` -> ``"textarea"``).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from skjema.exceptions import InvalidControlTypeError

if TYPE_CHECKING:
    from skjema.controls.base import FormControl

CLASS_PREFIX = "FormControl"
_TYPE_PATTERN = re.compile(rf"^{CLASS_PREFIX}(.+)$", re.IGNORECASE)

_control_registry: dict[str, type[FormControl]] = {}


def derive_type_name(cls: type) -> str:
    """FormControlText -> text; classes not following the convention are "unknown"."""
    match = _TYPE_PATTERN.match(cls.__name__)
    if match is None:
        return "unknown"
    return match.group(1).lower()


def register_control(type_name: str, cls: type[FormControl]) -> None:
    _control_registry[type_name] = cls


def registered_types() -> list[str]:
    return sorted(_control_registry)


def get_control_class(type_name: str) -> type[FormControl]:
    """Look up a registered control class by type tag."""
    try:
        return _control_registry[type_name.lower()]
    except KeyError:
        raise InvalidControlTypeError(type_name, list(_control_registry)) from None


def create(
    type_name: str,
    name: str,
    storage: Any = None,
    properties: dict[str, Any] | None = None,
    settings: Any = None,
    **kwargs: Any,
) -> FormControl:
    """Create a control of the given type."""
    cls = get_control_class(type_name)
    return cls(name, storage, properties, settings, **kwargs)


def from_args(arglist: list[Any] | tuple[Any, ...]) -> FormControl:
    """Create a control from ``[type, name, storage, caption, properties, settings]``.

    Missing trailing entries are treated as None.
    """
    arglist = list(arglist)
    if len(arglist) > 6:
        raise TypeError(f"from_args() takes at most 6 arguments ({len(arglist)} given)")
    type_name, name, storage, caption, properties, settings = arglist + [None] * (6 - len(arglist))

    if not isinstance(type_name, str):
        raise InvalidControlTypeError(repr(type_name), list(_control_registry))
    cls = get_control_class(type_name)

    if properties is None:
        properties = {}
    if settings is None:
        settings = {}

    return cls(name, storage, properties, settings, caption=caption)
