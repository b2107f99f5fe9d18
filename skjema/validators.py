"""Validator registration and the built-in named validators.

A validator is called as ``validator(value, control, container, *extra)`` and
returns a list of error descriptions, empty when the value is acceptable.
Validators may be plain or async functions.
"""

from __future__ import annotations

import inspect
import itertools
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlparse

if TYPE_CHECKING:
    from skjema.controls.base import FormControl

_anonymous_ids = itertools.count(1)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ValidatorHandle:
    """A registered validator together with the extra arguments it is called with."""

    key: str
    validator: Any
    args: tuple = field(default_factory=tuple)


def validator_key(validator: Any) -> str:
    """Derive the registration key for a validator.

    - ``"validate_required"`` -> ``"validate_required"``
    - ``(Owner, "method")`` or a bound method -> ``"Owner:method"``
    - a named function -> ``"module.qualname"``
    - anything else callable -> a fresh ``"<anonymous>#n"`` key
    """
    if isinstance(validator, ValidatorHandle):
        return validator.key
    if isinstance(validator, str):
        return validator
    if isinstance(validator, tuple) and len(validator) == 2:
        owner, method = validator
        return f"{_owner_name(owner)}:{method}"
    if inspect.ismethod(validator):
        return f"{_owner_name(validator.__self__)}:{validator.__name__}"
    name = getattr(validator, "__qualname__", None)
    if inspect.isfunction(validator) and name and "<lambda>" not in name:
        return f"{validator.__module__}.{name}"
    return f"<anonymous>#{next(_anonymous_ids)}"


def _owner_name(owner: Any) -> str:
    if isinstance(owner, str):
        return owner
    if isinstance(owner, type):
        return owner.__name__
    return type(owner).__name__


def resolve_callable(validator: Any) -> Callable[..., Any] | None:
    """Return the function to call for a validator, or None if it must go through hooks."""
    if isinstance(validator, tuple) and len(validator) == 2:
        owner, method = validator
        fn = getattr(owner, method, None)
        return fn if callable(fn) else None
    if callable(validator):
        return validator
    if isinstance(validator, str) and not validator.startswith("_"):
        fn = getattr(FormValidators, validator, None)
        if callable(fn):
            return fn
    return None


async def call_validator(fn: Callable[..., Any], *args: Any) -> list[str]:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return list(result or [])


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value is False


class FormValidators:
    """Named validators addressable by string, e.g. ``add_validator("validate_required")``.

    Each takes ``(value, control, container, ...)`` and an optional trailing
    ``warning`` that replaces the default message.
    """

    @staticmethod
    def validate_required(
        value: Any,
        control: FormControl,
        container: Any,
        warning: str | None = None,
    ) -> list[str]:
        if _is_empty(value):
            return [warning or "A value for this field is required."]
        return []

    @staticmethod
    def validate_email(
        value: Any,
        control: FormControl,
        container: Any,
        warning: str | None = None,
    ) -> list[str]:
        if _is_empty(value):
            return []
        if not EMAIL_PATTERN.match(str(value)):
            return [warning or "Value must be a valid Email Address."]
        return []

    @staticmethod
    def validate_url(
        value: Any,
        control: FormControl,
        container: Any,
        schemes: tuple[str, ...] = ("http", "https"),
        warning: str | None = None,
    ) -> list[str]:
        if _is_empty(value):
            return []
        parsed = urlparse(str(value))
        if parsed.scheme not in schemes or not parsed.netloc:
            return [warning or "Value must be a valid URL."]
        return []

    @staticmethod
    def validate_regex(
        value: Any,
        control: FormControl,
        container: Any,
        pattern: str,
        warning: str | None = None,
    ) -> list[str]:
        if _is_empty(value):
            return []
        if not re.search(pattern, str(value)):
            return [warning or "The value does not meet submission requirements."]
        return []

    @staticmethod
    def validate_range(
        value: Any,
        control: FormControl,
        container: Any,
        min_value: float,
        max_value: float,
        warning: str | None = None,
    ) -> list[str]:
        if _is_empty(value):
            return []
        try:
            number = float(value)
        except (TypeError, ValueError):
            return [warning or "The value must be a number."]
        if number < min_value:
            return [warning or f"The value entered is lesser than the minimum of {min_value:g}."]
        if number > max_value:
            return [warning or f"The value entered is greater than the maximum of {max_value:g}."]
        return []

    @staticmethod
    def validate_length(
        value: Any,
        control: FormControl,
        container: Any,
        min_length: int = 0,
        max_length: int | None = None,
        warning: str | None = None,
    ) -> list[str]:
        length = len(value) if value is not None else 0
        if length < min_length:
            return [warning or f"The value must be at least {min_length} characters long."]
        if max_length is not None and length > max_length:
            return [warning or f"The value must be at most {max_length} characters long."]
        return []

    @staticmethod
    def validate_same(
        value: Any,
        control: FormControl,
        container: Any,
        matchwith: str | FormControl,
        warning: str | None = None,
    ) -> list[str]:
        if isinstance(matchwith, str):
            if container is None or matchwith not in container:
                return [warning or f'The field "{matchwith}" to compare with does not exist.']
            matchwith = container[matchwith]
        if value != matchwith.value:
            return [warning or "The value of this field must match the value of the previous field."]
        return []
