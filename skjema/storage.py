"""Storage targets for control values and the descriptor locator.

A control's storage is either a ``FormStorage`` object or a descriptor string
of the form ``"scheme:target"``:

- ``null:null`` - no storage; load() and save() do nothing
- ``memory:<namespace>`` - an in-process dict shared by every control using
  the same namespace
- ``hook:<target>`` - values are loaded through the ``field_load_<target>``
  filter and saved through the ``field_save_<target>`` action

Further schemes can be added with ``register_scheme()``.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Callable, Protocol, runtime_checkable

from skjema.exceptions import StorageDescriptorError
from skjema.lib.hooks import FIELD_LOAD_HOOK_PREFIX, FIELD_SAVE_HOOK_PREFIX, hooks

logger = logging.getLogger(__name__)


@runtime_checkable
class FormStorage(Protocol):
    """Interface for places a control can load its value from and save it to."""

    async def field_load(self, name: str) -> Any:
        """Return the stored value for a field, or None."""
        ...

    async def field_save(self, name: str, value: Any) -> None:
        """Persist a field's value."""
        ...


class MappingStorage:
    """Store values in a mutable mapping, e.g. a request session."""

    def __init__(self, mapping: MutableMapping[str, Any], prefix: str = "") -> None:
        self._mapping = mapping
        self._prefix = prefix

    async def field_load(self, name: str) -> Any:
        return self._mapping.get(self._prefix + name)

    async def field_save(self, name: str, value: Any) -> None:
        self._mapping[self._prefix + name] = value

    def __repr__(self) -> str:
        return f"MappingStorage(prefix={self._prefix!r})"


_memory_namespaces: dict[str, dict[str, Any]] = {}


class MemoryStorage(MappingStorage):
    """Store values in a named in-process namespace."""

    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace
        super().__init__(_memory_namespaces.setdefault(namespace, {}))

    def __repr__(self) -> str:
        return f"MemoryStorage({self.namespace!r})"


def clear_memory_storage() -> None:
    """Drop every in-process namespace. Useful for testing."""
    _memory_namespaces.clear()


class HookStorage:
    """Delegate loading and saving to filter/action hooks."""

    def __init__(self, target: str) -> None:
        self.target = target

    async def field_load(self, name: str) -> Any:
        return await hooks.apply_filters(f"{FIELD_LOAD_HOOK_PREFIX}{self.target}", None, name)

    async def field_save(self, name: str, value: Any) -> None:
        await hooks.do_action(f"{FIELD_SAVE_HOOK_PREFIX}{self.target}", value, name)

    def __repr__(self) -> str:
        return f"HookStorage({self.target!r})"


StorageFactory = Callable[[str], "FormStorage | None"]

_schemes: dict[str, StorageFactory] = {
    "null": lambda target: None,
    "memory": MemoryStorage,
    "hook": HookStorage,
}


def register_scheme(scheme: str, factory: StorageFactory) -> None:
    """Register a factory that builds storage for ``scheme:<target>`` descriptors."""
    _schemes[scheme] = factory


def resolve(descriptor: str) -> FormStorage | None:
    """Resolve a ``scheme:target`` descriptor into a storage object."""
    scheme, sep, target = descriptor.partition(":")
    if not sep:
        raise StorageDescriptorError(
            f"Invalid storage descriptor '{descriptor}': expected 'scheme:target'"
        )

    factory = _schemes.get(scheme)
    if factory is None:
        known = ", ".join(sorted(_schemes))
        raise StorageDescriptorError(
            f"Unknown storage scheme '{scheme}' in '{descriptor}'. Use one of: {known}."
        )

    storage = factory(target)
    logger.debug("Resolved storage %r to %r", descriptor, storage)
    return storage
