"""Action/filter hooks that let a site extend controls without subclassing.

- ``validator_<name>`` filters check values for validator names that are
  neither callables nor ``FormValidators`` functions. The filtered value
  starts as an empty list and comes back as the hook's own errors; the
  errors collected so far are passed alongside as context::

      @filter("validator_username_free")
      async def username_free(new_errors, errors, value, control, container):
          if value in taken_usernames:
              new_errors.append("That username is taken.")
          return new_errors

- ``field_load_<target>`` / ``field_save_<target>`` back ``hook:<target>``
  storage.
- ``control_validated`` / ``control_saved`` fire after those steps.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")

VALIDATOR_HOOK_PREFIX = "validator_"
FIELD_LOAD_HOOK_PREFIX = "field_load_"
FIELD_SAVE_HOOK_PREFIX = "field_save_"

CONTROL_VALIDATED = "control_validated"
CONTROL_SAVED = "control_saved"


@dataclass(order=True)
class HookHandler:
    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    """Actions and filters by hook name; lower priority numbers run first."""

    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)
        self._filters: dict[str, list[HookHandler]] = defaultdict(list)

    def add_action(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._actions[hook_name].append(HookHandler(priority, callback))
        self._actions[hook_name].sort()

    def add_filter(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._filters[hook_name].append(HookHandler(priority, callback))
        self._filters[hook_name].sort()

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._actions, hook_name, callback)

    def remove_filter(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._filters, hook_name, callback)

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    def has_filter(self, hook_name: str) -> bool:
        return bool(self._filters.get(hook_name))

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        from skjema.lib.observability import span

        with span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in self._actions.get(hook_name, []):
                await handler.call(*args, **kwargs)

    async def apply_filters(self, hook_name: str, value: T, *args: Any, **kwargs: Any) -> T:
        """Pass ``value`` through each filter in turn and return the result."""
        from skjema.lib.observability import span

        with span(f"hook.filter:{hook_name}", hook_name=hook_name):
            for handler in self._filters.get(hook_name, []):
                value = await handler.call(value, *args, **kwargs)
            return value

    def clear(self) -> None:
        self._actions.clear()
        self._filters.clear()

    @staticmethod
    def _remove(
        registry: dict[str, list[HookHandler]],
        hook_name: str,
        callback: Callable[..., Any],
    ) -> bool:
        handlers = registry.get(hook_name, [])
        for i, handler in enumerate(handlers):
            if handler.callback is callback:
                handlers.pop(i)
                return True
        return False


hooks = HookRegistry()


def action(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Register the decorated function as an action on the global registry."""

    def decorator(func: Callable) -> Callable:
        hooks.add_action(hook_name, func, priority)
        return func

    return decorator


def filter(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Register the decorated function as a filter on the global registry."""

    def decorator(func: Callable) -> Callable:
        hooks.add_filter(hook_name, func, priority)
        return func

    return decorator
