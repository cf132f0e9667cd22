"""Named lifecycle extension points around validate-then-persist.

Order on insert:
    before_validate -> before_insert -> (validate) -> before_save_after_validate
    -> INSERT -> after_insert -> after_save
Order on update:
    before_validate -> before_update -> (validate) -> before_save_after_validate
    -> UPDATE -> after_update -> after_save
"""

from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schemarecord.core.record import Record

HookCallback = Callable[["Record"], None]


class LifecycleHook(StrEnum):
    """Extension points. Values match the overridable Record method names."""

    BEFORE_VALIDATE = "before_validate"
    BEFORE_INSERT = "before_insert"
    BEFORE_UPDATE = "before_update"
    BEFORE_SAVE_AFTER_VALIDATE = "before_save_after_validate"
    AFTER_INSERT = "after_insert"
    AFTER_UPDATE = "after_update"
    AFTER_SAVE = "after_save"


PRE_INSERT: tuple[LifecycleHook, ...] = (LifecycleHook.BEFORE_VALIDATE, LifecycleHook.BEFORE_INSERT)
PRE_UPDATE: tuple[LifecycleHook, ...] = (LifecycleHook.BEFORE_VALIDATE, LifecycleHook.BEFORE_UPDATE)
POST_INSERT: tuple[LifecycleHook, ...] = (LifecycleHook.AFTER_INSERT, LifecycleHook.AFTER_SAVE)
POST_UPDATE: tuple[LifecycleHook, ...] = (LifecycleHook.AFTER_UPDATE, LifecycleHook.AFTER_SAVE)


class HookRegistry:
    """Ordered callbacks per extension point for one record."""

    def __init__(self) -> None:
        self._callbacks: dict[LifecycleHook, list[HookCallback]] = {hook: [] for hook in LifecycleHook}

    def register(self, hook: LifecycleHook, callback: HookCallback) -> HookCallback:
        """Add a callback. Returns it, so this also works as a decorator factory target."""
        self._callbacks[hook].append(callback)
        return callback

    def callbacks(self, hook: LifecycleHook) -> tuple[HookCallback, ...]:
        return tuple(self._callbacks[hook])

    def clear(self, hook: LifecycleHook | None = None) -> None:
        if hook is None:
            for callbacks in self._callbacks.values():
                callbacks.clear()
        else:
            self._callbacks[hook].clear()


def run_hooks(record: "Record", hooks: tuple[LifecycleHook, ...]) -> None:
    """Invoke each hook's method on record, then its registered callbacks."""
    for hook in hooks:
        getattr(record, hook.value)()
        for callback in record.hooks.callbacks(hook):
            callback(record)
