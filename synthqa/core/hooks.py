"""Lifecycle hook registry.

Hooks are stored per kind in insertion order. A registry belongs to one
scope: the run-global registry on the controller holds ``before_all`` and
``after_all`` hooks, each journey owns a registry for ``before`` and
``after`` hooks.

All hooks of one kind run as a single concurrent batch. Every callback in
the batch is awaited before the first failure (in registration order) is
raised, so one failing hook never prevents its siblings from running.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from synthqa.errors import ErrorContext, HookRegistrationError

logger = logging.getLogger(__name__)


class HookScope(str, Enum):
    """Where a hook applies."""

    RUN = "run"
    JOURNEY = "journey"


class HookKind(str, Enum):
    """Lifecycle phases a hook can be bound to."""

    BEFORE_ALL = "before_all"
    AFTER_ALL = "after_all"
    BEFORE = "before"
    AFTER = "after"

    @property
    def scope(self) -> HookScope:
        if self in (HookKind.BEFORE_ALL, HookKind.AFTER_ALL):
            return HookScope.RUN
        return HookScope.JOURNEY


@dataclass(frozen=True)
class HookArgs:
    """Arguments passed to every hook callback.

    Attributes:
        env: Environment name of the run (e.g. "production").
        params: Run parameters.
    """

    env: str | None = None
    params: dict[str, Any] = field(default_factory=dict)


HookCallback = Callable[[HookArgs], Awaitable[None] | None]


@dataclass(frozen=True)
class Hook:
    """A callback bound to a lifecycle phase."""

    kind: HookKind
    callback: HookCallback

    @property
    def scope(self) -> HookScope:
        return self.kind.scope


async def _invoke(callback: HookCallback, args: HookArgs) -> None:
    result = callback(args)
    if inspect.isawaitable(result):
        await result


class HookRegistry:
    """Ordered hook lists for one scope."""

    def __init__(self, scope: HookScope, owner: str | None = None) -> None:
        self.scope = scope
        self.owner = owner
        self._hooks: dict[HookKind, list[Hook]] = {
            kind: [] for kind in HookKind if kind.scope is scope
        }

    def add_hook(self, kind: HookKind | str, callback: HookCallback) -> Hook:
        """Append ``callback`` to the list for ``kind``.

        Raises:
            HookRegistrationError: If ``kind`` does not belong to this scope.
        """
        kind = HookKind(kind)
        if kind not in self._hooks:
            raise HookRegistrationError(
                message=f"'{kind.value}' hooks cannot be registered in {self.scope.value} scope",
                context=ErrorContext(
                    journey_name=self.owner,
                    extra={"kind": kind.value, "scope": self.scope.value},
                ),
            )
        hook = Hook(kind=kind, callback=callback)
        self._hooks[kind].append(hook)
        return hook

    def hooks(self, kind: HookKind | str) -> list[Hook]:
        """Hooks registered for ``kind``, in insertion order."""
        return list(self._hooks.get(HookKind(kind), []))

    def clear(self) -> None:
        for hooks in self._hooks.values():
            hooks.clear()

    def __len__(self) -> int:
        return sum(len(hooks) for hooks in self._hooks.values())

    async def run_batch(self, kind: HookKind | str, args: HookArgs) -> None:
        """Run every hook of ``kind`` concurrently with the same ``args``.

        Raises:
            Exception: The first failure, in registration order, once every
                hook in the batch has finished.
        """
        kind = HookKind(kind)
        hooks = self.hooks(kind)
        if not hooks:
            return

        where = f" for ({self.owner})" if self.owner else ""
        logger.debug(f"Runner: {kind.value} hooks{where}")

        outcomes = await asyncio.gather(
            *(_invoke(hook.callback, args) for hook in hooks),
            return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            logger.debug(f"Runner: {len(failures)} of {len(hooks)} {kind.value} hooks failed{where}")
            raise failures[0]
