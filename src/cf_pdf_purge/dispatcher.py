"""Hook registration and dispatch."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

Action = Callable[..., None]
Filter = Callable[..., Any]


@dataclass
class HookDispatcher:
    """
    Maps hook names to handlers.

    Actions are called for side effects. Filters are chained: each one receives
    the previous one's return value as its first argument.
    """

    actions: dict[str, list[Action]] = field(default_factory=lambda: defaultdict(list))
    filters: dict[str, list[Filter]] = field(default_factory=lambda: defaultdict(list))

    def add_action(self, hook: str, handler: Action) -> None:
        self.actions[hook].append(handler)

    def add_filter(self, hook: str, handler: Filter) -> None:
        self.filters[hook].append(handler)

    def do_action(self, hook: str, *args: Any) -> None:
        for handler in self.actions.get(hook, ()):
            handler(*args)

    def apply_filters(self, hook: str, value: Any, *args: Any) -> Any:
        for handler in self.filters.get(hook, ()):
            value = handler(value, *args)
        return value
