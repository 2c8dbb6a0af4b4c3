"""Action registry — every host action is a spec registered at import time.

Usage:
    action_break_apart_svg = register(
        ActionSpec(name="breakApartSvg", label="buttons.breakApartSvg", perform=perform, ...)
    )

Adding a new action = creating one module that calls `register`. Nothing else changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel

if TYPE_CHECKING:
    from breakapart.models.elements import BaseElement
    from breakapart.models.scene import ActionResult, App, AppState

logger = logging.getLogger(__name__)

PerformFn = Callable[["list[BaseElement]", "AppState", Any, "App"], "ActionResult"]
PredicateFn = Callable[["list[BaseElement]", "AppState", "App"], bool]


class PanelDescriptor(BaseModel):
    """How the host should render an action's button."""

    name: str
    title: str
    icon: str
    hidden: bool = False
    visible: bool = True


@dataclass
class ActionSpec:
    name: str
    label: str
    perform: PerformFn
    predicate: PredicateFn | None = None
    panel: Callable[["list[BaseElement]", "AppState", "App"], PanelDescriptor] | None = None
    icon: str = ""
    track_event: dict[str, str] = field(default_factory=dict)


class ActionRegistry:
    """Registry of host actions, keyed by name."""

    def __init__(self) -> None:
        self._actions: dict[str, ActionSpec] = {}

    def register(self, spec: ActionSpec) -> None:
        if spec.name in self._actions:
            raise ValueError(f"Duplicate action name: {spec.name}")
        self._actions[spec.name] = spec
        logger.debug("Registered action %s", spec.name)

    def get(self, name: str) -> ActionSpec:
        return self._actions[name]

    def all(self) -> list[ActionSpec]:
        return sorted(self._actions.values(), key=lambda s: s.name)

    @property
    def count(self) -> int:
        return len(self._actions)


# Module-level singleton
_registry = ActionRegistry()


def get_registry() -> ActionRegistry:
    return _registry


def register(spec: ActionSpec) -> ActionSpec:
    """Register an action with the module-level registry and return it."""
    _registry.register(spec)
    return spec
