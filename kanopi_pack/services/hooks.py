"""
Host extension points for asset registration.

The loader never stores callbacks; the host owns a scheduler and fires a phase
at the right point of its request lifecycle.
"""
import itertools
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.config import settings

logger = logging.getLogger(__name__)

FRONTEND_PHASE = "frontend"
EDITOR_PHASE = "block_editor"


class HookScheduler:
    """Named phases of prioritized callbacks; lower priorities run first."""

    def __init__(self):
        # Storage: {phase: [(priority, insertion_order, callback)]}
        self._actions: Dict[str, List[Tuple[int, int, Callable[..., Any]]]] = {}
        self._counter = itertools.count()

    def add_action(
        self, phase: str, callback: Callable[..., Any], priority: Optional[int] = None
    ) -> None:
        if priority is None:
            priority = settings.KANOPI_DEFAULT_PRIORITY
        self._actions.setdefault(phase, []).append(
            (priority, next(self._counter), callback)
        )

    def has_actions(self, phase: str) -> bool:
        return bool(self._actions.get(phase))

    def do_action(self, phase: str, *args: Any) -> int:
        """
        Run every callback of a phase with the given arguments.

        Returns:
            Number of callbacks run
        """
        actions = sorted(self._actions.get(phase, []), key=lambda action: action[:2])
        for _, _, callback in actions:
            callback(*args)

        logger.debug(f"Ran {len(actions)} callbacks for phase {phase}")
        return len(actions)

    def clear(self, phase: Optional[str] = None) -> None:
        if phase is None:
            self._actions.clear()
        else:
            self._actions.pop(phase, None)


# Process-wide scheduler used by registries that are not given their own
default_scheduler = HookScheduler()
