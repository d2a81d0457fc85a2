"""
Action Accumulator

An insertion-ordered set of action codes with a declarative suppression
table. Adding a code that an already-present code suppresses is a no-op;
adding a code that outranks present codes evicts them. Either way the set
never holds two rungs of the same ladder (e.g. ``reduceSalt`` and
``reduceSaltImmediately``).
"""
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Iterator, List

from .base import ActionCode

# stronger action -> weaker actions it makes redundant
SUPPRESSES: Dict[ActionCode, FrozenSet[ActionCode]] = {
    ActionCode.REDUCE_SALT_IMMEDIATELY: frozenset({ActionCode.REDUCE_SALT, ActionCode.WATCH_SALT}),
    ActionCode.REDUCE_SALT:             frozenset({ActionCode.WATCH_SALT}),
    ActionCode.REDUCE_CARBS:            frozenset({ActionCode.WATCH_CARBS}),
}


def is_suppressed(action: ActionCode, present: Iterable[ActionCode]) -> bool:
    """True when any of ``present`` makes ``action`` redundant."""
    return any(action in SUPPRESSES.get(other, ()) for other in present)


class ActionSet:
    """Ordered, de-duplicating accumulator for recommended actions."""

    def __init__(self) -> None:
        self._actions: Dict[ActionCode, None] = {}

    def add(self, *actions: ActionCode) -> None:
        for action in actions:
            self._add_one(action)

    def _add_one(self, action: ActionCode) -> bool:
        if action in self._actions:
            return False
        if is_suppressed(action, self._actions):
            return False
        for weaker in SUPPRESSES.get(action, ()):
            self._actions.pop(weaker, None)
        self._actions[action] = None
        return True

    def __contains__(self, action: object) -> bool:
        return action in self._actions

    def __iter__(self) -> Iterator[ActionCode]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def ordered(self) -> List[ActionCode]:
        """Actions in the order their rule groups added them."""
        return list(self._actions)

    def freeze(self) -> FrozenSet[ActionCode]:
        return frozenset(self._actions)
