"""
Org Chart Kernel — Expansion State v1.0

Which nodes currently show their children in the tree diagram.

ExpansionState is an immutable snapshot: every mutation returns a new
value, so a layout pass never observes a half-applied change.
ExpansionStateManager is the caller-owned holder that swaps snapshots.
It is single-writer; a multi-threaded host must serialise calls.

Knows nothing about tree structure beyond ``level`` (roots are always
expanded). Stale identifiers are harmless no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from .domain_types import LayoutNode, OrgNode


@dataclass(frozen=True)
class ExpansionState:
    """Set of expanded node ids."""

    expanded: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, ids: Iterable[str] = ()) -> "ExpansionState":
        return cls(expanded=frozenset(ids))

    def toggle(self, node_id: str) -> "ExpansionState":
        return ExpansionState(expanded=self.expanded ^ {node_id})

    def expand_all(self, ids: Iterable[str]) -> "ExpansionState":
        return ExpansionState(expanded=self.expanded | frozenset(ids))

    def collapse_all(self) -> "ExpansionState":
        return ExpansionState()

    def is_expanded(self, node: OrgNode | LayoutNode) -> bool:
        return node.level == 0 or node.id in self.expanded

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.expanded

    def __len__(self) -> int:
        return len(self.expanded)

    def snapshot_key(self) -> tuple:
        """Order-independent key suitable for memoisation."""
        return tuple(sorted(self.expanded))


class ExpansionStateManager:
    """
    Holds the current ExpansionState and a version counter.

    Each mutation replaces the snapshot (copy-on-write) and bumps the
    version; the caller re-runs layout afterwards.
    """

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self._state = ExpansionState.of(initial)
        self._version = 0

    # -- State access -------------------------------------------------------

    @property
    def state(self) -> ExpansionState:
        return self._state

    @property
    def version(self) -> int:
        return self._version

    def is_expanded(self, node: OrgNode | LayoutNode) -> bool:
        return self._state.is_expanded(node)

    # -- Mutation entry points ----------------------------------------------

    def toggle(self, node_id: str) -> ExpansionState:
        return self._replace(self._state.toggle(node_id))

    def expand_all(self, ids: Iterable[str]) -> ExpansionState:
        return self._replace(self._state.expand_all(ids))

    def collapse_all(self) -> ExpansionState:
        return self._replace(self._state.collapse_all())

    def _replace(self, new_state: ExpansionState) -> ExpansionState:
        self._state = new_state
        self._version += 1
        return new_state
