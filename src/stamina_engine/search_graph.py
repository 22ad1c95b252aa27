"""Search Graph — arena DAG for the windowed beam search over foot choices.

Node:       a :class:`CombinedState` plus the foot used to reach it.
Edge:       "assign the next note to this foot" (two children per note).
Ownership:  the graph owns every node in a flat arena; nodes are addressed
            by integer handles and freed handles are reused.

Design choices:
    - A node has a single parent handle (for path reconstruction) and a
      small list of child handles (for expansion and pruning).
    - "Deleting a subtree" only returns handles to the free list.
    - Ranking uses a binary heap keyed on ``max_fatigue``; ties fall back to
      insertion order so results are deterministic.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .note import FEET, Foot, Note
from .state import CombinedState
from .step_params import StepParams

logger = logging.getLogger(__name__)


@dataclass
class _Node:
    state: CombinedState
    foot: Foot | None
    parent: int | None
    children: list[int] = field(default_factory=list)


class SearchGraph:
    """Arena of search nodes rooted at the zero :class:`CombinedState`.

    Args:
        params: Step constants used for every state transition.
        root_state: State of the root node. Defaults to both feet fresh.
    """

    def __init__(self, params: StepParams, root_state: CombinedState | None = None) -> None:
        self.params = params
        self._nodes: list[_Node | None] = []
        self._free: list[int] = []
        self.root: int = self.add_node(root_state or CombinedState())

    # ── Arena primitives ──────────────────────────────────────

    def add_node(
        self,
        state: CombinedState,
        parent: int | None = None,
        foot: Foot | None = None,
    ) -> int:
        """Store *state* as a new node (child of *parent*) and return its handle."""
        node = _Node(state=state, foot=foot, parent=parent)
        if self._free:
            handle = self._free.pop()
            self._nodes[handle] = node
        else:
            handle = len(self._nodes)
            self._nodes.append(node)
        if parent is not None:
            self._node(parent).children.append(handle)
        return handle

    def _node(self, handle: int) -> _Node:
        node = self._nodes[handle] if 0 <= handle < len(self._nodes) else None
        if node is None:
            raise KeyError(f"No live node with handle {handle}")
        return node

    def _release(self, handle: int) -> None:
        self._nodes[handle] = None
        self._free.append(handle)

    def __getitem__(self, handle: int) -> CombinedState:
        return self._node(handle).state

    def __contains__(self, handle: int) -> bool:
        return 0 <= handle < len(self._nodes) and self._nodes[handle] is not None

    def node_count(self) -> int:
        return len(self._nodes) - len(self._free)

    def foot(self, handle: int) -> Foot | None:
        return self._node(handle).foot

    def parent(self, handle: int) -> int | None:
        return self._node(handle).parent

    def children(self, handle: int) -> list[int]:
        return list(self._node(handle).children)

    # ── Traversal ─────────────────────────────────────────────

    def ancestor(self, handle: int, n: int) -> int:
        """Return the node *n* levels above *handle* (``n == 0`` is itself).

        Raises:
            ValueError: If the walk runs past the root.
        """
        current = handle
        for _ in range(n):
            parent = self._node(current).parent
            if parent is None:
                raise ValueError(f"Node {handle} has fewer than {n} ancestors")
            current = parent
        return current

    def descendants(self, handle: int) -> list[int]:
        """All descendants of *handle*, breadth first, excluding itself."""
        found: list[int] = []
        layer = self._node(handle).children
        while layer:
            found.extend(layer)
            layer = [c for n in layer for c in self._node(n).children]
        return found

    def path(self, handle: int) -> list[int]:
        """Handles from the root down to *handle*, inclusive."""
        walk = [handle]
        parent = self._node(handle).parent
        while parent is not None:
            walk.append(parent)
            parent = self._node(parent).parent
        walk.reverse()
        return walk

    # ── Search steps ──────────────────────────────────────────

    def expand(self, frontier: Sequence[int], notes: Iterable[Note]) -> list[int]:
        """Create every Left/Right assignment of *notes* below each frontier node.

        Returns:
            The deepest nodes created (``len(frontier) * 2**len(notes)``).
            With no notes the frontier itself is returned.
        """
        layer: list[int] = list(frontier)
        for note in notes:
            next_layer: list[int] = []
            for handle in layer:
                state = self._node(handle).state
                for foot in FEET:
                    child = self.add_node(state.step(foot, note, self.params), handle, foot)
                    next_layer.append(child)
            layer = next_layer
        return layer

    def best_ancestors(self, leaves: Sequence[int], depth: int, beam_width: int) -> list[int]:
        """Pick up to *beam_width* distinct ancestors of the most fatigued leaves.

        Leaves are visited by ``max_fatigue`` descending (insertion order on
        ties); each maps to its ancestor *depth* levels up, and the first
        *beam_width* distinct ancestors are returned in that order.
        """
        if beam_width <= 0:
            return []

        heap = [(-self._node(h).state.max_fatigue, order, h) for order, h in enumerate(leaves)]
        heapq.heapify(heap)

        best: list[int] = []
        seen: set[int] = set()
        while heap and len(best) < beam_width:
            _, _, leaf = heapq.heappop(heap)
            ancestor = self.ancestor(leaf, depth)
            if ancestor not in seen:
                seen.add(ancestor)
                best.append(ancestor)
        return best

    def remove_descendants(self, handles: Iterable[int]) -> None:
        """Free every descendant of each node in *handles*."""
        for handle in handles:
            node = self._node(handle)
            for d in self.descendants(handle):
                self._release(d)
            node.children.clear()

    def discard_unselected(self, previous: Iterable[int], selected: Iterable[int]) -> None:
        """Free the branches of a round that no longer lead to *selected*.

        Every child of a *previous* frontier node that was not selected is
        freed with its subtree. Nodes left without children are then freed
        up the parent chain, stopping at the root or at a selected node.
        """
        keep = set(selected)
        for handle in previous:
            node = self._node(handle)
            for child in list(node.children):
                if child not in keep:
                    for d in self.descendants(child):
                        self._release(d)
                    self._release(child)
                    node.children.remove(child)
            self._release_dead_chain(handle, keep)

    def _release_dead_chain(self, handle: int, keep: set[int]) -> None:
        current: int | None = handle
        while current is not None and current != self.root and current not in keep:
            node = self._node(current)
            if node.children:
                return
            parent = node.parent
            self._release(current)
            if parent is not None:
                self._node(parent).children.remove(current)
            current = parent
