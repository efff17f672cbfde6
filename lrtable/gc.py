"""Removal of states that cannot be reached from the start state."""

from __future__ import annotations

from typing import Hashable, Mapping, Sequence, TypeVar

S = TypeVar("S")
K = TypeVar("K", bound=Hashable)


def _reachable(start_state: int, edges: Sequence[Mapping[K, int]]) -> set[int]:
    seen: set[int] = set()
    todo = [start_state]
    while todo:
        stidx = todo.pop()
        if stidx in seen:
            continue
        seen.add(stidx)
        todo.extend(t for t in edges[stidx].values() if t not in seen)
    return seen


def gc_states(
    states: Sequence[S],
    start_state: int,
    edges: Sequence[Mapping[K, int]],
) -> tuple[list[S], list[dict[K, int]]]:
    """Drop states unreachable from ``start_state`` and renumber the remaining edges.

    Returns a new ``(states, edges)`` pair in which every surviving state keeps
    its relative order and every edge points at the state's new index.
    """
    seen = _reachable(start_state, edges)
    if len(seen) == len(states):
        return list(states), [dict(e) for e in edges]

    offsets: list[int] = []
    kept_states: list[S] = []
    removed = 0
    for stidx, state in enumerate(states):
        offsets.append(stidx - removed)
        if stidx in seen:
            kept_states.append(state)
        else:
            removed += 1

    kept_edges = [
        {sym: offsets[target] for sym, target in st_edges.items()}
        for stidx, st_edges in enumerate(edges)
        if stidx in seen
    ]
    return kept_states, kept_edges