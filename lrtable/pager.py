"""Construction of LR(1) state graphs using Pager's weak compatibility merging."""

from __future__ import annotations

from collections import defaultdict

from lrtable.compat import weakly_compatible, weakly_merge
from lrtable.gc import gc_states
from lrtable.grammar import Grammar, Symbol
from lrtable.itemset import Itemset
from lrtable.stategraph import MAX_STATES, StateGraph

_START_STATE = 0


def _next_todo(closed_states: list[Itemset | None], todo_off: int) -> int:
    for stidx in range(todo_off, len(closed_states)):
        if closed_states[stidx] is None:
            return stidx
    return closed_states.index(None)


def _successors(grm: Grammar, cl_state: Itemset) -> list[tuple[Symbol, Itemset]]:
    seen: set[Symbol] = set()
    out: list[tuple[Symbol, Itemset]] = []
    for pidx, dot in cl_state.items:
        prod = grm.prod(pidx)
        if dot == len(prod):
            continue
        sym = prod[dot]
        if sym in seen:
            continue
        seen.add(sym)
        out.append((sym, cl_state.goto(grm, sym)))
    return out


def pager_stategraph(grm: Grammar) -> StateGraph:
    """Build the state graph of ``grm``."""
    firsts = grm.firsts()

    state0 = Itemset()
    state0.add(grm.start_prod(), 0, 1 << grm.eof_token_idx())
    core_states: list[Itemset] = [state0]
    # A closed state of None marks a state that still needs processing.
    closed_states: list[Itemset | None] = [None]
    edges: list[dict[Symbol, int]] = [{}]
    candidates: defaultdict[Symbol, list[int]] = defaultdict(list)

    todo = 1
    todo_off = 0
    while todo:
        state_i = _next_todo(closed_states, todo_off)
        todo_off = state_i + 1
        todo -= 1

        cl_state = core_states[state_i].close(grm, firsts)
        closed_states[state_i] = cl_state

        for sym, nstate in _successors(grm, cl_state):
            cnds = candidates[sym]
            # An identical state must be reused directly: weak compatibility
            # is not guaranteed to be reflexive.
            same = next((c for c in cnds if core_states[c] == nstate), None)
            if same is not None:
                edges[state_i][sym] = same
                continue
            match = next(
                (c for c in cnds if weakly_compatible(core_states[c], nstate)), None
            )
            if match is not None:
                edges[state_i][sym] = match
                if weakly_merge(core_states[match], nstate) and closed_states[match] is not None:
                    closed_states[match] = None
                    todo += 1
            else:
                stidx = len(core_states)
                if stidx > MAX_STATES:
                    raise ValueError(f"too many states (at most {MAX_STATES})")
                cnds.append(stidx)
                edges[state_i][sym] = stidx
                edges.append({})
                closed_states.append(None)
                core_states.append(nstate)
                todo += 1

    states = list(zip(core_states, closed_states))
    kept_states, kept_edges = gc_states(states, _START_STATE, edges)
    return StateGraph(kept_states, _START_STATE, kept_edges)