"""State graphs: LR(1) states and the transitions between them."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Sequence

from lrtable.grammar import Grammar, RuleSymbol, Symbol
from lrtable.itemset import Itemset

MAX_STATES = 0xFFFF


def _num_digits(i: int) -> int:
    return len(str(i))


def _fmt_sym(grm: Grammar, sym: Symbol) -> str:
    if isinstance(sym, RuleSymbol):
        return grm.rule_name(sym.ridx)
    return f"'{grm.token_name(sym.tidx) or ''}'"


class StateGraph:
    """A graph of ``(core, closed)`` itemset pairs connected by symbol-labelled edges."""

    def __init__(
        self,
        states: Sequence[tuple[Itemset, Itemset]],
        start_state: int,
        edges: Sequence[Mapping[Symbol, int]],
    ) -> None:
        if len(states) > MAX_STATES:
            raise ValueError(f"too many states: {len(states)} (at most {MAX_STATES})")
        self._states = list(states)
        self.start_state = start_state
        self._edges = [dict(e) for e in edges]

    def iter_stidxs(self) -> Iterator[int]:
        """Iterate over every state index in order."""
        return iter(range(len(self._states)))

    def closed_state(self, stidx: int) -> Itemset:
        """Return the closed itemset of state ``stidx``."""
        return self._states[stidx][1]

    def iter_closed_states(self) -> Iterator[Itemset]:
        """Iterate over all closed states in order."""
        return (closed for _, closed in self._states)

    def core_state(self, stidx: int) -> Itemset:
        """Return the core itemset of state ``stidx``."""
        return self._states[stidx][0]

    def iter_core_states(self) -> Iterator[Itemset]:
        """Iterate over all core states in order."""
        return (core for core, _ in self._states)

    def all_states_len(self) -> int:
        """Return the number of states."""
        return len(self._states)

    def edge(self, stidx: int, sym: Symbol) -> int | None:
        """Return the state reached from ``stidx`` over ``sym``, or None."""
        if not 0 <= stidx < len(self._edges):
            return None
        return self._edges[stidx].get(sym)

    def edges(self, stidx: int) -> Mapping[Symbol, int]:
        """Return the outgoing edges of state ``stidx``."""
        return MappingProxyType(self._edges[stidx])

    def all_edges_len(self) -> int:
        """Return the total number of edges."""
        return sum(len(e) for e in self._edges)

    def pp(self, grm: Grammar, core_states: bool) -> str:
        """Pretty print the core (or closed) states and all edges."""
        width = _num_digits(self.all_states_len())
        eof = grm.eof_token_idx()
        out: list[str] = []
        for stidx, (core_st, closed_st) in enumerate(self._states):
            if stidx != self.start_state:
                out.append("\n")
            out.append(f"{stidx}:{' ' * (width - _num_digits(stidx))}")
            st = core_st if core_states else closed_st
            for i, ((pidx, dot), ctx) in enumerate(st.items.items()):
                if i == 0:
                    padding = 0
                else:
                    out.append("\n ")
                    padding = width
                rule = grm.rule_name(grm.prod_to_rule(pidx))
                out.append(f"{' ' * padding} [{rule} ->")
                prod = grm.prod(pidx)
                for sidx, sym in enumerate(prod):
                    if sidx == dot:
                        out.append(" .")
                    out.append(f" {_fmt_sym(grm, sym)}")
                if dot == len(prod):
                    out.append(" .")
                names = (
                    "'$'" if tidx == eof else f"'{grm.token_name(tidx)}'"
                    for tidx in grm.iter_tidxs()
                    if ctx >> tidx & 1
                )
                out.append(", {" + ", ".join(names) + "}]")
            for sym, target in self._edges[stidx].items():
                out.append(f"\n{' ' * (width + 2)}{_fmt_sym(grm, sym)} -> {target}")
        return "".join(out)

    def pp_core_states(self, grm: Grammar) -> str:
        """Pretty print the core states and all edges."""
        return self.pp(grm, True)

    def pp_closed_states(self, grm: Grammar) -> str:
        """Pretty print the closed states and all edges."""
        return self.pp(grm, False)