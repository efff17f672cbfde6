"""LR state tables: the action and goto tables derived from a state graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from lrtable.conflicts import Conflicts, StateTableError, StateTableErrorKind
from lrtable.grammar import AssocKind, Grammar, RuleSymbol, TokenSymbol
from lrtable.pager import pager_stategraph
from lrtable.stategraph import StateGraph


class ActionKind(Enum):
    """The kinds of entry in an action table."""

    SHIFT = "shift"
    REDUCE = "reduce"
    ACCEPT = "accept"
    ERROR = "error"


@dataclass(frozen=True)
class Action:
    """One entry of the action table.

    ``value`` is the target state of a shift or the production of a reduce,
    and None for accept and error.
    """

    kind: ActionKind
    value: int | None = None

    @classmethod
    def shift(cls, stidx: int) -> Action:
        """Shift to state ``stidx``."""
        return cls(ActionKind.SHIFT, stidx)

    @classmethod
    def reduce(cls, pidx: int) -> Action:
        """Reduce production ``pidx``."""
        return cls(ActionKind.REDUCE, pidx)

    @classmethod
    def accept(cls) -> Action:
        """Accept the input."""
        return cls(ActionKind.ACCEPT)

    @classmethod
    def error(cls) -> Action:
        """No valid action."""
        return cls(ActionKind.ERROR)


_ERROR = Action.error()
_ACCEPT = Action.accept()


class Minimiser(Enum):
    """The algorithm used to build the state graph."""

    PAGER = "pager"


def _set_bits(mask: int) -> Iterator[int]:
    bit = 0
    while mask:
        if mask & 1:
            yield bit
        mask >>= 1
        bit += 1


def _resolve_shift_reduce(
    grm: Grammar,
    current: Action,
    tidx: int,
    target: int,
    shift_reduce: list[tuple[int, int, int]],
    conflict_stidx: int,
) -> Action:
    """Return the action that wins a shift/reduce conflict."""
    pidx = current.value
    tidx_prec = grm.token_precedence(tidx)
    pidx_prec = grm.prod_precedence(pidx)
    if tidx_prec is None or pidx_prec is None:
        # Yacc's default is to favour the shift, and to report the conflict.
        shift_reduce.append((tidx, pidx, conflict_stidx))
        return Action.shift(target)
    if tidx_prec.level > pidx_prec.level:
        return Action.shift(target)
    if tidx_prec.level < pidx_prec.level:
        return current
    kinds = (tidx_prec.kind, pidx_prec.kind)
    if kinds == (AssocKind.LEFT, AssocKind.LEFT):
        return current
    if kinds == (AssocKind.RIGHT, AssocKind.RIGHT):
        return Action.shift(target)
    if kinds == (AssocKind.NONASSOC, AssocKind.NONASSOC):
        return _ERROR
    raise ValueError("Not supported.")


class StateTable:
    """The action and goto tables of a grammar, built from its state graph.

    Raises :class:`StateTableError` if the grammar has an accept/reduce conflict.
    """

    def __init__(self, grm: Grammar, sg: StateGraph) -> None:
        states_len = sg.all_states_len()
        tokens_len = grm.tokens_len()
        start_prod = grm.start_prod()
        eof = grm.eof_token_idx()

        actions = [[_ERROR] * tokens_len for _ in range(states_len)]
        gotos: list[list[int | None]] = [[None] * grm.rules_len() for _ in range(states_len)]
        state_actions: list[set[int]] = [set() for _ in range(states_len)]
        reduce_reduce: list[tuple[int, int, int]] = []
        shift_reduce: list[tuple[int, int, int]] = []
        final_state: int | None = None

        for stidx, state in enumerate(sg.iter_closed_states()):
            row = actions[stidx]
            for (pidx, dot), ctx in sorted(state.items.items()):
                if dot < grm.prod_len(pidx):
                    continue
                for tidx in _set_bits(ctx):
                    state_actions[stidx].add(tidx)
                    current = row[tidx]
                    is_accept = pidx == start_prod and tidx == eof
                    if current.kind is ActionKind.REDUCE:
                        if is_accept:
                            raise StateTableError(StateTableErrorKind.ACCEPT_REDUCE_CONFLICT, pidx)
                        # Reduce/reduce conflicts favour the earlier production.
                        if pidx < current.value:
                            reduce_reduce.append((pidx, current.value, stidx))
                            row[tidx] = Action.reduce(pidx)
                        elif pidx > current.value:
                            reduce_reduce.append((current.value, pidx, stidx))
                    elif current.kind is ActionKind.ACCEPT:
                        raise StateTableError(StateTableErrorKind.ACCEPT_REDUCE_CONFLICT, pidx)
                    elif current.kind is ActionKind.ERROR:
                        if is_accept:
                            if final_state is not None:
                                raise RuntimeError("more than one final state")
                            final_state = stidx
                            row[tidx] = _ACCEPT
                        else:
                            row[tidx] = Action.reduce(pidx)
                    else:
                        raise RuntimeError("internal error: shift before reduce")

            for sym, target in sg.edges(stidx).items():
                if isinstance(sym, RuleSymbol):
                    gotos[stidx][sym.ridx] = target
                    continue
                tidx = sym.tidx
                state_actions[stidx].add(tidx)
                current = row[tidx]
                if current.kind is ActionKind.SHIFT:
                    if current.value != target:
                        raise RuntimeError("internal error: conflicting shifts")
                elif current.kind is ActionKind.REDUCE:
                    row[tidx] = _resolve_shift_reduce(
                        grm, current, tidx, target, shift_reduce, stidx
                    )
                elif current.kind is ActionKind.ACCEPT:
                    raise RuntimeError("internal error: shift on accept")
                else:
                    row[tidx] = Action.shift(target)

        if final_state is None:
            raise RuntimeError("internal error: no final state")

        state_shifts: list[set[int]] = []
        core_reduces: list[set[int]] = []
        reduce_states: set[int] = set()
        for stidx, row in enumerate(actions):
            nt_depth: dict[tuple[int, int], int] = {}
            shifts: set[int] = set()
            only_reduces = True
            for tidx, action in enumerate(row):
                if action.kind is ActionKind.REDUCE:
                    pidx = action.value
                    nt_depth[(grm.prod_to_rule(pidx), grm.prod_len(pidx))] = pidx
                elif action.kind is ActionKind.SHIFT:
                    only_reduces = False
                    shifts.add(tidx)
                elif action.kind is ActionKind.ACCEPT:
                    only_reduces = False
            core = set(nt_depth.values())
            state_shifts.append(shifts)
            core_reduces.append(core)
            if only_reduces and len(core) == 1:
                reduce_states.add(stidx)

        self._actions = actions
        self._gotos = gotos
        self._state_actions = state_actions
        self._state_shifts = state_shifts
        self._core_reduces = core_reduces
        self._reduce_states = reduce_states
        self._conflicts = (
            Conflicts(reduce_reduce, shift_reduce) if reduce_reduce or shift_reduce else None
        )
        self.start_state = sg.start_state
        self.final_state = final_state

    def action(self, stidx: int, tidx: int) -> Action:
        """Return the action for state ``stidx`` and token ``tidx``."""
        return self._actions[stidx][tidx]

    def state_actions(self, stidx: int) -> Iterator[int]:
        """Iterate over the tokens with a non-empty action in state ``stidx``."""
        return iter(sorted(self._state_actions[stidx]))

    def state_shifts(self, stidx: int) -> Iterator[int]:
        """Iterate over the tokens with a shift action in state ``stidx``."""
        return iter(sorted(self._state_shifts[stidx]))

    def reduce_only_state(self, stidx: int) -> bool:
        """Return True if state ``stidx`` only reduces, always by equivalent productions."""
        return stidx in self._reduce_states

    def core_reduces(self, stidx: int) -> Iterator[int]:
        """Iterate over a minimal set of productions covering every reduction of ``stidx``."""
        return iter(sorted(self._core_reduces[stidx]))

    def goto(self, stidx: int, ridx: int) -> int | None:
        """Return the goto state for ``stidx`` and rule ``ridx``, or None."""
        return self._gotos[stidx][ridx]

    def conflicts(self) -> Conflicts | None:
        """Return the automatically resolved conflicts, or None if there were none."""
        return self._conflicts


def from_yacc(
    grm: Grammar, minimiser: Minimiser = Minimiser.PAGER
) -> tuple[StateGraph, StateTable]:
    """Build the state graph and state table of ``grm``."""
    if minimiser is Minimiser.PAGER:
        sg = pager_stategraph(grm)
        return sg, StateTable(grm, sg)
    raise ValueError(f"unknown minimiser {minimiser!r}")