"""Conflicts found while building a state table, and the errors it can raise."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from lrtable.grammar import Grammar

RRConflict = tuple[int, int, int]
SRConflict = tuple[int, int, int]


@dataclass
class Conflicts:
    """Shift/reduce and reduce/reduce conflicts resolved automatically.

    A reduce/reduce conflict is ``(pidx, r_pidx, stidx)`` where ``pidx`` is the
    production that won. A shift/reduce conflict is ``(tidx, pidx, stidx)``.
    """

    reduce_reduce: list[RRConflict] = field(default_factory=list)
    shift_reduce: list[SRConflict] = field(default_factory=list)

    def rr_conflicts(self) -> Iterator[RRConflict]:
        """Iterate over all reduce/reduce conflicts."""
        return iter(self.reduce_reduce)

    def sr_conflicts(self) -> Iterator[SRConflict]:
        """Iterate over all shift/reduce conflicts."""
        return iter(self.shift_reduce)

    def rr_len(self) -> int:
        """Return the number of reduce/reduce conflicts."""
        return len(self.reduce_reduce)

    def sr_len(self) -> int:
        """Return the number of shift/reduce conflicts."""
        return len(self.shift_reduce)

    def pp(self, grm: Grammar) -> str:
        """Pretty print the shift/reduce then the reduce/reduce conflicts."""
        return self.pp_sr(grm) + self.pp_rr(grm)

    def pp_rr(self, grm: Grammar) -> str:
        """Pretty print the reduce/reduce conflicts."""
        if not self.reduce_reduce:
            return ""
        lines = ["Reduce/Reduce conflicts:\n"]
        lines.extend(
            f"   State {stidx}: Reduce({grm.pp_prod(pidx)}) / Reduce({grm.pp_prod(r_pidx)})\n"
            for pidx, r_pidx, stidx in self.reduce_reduce
        )
        return "".join(lines)

    def pp_sr(self, grm: Grammar) -> str:
        """Pretty print the shift/reduce conflicts."""
        if not self.shift_reduce:
            return ""
        lines = ["Shift/Reduce conflicts:\n"]
        for tidx, pidx, stidx in self.shift_reduce:
            name = grm.token_name(tidx)
            if name is None:
                raise ValueError(f"token {tidx} has no name")
            lines.append(
                f'   State {stidx}: Shift("{name}") / Reduce({grm.pp_prod(pidx)})\n'
            )
        return "".join(lines)


class StateTableErrorKind(Enum):
    """The kinds of error that building a state table can report."""

    ACCEPT_REDUCE_CONFLICT = "Accept/reduce conflict"


class StateTableError(Exception):
    """Raised when a state table cannot be built for a grammar."""

    def __init__(self, kind: StateTableErrorKind, pidx: int) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.pidx = pidx

    def __str__(self) -> str:
        return self.kind.value