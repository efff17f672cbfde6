"""Context-free grammars with the indexes that LR table construction works on.

A grammar is built from a start rule name and an ordered list of productions.
Any symbol in a production body that is not the left-hand side of some
production is a token. Rules, productions and tokens are numbered as follows:

* rule 0 is the implicit start rule ``^``; the other rules follow in order of
  their first definition;
* productions are numbered in the order given; the implicit start production
  ``^ -> <start>`` comes last;
* tokens declared explicitly come first, then tokens named in precedence
  declarations, then tokens in order of first use; the end-of-file token is
  always the last token.

Lookahead sets ("contexts") are represented as integer bitmasks in which bit
``tidx`` is set for every token index ``tidx`` in the set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Sequence, Union

START_RULE = "^"


@dataclass(frozen=True, order=True)
class RuleSymbol:
    """A reference to a rule by its index."""

    ridx: int


@dataclass(frozen=True, order=True)
class TokenSymbol:
    """A reference to a token by its index."""

    tidx: int


Symbol = Union[RuleSymbol, TokenSymbol]


class AssocKind(Enum):
    """Associativity of a precedence level."""

    LEFT = "left"
    RIGHT = "right"
    NONASSOC = "nonassoc"


@dataclass(frozen=True)
class Precedence:
    """A precedence level (higher binds tighter) and its associativity."""

    level: int
    kind: AssocKind


class Firsts:
    """The FIRST sets of every rule of a grammar, plus which rules are nullable."""

    def __init__(self, grm: Grammar) -> None:
        self._firsts = [0] * grm.rules_len()
        self._epsilons = [False] * grm.rules_len()
        changed = True
        while changed:
            changed = False
            for ridx in grm.iter_ridxs():
                for pidx in grm.rule_to_prods(ridx):
                    mask, nullable = self._scan(grm.prod(pidx))
                    merged = self._firsts[ridx] | mask
                    if merged != self._firsts[ridx]:
                        self._firsts[ridx] = merged
                        changed = True
                    if nullable and not self._epsilons[ridx]:
                        self._epsilons[ridx] = True
                        changed = True

    def _scan(self, symbols: Sequence[Symbol]) -> tuple[int, bool]:
        mask = 0
        for sym in symbols:
            if isinstance(sym, TokenSymbol):
                return mask | (1 << sym.tidx), False
            mask |= self._firsts[sym.ridx]
            if not self._epsilons[sym.ridx]:
                return mask, False
        return mask, True

    def firsts(self, ridx: int) -> int:
        """Return the FIRST set of rule ``ridx`` as a token bitmask."""
        return self._firsts[ridx]

    def is_epsilon_set(self, ridx: int) -> bool:
        """Return True if rule ``ridx`` can derive the empty string."""
        return self._epsilons[ridx]


def _normalise(production: Sequence) -> tuple[str, tuple[str, ...], str | None]:
    if len(production) == 2:
        lhs, body = production
        prec = None
    elif len(production) == 3:
        lhs, body, prec = production
    else:
        raise ValueError(f"malformed production {production!r}")
    if not isinstance(lhs, str) or isinstance(body, str):
        raise ValueError(f"malformed production {production!r}")
    return lhs, tuple(body), prec


class Grammar:
    """An augmented context-free grammar."""

    def __init__(
        self,
        start: str,
        productions: Iterable[Sequence],
        tokens: Iterable[str] = (),
        precedences: Iterable[tuple[AssocKind, Iterable[str]]] = (),
    ) -> None:
        prods_in = [_normalise(p) for p in productions]

        self._rule_names: list[str] = [START_RULE]
        self._rule_idxs: dict[str, int] = {START_RULE: 0}
        for lhs, _, _ in prods_in:
            if lhs == START_RULE:
                raise ValueError(f"rule name {START_RULE!r} is reserved")
            if lhs not in self._rule_idxs:
                self._rule_idxs[lhs] = len(self._rule_names)
                self._rule_names.append(lhs)
        if start not in self._rule_idxs or start == START_RULE:
            raise ValueError(f"start rule {start!r} is not defined")

        self._token_names: list[str] = []
        self._token_idxs: dict[str, int] = {}
        precedences = [(AssocKind(kind), tuple(names)) for kind, names in precedences]
        for name in tokens:
            self._intern_token(name)
        for _, names in precedences:
            for name in names:
                self._intern_token(name)
        for _, body, prec in prods_in:
            for name in body:
                if name not in self._rule_idxs:
                    self._intern_token(name)
            if prec is not None:
                self._intern_token(prec)
        self._eof = len(self._token_names)

        self._token_precs: dict[int, Precedence] = {}
        for level, (kind, names) in enumerate(precedences):
            for name in names:
                tidx = self._token_idxs[name]
                if tidx in self._token_precs:
                    raise ValueError(f"token {name!r} has more than one precedence")
                self._token_precs[tidx] = Precedence(level, kind)

        self._prods: list[tuple[Symbol, ...]] = []
        self._prod_rules: list[int] = []
        self._prod_precs: list[Precedence | None] = []
        rule_prods: list[list[int]] = [[] for _ in self._rule_names]
        for lhs, body, prec in prods_in:
            symbols = tuple(self._symbol(name) for name in body)
            ridx = self._rule_idxs[lhs]
            rule_prods[ridx].append(len(self._prods))
            self._prods.append(symbols)
            self._prod_rules.append(ridx)
            self._prod_precs.append(self._derive_prec(symbols, prec))

        self._start_prod = len(self._prods)
        rule_prods[0].append(self._start_prod)
        self._prods.append((RuleSymbol(self._rule_idxs[start]),))
        self._prod_rules.append(0)
        self._prod_precs.append(None)
        self._rule_prods = [tuple(ps) for ps in rule_prods]

    def _intern_token(self, name: str) -> None:
        if not isinstance(name, str):
            raise ValueError(f"token name {name!r} is not a string")
        if name in self._rule_idxs:
            raise ValueError(f"{name!r} is used both as a rule and as a token")
        if name not in self._token_idxs:
            self._token_idxs[name] = len(self._token_names)
            self._token_names.append(name)

    def _symbol(self, name: str) -> Symbol:
        if name in self._rule_idxs:
            return RuleSymbol(self._rule_idxs[name])
        return TokenSymbol(self._token_idxs[name])

    def _derive_prec(self, symbols: tuple[Symbol, ...], prec: str | None) -> Precedence | None:
        if prec is not None:
            found = self._token_precs.get(self._token_idxs[prec])
            if found is None:
                raise ValueError(f"token {prec!r} has no precedence")
            return found
        last = next((s for s in reversed(symbols) if isinstance(s, TokenSymbol)), None)
        return None if last is None else self._token_precs.get(last.tidx)

    def prod(self, pidx: int) -> tuple[Symbol, ...]:
        """Return the symbols of production ``pidx``."""
        return self._prods[pidx]

    def prod_len(self, pidx: int) -> int:
        """Return the number of symbols in production ``pidx``."""
        return len(self._prods[pidx])

    def prod_to_rule(self, pidx: int) -> int:
        """Return the rule that production ``pidx`` belongs to."""
        return self._prod_rules[pidx]

    def rule_to_prods(self, ridx: int) -> tuple[int, ...]:
        """Return the productions of rule ``ridx`` in grammar order."""
        return self._rule_prods[ridx]

    def rule_idx(self, name: str) -> int | None:
        """Return the index of the rule called ``name``, or None."""
        return self._rule_idxs.get(name)

    def token_idx(self, name: str) -> int | None:
        """Return the index of the token called ``name``, or None."""
        return self._token_idxs.get(name)

    def rule_name(self, ridx: int) -> str:
        """Return the name of rule ``ridx``."""
        return self._rule_names[ridx]

    def token_name(self, tidx: int) -> str | None:
        """Return the name of token ``tidx``; the end-of-file token has none."""
        if tidx == self._eof:
            return None
        return self._token_names[tidx]

    def eof_token_idx(self) -> int:
        """Return the index of the end-of-file token."""
        return self._eof

    def start_prod(self) -> int:
        """Return the index of the implicit start production."""
        return self._start_prod

    def tokens_len(self) -> int:
        """Return the number of tokens, including end-of-file."""
        return self._eof + 1

    def rules_len(self) -> int:
        """Return the number of rules, including the start rule."""
        return len(self._rule_names)

    def prods_len(self) -> int:
        """Return the number of productions, including the start production."""
        return len(self._prods)

    def iter_tidxs(self) -> Iterator[int]:
        """Iterate over every token index in order."""
        return iter(range(self.tokens_len()))

    def iter_ridxs(self) -> Iterator[int]:
        """Iterate over every rule index in order."""
        return iter(range(self.rules_len()))

    def token_precedence(self, tidx: int) -> Precedence | None:
        """Return the precedence of token ``tidx``, or None."""
        return self._token_precs.get(tidx)

    def prod_precedence(self, pidx: int) -> Precedence | None:
        """Return the precedence of production ``pidx``, or None."""
        return self._prod_precs[pidx]

    def _sym_name(self, sym: Symbol) -> str:
        if isinstance(sym, RuleSymbol):
            return self._rule_names[sym.ridx]
        return self.token_name(sym.tidx) or ""

    def pp_prod(self, pidx: int) -> str:
        """Return a human readable form of production ``pidx``."""
        body = "".join(f' "{self._sym_name(sym)}"' for sym in self._prods[pidx])
        return f"{self._rule_names[self._prod_rules[pidx]]}:{body}"

    def firsts(self) -> Firsts:
        """Compute the FIRST sets of this grammar."""
        return Firsts(self)