"""LR(1) itemsets: closure and goto."""

from __future__ import annotations

from dataclasses import dataclass, field

from lrtable.grammar import Firsts, Grammar, RuleSymbol, Symbol, TokenSymbol


@dataclass
class Itemset:
    """A set of items ``(pidx, dot)`` each mapped to its lookahead bitmask."""

    items: dict[tuple[int, int], int] = field(default_factory=dict)

    def add(self, pidx: int, dot: int, ctx: int) -> bool:
        """Add item ``(pidx, dot)`` with lookaheads ``ctx``; return True if anything changed."""
        key = (pidx, dot)
        old = self.items.get(key)
        if old is None:
            self.items[key] = ctx
            return True
        merged = old | ctx
        if merged == old:
            return False
        self.items[key] = merged
        return True

    def close(self, grm: Grammar, firsts: Firsts) -> Itemset:
        """Return a new itemset which is the closure of this one."""
        new_is = Itemset(dict(self.items))
        zero_todos: set[int] = set()

        def todo():
            yield from list(self.items)
            while zero_todos:
                pidx = min(zero_todos)
                zero_todos.discard(pidx)
                yield pidx, 0

        for pidx, dot in todo():
            prod = grm.prod(pidx)
            if dot == len(prod):
                continue
            sym = prod[dot]
            if not isinstance(sym, RuleSymbol):
                continue
            new_ctx = 0
            nullable = True
            for follow in prod[dot + 1 :]:
                if isinstance(follow, TokenSymbol):
                    new_ctx |= 1 << follow.tidx
                    nullable = False
                    break
                new_ctx |= firsts.firsts(follow.ridx)
                if not firsts.is_epsilon_set(follow.ridx):
                    nullable = False
                    break
            if nullable:
                new_ctx |= new_is.items[(pidx, dot)]
            for ref_pidx in grm.rule_to_prods(sym.ridx):
                if new_is.add(ref_pidx, 0, new_ctx):
                    zero_todos.add(ref_pidx)
        return new_is

    def goto(self, grm: Grammar, sym: Symbol) -> Itemset:
        """Return the itemset reached from this one by moving over ``sym``."""
        new_is = Itemset()
        for (pidx, dot), ctx in self.items.items():
            prod = grm.prod(pidx)
            if dot < len(prod) and prod[dot] == sym:
                new_is.add(pidx, dot + 1, ctx)
        return new_is