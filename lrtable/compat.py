"""Pager's weak compatibility test and merge for core itemsets."""

from __future__ import annotations

from itertools import combinations

from lrtable.itemset import Itemset


def ctx_intersect(c1: int, c2: int) -> bool:
    """Return True if the two lookahead bitmasks share any token."""
    return (c1 & c2) != 0


def weakly_compatible(a: Itemset, b: Itemset) -> bool:
    """Return True if ``b`` is weakly compatible with ``a``."""
    if len(a.items) != len(b.items):
        return False
    if any(key not in b.items for key in a.items):
        return False
    if len(a.items) == 1:
        return True
    for i_key, j_key in combinations(list(a.items), 2):
        # Condition 1 of Pager's paper
        if not (
            ctx_intersect(a.items[i_key], b.items[j_key])
            or ctx_intersect(a.items[j_key], b.items[i_key])
        ):
            continue
        # Conditions 2 and 3
        if ctx_intersect(a.items[i_key], a.items[j_key]) or ctx_intersect(
            b.items[i_key], b.items[j_key]
        ):
            continue
        return False
    return True


def weakly_merge(target: Itemset, other: Itemset) -> bool:
    """Merge the lookaheads of ``other`` into ``target``; return True if anything changed.

    ``other`` must be weakly compatible with ``target``.
    """
    changed = False
    for key, ctx in target.items.items():
        merged = ctx | other.items[key]
        if merged != ctx:
            target.items[key] = merged
            changed = True
    return changed