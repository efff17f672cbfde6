from lrtable.compat import ctx_intersect, weakly_compatible, weakly_merge
from lrtable.itemset import Itemset


def test_ctx_intersect():
    assert not ctx_intersect(0, 0)
    # Mirrors a bitvector of 8 unset bits extended by one unset bit
    assert not ctx_intersect(0, 0)
    # ...then by one set bit at index 9
    assert ctx_intersect(1 << 9, 1 << 9)
    # 64 unset bits followed by a set bit
    assert ctx_intersect(1 << 64, 1 << 64)
    assert not ctx_intersect(1 << 64, 1 << 63)


def test_different_lengths_not_compatible():
    a = Itemset({(0, 0): 1})
    b = Itemset({(0, 0): 1, (1, 0): 2})
    assert not weakly_compatible(a, b)


def test_different_cores_not_compatible():
    a = Itemset({(0, 0): 1, (1, 0): 2})
    b = Itemset({(0, 0): 1, (2, 0): 2})
    assert not weakly_compatible(a, b)


def test_single_item_always_compatible():
    a = Itemset({(0, 1): 0b01})
    b = Itemset({(0, 1): 0b10})
    assert weakly_compatible(a, b)


def test_crossed_lookaheads_not_compatible():
    a = Itemset({(0, 0): 0b01, (1, 0): 0b10})
    b = Itemset({(0, 0): 0b10, (1, 0): 0b01})
    assert not weakly_compatible(a, b)


def test_crossed_lookaheads_with_shared_context_compatible():
    a = Itemset({(0, 0): 0b01, (1, 0): 0b11})
    b = Itemset({(0, 0): 0b10, (1, 0): 0b01})
    assert weakly_compatible(a, b)


def test_disjoint_identical_compatible():
    a = Itemset({(0, 0): 0b01, (1, 0): 0b10})
    b = Itemset({(0, 0): 0b01, (1, 0): 0b10})
    assert weakly_compatible(a, b)


def test_weakly_merge_changes():
    target = Itemset({(0, 0): 0b01, (1, 0): 0b10})
    other = Itemset({(0, 0): 0b100, (1, 0): 0b10})
    assert weakly_merge(target, other)
    assert target.items == {(0, 0): 0b101, (1, 0): 0b10}
    assert other.items == {(0, 0): 0b100, (1, 0): 0b10}


def test_weakly_merge_no_change():
    target = Itemset({(0, 0): 0b11, (1, 0): 0b10})
    other = Itemset({(0, 0): 0b01, (1, 0): 0b10})
    assert not weakly_merge(target, other)
    assert target.items == {(0, 0): 0b11, (1, 0): 0b10}