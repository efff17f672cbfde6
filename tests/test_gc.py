from lrtable.gc import gc_states


def test_worked_example_drops_unreachable_middle_state():
    states = ["s0", "s1", "s2"]
    edges = [{"x": 2}, {}, {}]
    new_states, new_edges = gc_states(states, 0, edges)
    assert new_states == ["s0", "s2"]
    assert new_edges == [{"x": 1}, {}]


def test_all_reachable_is_unchanged():
    states = ["a", "b", "c"]
    edges = [{"x": 1, "y": 2}, {"z": 0}, {"w": 2}]
    new_states, new_edges = gc_states(states, 0, edges)
    assert new_states == states
    assert new_edges == edges


def test_input_is_not_mutated():
    states = ["a", "b", "c"]
    edges = [{"x": 2}, {"y": 0}, {}]
    gc_states(states, 0, edges)
    assert states == ["a", "b", "c"]
    assert edges == [{"x": 2}, {"y": 0}, {}]


def test_unreachable_state_with_outgoing_edges_is_removed():
    states = ["a", "b", "c", "d"]
    edges = [{"x": 3}, {"y": 0, "z": 2}, {"q": 3}, {"r": 0}]
    new_states, new_edges = gc_states(states, 0, edges)
    assert new_states == ["a", "c", "d"] or new_states == ["a", "d"]
    # state 2 is only reachable from unreachable state 1
    assert new_states == ["a", "d"]
    assert new_edges == [{"x": 1}, {"r": 0}]


def test_edges_point_inside_result_and_preserve_targets():
    states = ["a", "b", "c", "d", "e"]
    edges = [{"p": 2, "q": 4}, {"p": 3}, {"r": 4}, {}, {"s": 2}]
    new_states, new_edges = gc_states(states, 0, edges)
    assert len(new_states) == len(new_edges)
    for old_src, st_edges in zip(new_states, new_edges):
        old_idx = states.index(old_src)
        for sym, target in st_edges.items():
            assert 0 <= target < len(new_states)
            assert new_states[target] == states[edges[old_idx][sym]]


def test_single_state_without_edges():
    new_states, new_edges = gc_states(["only"], 0, [{}])
    assert new_states == ["only"]
    assert new_edges == [{}]