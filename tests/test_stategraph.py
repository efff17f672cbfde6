import pytest

from lrtable.grammar import Grammar, RuleSymbol, TokenSymbol
from lrtable.itemset import Itemset
from lrtable.stategraph import StateGraph


def tiny_grammar():
    return Grammar("S", [("S", ["a"])])


def tiny_graph(grm):
    firsts = grm.firsts()
    eof = 1 << grm.eof_token_idx()
    core0 = Itemset()
    core0.add(grm.start_prod(), 0, eof)
    closed0 = core0.close(grm, firsts)
    s_sym = RuleSymbol(grm.rule_idx("S"))
    a_sym = TokenSymbol(grm.token_idx("a"))
    core1 = closed0.goto(grm, s_sym)
    core2 = closed0.goto(grm, a_sym)
    states = [
        (core0, closed0),
        (core1, core1.close(grm, firsts)),
        (core2, core2.close(grm, firsts)),
    ]
    edges = [{s_sym: 1, a_sym: 2}, {}, {}]
    return StateGraph(states, 0, edges)


def test_sizes_and_indexes():
    grm = tiny_grammar()
    sg = tiny_graph(grm)
    assert sg.all_states_len() == 3
    assert sg.all_edges_len() == 2
    assert list(sg.iter_stidxs()) == [0, 1, 2]
    assert sg.start_state == 0


def test_edges_lookup():
    grm = tiny_grammar()
    sg = tiny_graph(grm)
    assert sg.edge(0, RuleSymbol(grm.rule_idx("S"))) == 1
    assert sg.edge(0, TokenSymbol(grm.token_idx("a"))) == 2
    assert sg.edge(1, TokenSymbol(grm.token_idx("a"))) is None
    assert sg.edge(7, TokenSymbol(grm.token_idx("a"))) is None
    assert dict(sg.edges(0)) == {
        RuleSymbol(grm.rule_idx("S")): 1,
        TokenSymbol(grm.token_idx("a")): 2,
    }
    with pytest.raises(IndexError):
        sg.edges(3)


def test_core_and_closed_states():
    grm = tiny_grammar()
    sg = tiny_graph(grm)
    eof = 1 << grm.eof_token_idx()
    assert sg.core_state(0).items == {(grm.start_prod(), 0): eof}
    assert sg.closed_state(0).items == {(grm.start_prod(), 0): eof, (0, 0): eof}
    assert [len(s.items) for s in sg.iter_core_states()] == [1, 1, 1]
    assert [len(s.items) for s in sg.iter_closed_states()] == [2, 1, 1]


def test_pp_core_states():
    grm = tiny_grammar()
    sg = tiny_graph(grm)
    expected = (
        "0: [^ -> . S, {'$'}]\n"
        "   S -> 1\n"
        "   'a' -> 2\n"
        "1: [^ -> S ., {'$'}]\n"
        "2: [S -> 'a' ., {'$'}]"
    )
    assert sg.pp_core_states(grm) == expected
    assert sg.pp(grm, True) == expected


def test_pp_closed_states():
    grm = tiny_grammar()
    sg = tiny_graph(grm)
    expected = (
        "0: [^ -> . S, {'$'}]\n"
        "   [S -> . 'a', {'$'}]\n"
        "   S -> 1\n"
        "   'a' -> 2\n"
        "1: [^ -> S ., {'$'}]\n"
        "2: [S -> 'a' ., {'$'}]"
    )
    assert sg.pp_closed_states(grm) == expected


def test_pp_multiple_lookaheads():
    grm = Grammar("S", [("S", ["a", "b"])])
    core = Itemset()
    core.add(0, 1, (1 << grm.token_idx("b")) | (1 << grm.eof_token_idx()))
    sg = StateGraph([(core, core)], 0, [{}])
    assert sg.pp_core_states(grm) == "0: [S -> 'a' . 'b', {'b', '$'}]"


def test_pp_pads_state_numbers():
    grm = tiny_grammar()
    states = [(Itemset(), Itemset()) for _ in range(10)]
    sg = StateGraph(states, 0, [{} for _ in range(10)])
    out = sg.pp_core_states(grm)
    lines = out.split("\n")
    assert len(lines) == 10
    assert lines[0] == "0: "
    assert lines[9] == "9: "


def test_too_many_states_rejected():
    empty = Itemset()
    with pytest.raises(ValueError):
        StateGraph([(empty, empty)] * 65536, 0, [])