# lrtable

`lrtable` builds LR(1) parse tables from context-free grammars. It builds the
parser's state graph with Pager's algorithm, which merges weakly compatible
states. The resulting automaton is close to LALR in size, but it does not
introduce LALR's spurious reduce/reduce conflicts. The state graph is then
turned into tables of shift, reduce, accept and goto entries.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Describing a grammar

A `lrtable.grammar.Grammar` is built from a start rule name and a list of
productions. Each production is `(lhs, body)` or `(lhs, body, prec_token)`,
where `body` is a sequence of symbol names. Any name that is not the left-hand
side of some production is a token. You can also pass `tokens`, which are
tokens to declare up front, and `precedences`. The latter is a list of
`(AssocKind, token_names)` pairs. Each pair is given a level equal to its
position in the list, so later entries bind tighter.

```python
from lrtable.grammar import AssocKind, Grammar

grm = Grammar(
    "Expr",
    [
        ("Expr", ["Expr", "+", "Expr"]),
        ("Expr", ["Expr", "*", "Expr"]),
        ("Expr", ["id"]),
    ],
    precedences=[(AssocKind.LEFT, ["+"]), (AssocKind.LEFT, ["*"])],
)
```

Rules, productions and tokens are numbered as follows:

- **Rules.** Rule 0 is the implicit start rule `^`. The other rules follow in
  the order they are first defined.
- **Productions.** They are numbered in the order given. The implicit start
  production `^ -> <start>` comes last.
- **Tokens.** Declared tokens come first. Next come tokens named in
  precedences, then the remaining tokens in order of first use. The
  end-of-file token is always the last index.

A production takes its precedence from its `prec_token` if one is given.
Otherwise it takes the precedence of the last token in its body.

`Grammar` raises `ValueError` in these cases:

- a production is malformed;
- the start rule is not defined;
- a name is used both as a rule and as a token;
- a token has more than one precedence;
- a `prec_token` has no precedence.

Lookahead sets ("contexts") are integer bitmasks. Bit `tidx` is set for each
token index in the set.

## Building tables

```python
from lrtable.statetable import ActionKind, Minimiser, from_yacc

sgraph, stable = from_yacc(grm, Minimiser.PAGER)

action = stable.action(stable.start_state, grm.token_idx("id"))
assert action.kind is ActionKind.SHIFT

conflicts = stable.conflicts()
if conflicts is not None:
    print(conflicts.pp_sr(grm))
    print(conflicts.pp_rr(grm))
    print(sgraph.pp_core_states(grm))
```

## Modules

- `lrtable.grammar` describes grammars:
  - `Grammar` holds the rules, productions and tokens.
  - `RuleSymbol` and `TokenSymbol` are the symbols used in productions.
  - `Precedence` and `AssocKind` give precedence and associativity.
  - `Firsts` holds the FIRST sets and nullability of each rule. Get one with
    `Grammar.firsts()`.
- `lrtable.itemset` provides `Itemset`. It maps `(pidx, dot)` items to
  lookahead bitmasks and has `add`, `close` and `goto`.
- `lrtable.compat` provides `ctx_intersect`, `weakly_compatible` and
  `weakly_merge`, which are Pager's compatibility test and merge.
- `lrtable.gc` provides `gc_states`. It drops states that cannot be reached
  from the start state and renumbers the edges.
- `lrtable.pager` provides `pager_stategraph(grm)`, which builds a
  `StateGraph`.
- `lrtable.stategraph` provides `StateGraph`:
  - `core_state` and `closed_state` return the states;
  - `edge` and `edges` return the transitions;
  - `all_states_len` and `all_edges_len` return counts;
  - `pp`, `pp_core_states` and `pp_closed_states` return text listings.

  A graph may hold at most 65535 states. Beyond that, `ValueError` is raised.
- `lrtable.statetable` provides the tables and how to build them:
  - `StateTable` answers `action`, `goto`, `state_actions`, `state_shifts`,
    `core_reduces`, `reduce_only_state` and `conflicts`. It also has the
    attributes `start_state` and `final_state`.
  - `Action` has a `kind` (an `ActionKind`) and a `value`. The value is the
    target state of a shift or the production of a reduce.
  - `Minimiser` and `from_yacc(grm, minimiser)` build a state graph and table
    together.
- `lrtable.conflicts` provides:
  - `Conflicts`, the conflicts resolved automatically, with `rr_conflicts`,
    `sr_conflicts`, `rr_len`, `sr_len`, `pp`, `pp_rr` and `pp_sr`;
  - `StateTableError` and `StateTableErrorKind`.

## Conflict resolution

- **Reduce/reduce.** The production that comes earlier in the grammar wins.
  The conflict is recorded.
- **Shift/reduce where the token or the production has no precedence.** The
  shift wins. The conflict is recorded.
- **Shift/reduce where both have a precedence.** The higher level wins. When
  both have the same level:
  - left associativity keeps the reduce;
  - right associativity takes the shift;
  - non-associativity leaves no action, so that input is an error.

  Mixing associativity kinds at one level raises `ValueError`.

An accept/reduce conflict makes `StateTable` raise `StateTableError` with kind
`StateTableErrorKind.ACCEPT_REDUCE_CONFLICT`. This happens, for example, with
a rule `D : D`.

## What this package does not do

`lrtable` only builds tables. It has no command-line tool. It does not read
Yacc grammar files: grammars are given as Python data. It has no lexer and no
parser runtime that drives the tables over input.