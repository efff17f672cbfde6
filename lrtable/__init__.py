"""LR(1) state graph and parse table construction using Pager's algorithm."""

__version__ = "0.1.0"

__all__ = [
    "compat",
    "conflicts",
    "gc",
    "grammar",
    "itemset",
    "pager",
    "stategraph",
    "statetable",
]