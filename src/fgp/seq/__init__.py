"""
fgp.seq: sequence transforms.

    seq.py       ─ eager helpers returning fresh lists
    iterator.py  ─ Iter, lazy pull iterator with chainable stages
"""

from fgp.seq.iterator import Iter
from fgp.seq.seq import (
    all_,
    any_,
    chunk,
    collect,
    distinct_by,
    filter_,
    find,
    flat_map,
    fold_left,
    group_by,
    map_,
    partition,
    reduce_,
    scan_left,
    window,
    zip_,
)

__all__ = [
    "Iter",
    "all_",
    "any_",
    "chunk",
    "collect",
    "distinct_by",
    "filter_",
    "find",
    "flat_map",
    "fold_left",
    "group_by",
    "map_",
    "partition",
    "reduce_",
    "scan_left",
    "window",
    "zip_",
]
