"""
fgp: functional containers and cancellable concurrent tasks.

Packages:
    fgp.core  ─ Result, Option, Validated, errors, logging, settings
    fgp.seq   ─ eager sequence helpers and the lazy Iter
    fgp.task  ─ Context, Task and the concurrency combinators
    fgp.fp    ─ identity, constant, pipe, compose, curry
"""

__version__ = "0.1.0"
