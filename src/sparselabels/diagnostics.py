# src/sparselabels/diagnostics.py

"""
Light event logging for index operations.

Operations that have something worth reporting (rows removed, labels pruned,
search terms not found, ...) take a keyword-only ``sink`` argument. A sink is
any callable accepting one string. Passing nothing keeps the call silent.

Examples
--------
>>> from sparselabels.diagnostics import collecting_sink, log_event
>>> sink, lines = collecting_sink()
>>> log_event("rehash: pruned 2 labels", sink)
>>> lines
['rehash: pruned 2 labels']
>>> log_event("nobody listens", None)   # silent
"""

from __future__ import annotations
from typing import Callable, List, Optional, Tuple

__all__ = [
    "Sink",
    "log_event",
    "print_sink",
    "collecting_sink",
]

Sink = Callable[[str], None]


def log_event(msg: str, sink: Optional[Sink]) -> None:
    """Forward ``msg`` to ``sink`` if one was given."""
    if sink is not None:
        sink(msg)


def print_sink(msg: str) -> None:
    """Minimal consistent log printer for index operations."""
    print(f"[sparselabels] {msg}")


def collecting_sink() -> Tuple[Sink, List[str]]:
    """Return a sink that appends into a list, together with that list."""
    lines: List[str] = []
    return lines.append, lines
