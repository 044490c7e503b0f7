# src/sparselabels/config.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

"""
Configuration objects for label indexes.

The knobs here are the few values that the index operations and the text
display read. Treat a :class:`LabelsConfig` as an immutable snapshot and
pass it explicitly (``config=...``) to the calls that accept one; there is
no process-wide setting to mutate.

Examples
--------
>>> from sparselabels.config import LabelsConfig
>>> cfg = LabelsConfig(max_display_items=3)
>>> cfg.collapse_prefix, cfg.max_display_items
('all__', 3)
>>> cfg.collapsed_label("cities")
'all__cities'
"""

__all__ = [
    "LabelsConfig",
    "DEFAULT_CONFIG",
    "resolve_config",
]


@dataclass(frozen=True)
class LabelsConfig:
    """
    Knobs shared by mutation and display helpers.

    Parameters
    ----------
    collapse_prefix : str, default="all__"
        Prefix of the sentinel label that replaces a collapsed category, and of
        the default label created by ``add_category`` when no labels are given.
        The sentinel for category ``c`` is ``collapse_prefix + c``.
    max_display_items : int, default=10
        Number of labels listed per category by
        :func:`~sparselabels.display.describe` before the remainder is
        summarized as ``"... and N others"``.
    verbose_display : bool, default=False
        If ``True``, ``describe`` lists every label regardless of
        ``max_display_items``.

    Notes
    -----
    Changing ``collapse_prefix`` between calls is allowed but then collapsing
    an already-collapsed index under a different prefix is no longer a no-op.
    """

    collapse_prefix: str = "all__"
    max_display_items: int = 10
    verbose_display: bool = False

    def __post_init__(self):
        if not isinstance(self.collapse_prefix, str) or not self.collapse_prefix:
            raise ValueError("collapse_prefix must be a non-empty string")
        if self.max_display_items < 0:
            raise ValueError("max_display_items must be ≥ 0")

    def collapsed_label(self, category: str) -> str:
        """Sentinel label standing for 'any label' of ``category``."""
        return f"{self.collapse_prefix}{category}"


DEFAULT_CONFIG = LabelsConfig()


def resolve_config(config: Optional[LabelsConfig]) -> LabelsConfig:
    return DEFAULT_CONFIG if config is None else config
