"""Composition of reconciled and pass-through sequences into one snapshot."""

from typing import Any, Optional, Sequence

from .data_models import STATS_FIELDS, ConnectionStats


def assemble_stats(**sequences: Optional[Sequence[Any]]) -> ConnectionStats:
    """Build an immutable ConnectionStats, defaulting missing sequences to empty."""
    unknown = set(sequences) - set(STATS_FIELDS)
    if unknown:
        raise TypeError(f"Unknown stats categories: {', '.join(sorted(unknown))}")
    return ConnectionStats(**{name: tuple(sequences.get(name) or ()) for name in STATS_FIELDS})
