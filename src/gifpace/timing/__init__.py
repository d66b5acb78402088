"""
Timing Module
=============

Delay normalization for animated GIFs.

This module provides the retiming core of gifpace:
    - transparency: Moves each frame's transparent index to 0
    - delay: Computes the stream-wide uniform delay (iterated GCD)
    - expander: Expands frames into uniform ticks with fillers
    - pipeline: Wires decoder, timing stages and encoder together
"""

from gifpace.timing.delay import (
    MIN_DELAY,
    ZERO_DELAY,
    DelayNormalizer,
    compute_uniform_delay,
    gcd,
)
from gifpace.timing.expander import (
    FILLER_MIN_TICKS,
    BackgroundSplit,
    Expansion,
    LeadFillerTail,
    Repeat,
    expand_frame,
    make_filler_frame,
    tick_count,
)
from gifpace.timing.pipeline import (
    ExpansionStats,
    NormalizedStream,
    normalize_stream,
    retime_gif,
)
from gifpace.timing.transparency import (
    swap_global_palette,
    swap_palette_entries,
    swap_transparent,
)

__all__ = [
    "MIN_DELAY",
    "ZERO_DELAY",
    "FILLER_MIN_TICKS",
    "DelayNormalizer",
    "compute_uniform_delay",
    "gcd",
    "Expansion",
    "Repeat",
    "LeadFillerTail",
    "BackgroundSplit",
    "expand_frame",
    "make_filler_frame",
    "tick_count",
    "ExpansionStats",
    "NormalizedStream",
    "normalize_stream",
    "retime_gif",
    "swap_global_palette",
    "swap_palette_entries",
    "swap_transparent",
]
