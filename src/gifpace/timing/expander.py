"""
Frame Expander
==============

Turns one original frame into a run of uniform-delay output frames.

A frame with delay d spans n = ceil(d / u) ticks of the uniform delay u
(frames with a delay below the minimum count as ZERO_DELAY). Emitting the
frame n times always works but costs n full buffers. Where the canvas is
untouched between ticks, a 1x1 fully transparent filler shows the same
picture for a fraction of the size.

Expansion Policy (n >= filler_min_ticks):
    KEEP / ANY:  frame, then n-1 fillers
    PREVIOUS:    frame n times (each restore must act on the real frame)
    BACKGROUND:  copy with KEEP disposal, n-2 fillers, then the frame,
                 so the background restore fires on the last tick only

Below filler_min_ticks the frame is simply repeated n times.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from gifpace.models.frame import DisposalMethod, Frame
from gifpace.timing.delay import MIN_DELAY, ZERO_DELAY


logger = logging.getLogger(__name__)


# Shortest run that uses fillers instead of plain repetition
FILLER_MIN_TICKS = 3


def tick_count(
    delay: int,
    uniform_delay: int,
    min_delay: int = MIN_DELAY,
    zero_delay: int = ZERO_DELAY,
) -> int:
    """
    Number of uniform-delay ticks an original delay spans (rounded up).

    Args:
        delay: Original frame delay
        uniform_delay: Delay of one output tick
        min_delay: Delays below this count as zero_delay
        zero_delay: Effective duration of a zero delay

    Returns:
        Tick count, at least 1 for any positive duration
    """
    if uniform_delay < 1:
        raise ValueError("uniform_delay must be positive")
    if delay < min_delay:
        delay = zero_delay
    return -(-delay // uniform_delay)


def make_filler_frame(uniform_delay: int) -> Frame:
    """Build the 1x1 transparent, leave-in-place filler frame."""
    return Frame(
        width=1,
        height=1,
        buffer=np.zeros(1, dtype=np.uint8),
        transparent=0,
        dispose=DisposalMethod.KEEP,
        delay=uniform_delay,
    )


# =============================================================================
# Expansion Variants
# =============================================================================

class Expansion:
    """
    Output run for one original frame.

    Iterating yields the frames in emission order. Frames may be yielded
    more than once (repeats, fillers) and must be treated as read-only.
    """

    count: int

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Frame]:
        raise NotImplementedError

    @property
    def filler_count(self) -> int:
        """Number of filler frames in the run."""
        return 0


@dataclass
class Repeat(Expansion):
    """The frame itself, count times."""

    frame: Frame
    count: int

    def __iter__(self) -> Iterator[Frame]:
        for _ in range(self.count):
            yield self.frame


@dataclass
class LeadFillerTail(Expansion):
    """The frame once, then count - 1 fillers."""

    frame: Frame
    filler: Frame
    count: int

    def __iter__(self) -> Iterator[Frame]:
        yield self.frame
        for _ in range(self.count - 1):
            yield self.filler

    @property
    def filler_count(self) -> int:
        return self.count - 1


@dataclass
class BackgroundSplit(Expansion):
    """Lead copy, count - 2 fillers, then the original tail frame."""

    lead: Frame
    filler: Frame
    tail: Frame
    count: int

    def __iter__(self) -> Iterator[Frame]:
        yield self.lead
        for _ in range(self.count - 2):
            yield self.filler
        yield self.tail

    @property
    def filler_count(self) -> int:
        return self.count - 2


# =============================================================================
# Policy
# =============================================================================

def expand_frame(
    frame: Frame,
    uniform_delay: int,
    filler: Frame,
    *,
    min_delay: int = MIN_DELAY,
    zero_delay: int = ZERO_DELAY,
    filler_min_ticks: int = FILLER_MIN_TICKS,
) -> Expansion:
    """
    Choose the output run for one frame.

    The frame's delay is overwritten with uniform_delay; the expander
    takes ownership of it.

    Args:
        frame: Transparency-rewritten original frame
        uniform_delay: Stream-wide output delay
        filler: Shared filler frame for this stream
        min_delay: Delays below this count as zero_delay
        zero_delay: Effective duration of a zero delay
        filler_min_ticks: Shortest run that may use fillers

    Returns:
        Expansion producing exactly tick_count(...) frames
    """
    n = tick_count(frame.delay, uniform_delay, min_delay, zero_delay)
    original_delay = frame.delay
    frame.delay = uniform_delay

    if n < filler_min_ticks:
        expansion = Repeat(frame, n)
    elif frame.dispose in (DisposalMethod.KEEP, DisposalMethod.ANY):
        expansion = LeadFillerTail(frame, filler, n)
    elif frame.dispose == DisposalMethod.PREVIOUS:
        expansion = Repeat(frame, n)
    else:
        lead = frame.clone(dispose=DisposalMethod.KEEP)
        expansion = BackgroundSplit(lead, filler, frame, n)

    logger.debug(
        f"{frame!r}: delay {original_delay} -> {n} ticks, "
        f"{type(expansion).__name__}"
    )
    return expansion
