"""
Delay Normalizer
================

Computes the single delay every output frame will carry.

The uniform delay is the GCD of the stream's frame delays, so each original
delay is a whole number of uniform ticks. Delays below MIN_DELAY are raised to
it before entering the GCD, since players clamp such values anyway, and the
final result never drops below MIN_DELAY.

Scan Rules:
    - The first frame's delay seeds the running value as-is
    - A later delay equal to the running value changes nothing
    - A differing delay d folds in as gcd(running, max(d, MIN_DELAY))
    - If no delay ever differs, the stream needs no normalization
"""

import logging
from typing import Iterable, Optional


logger = logging.getLogger(__name__)


# Smallest delay (hundredths of a second) most players honor
MIN_DELAY = 2

# Duration players typically use for a zero or near-zero delay
ZERO_DELAY = 10


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor by Euclid's algorithm.

    The pair is kept ordered (a >= b) between iterations. A zero operand
    yields the other operand.
    """
    while b != 0:
        a, b = b, a % b
        if a < b:
            a, b = b, a
    return a


class DelayNormalizer:
    """
    Incremental scanner over a stream's frame delays.

    Feed every frame delay in stream order through update(); then
    uniform_delay holds the result, or None if the stream is already
    uniform.

    Example:
        normalizer = DelayNormalizer()
        for frame in frames:
            normalizer.update(frame.delay)
        if normalizer.uniform_delay is None:
            print("already uniform")
    """

    def __init__(self, min_delay: int = MIN_DELAY) -> None:
        """
        Initialize delay normalizer.

        Args:
            min_delay: Floor for delays entering the GCD and for the result
        """
        if min_delay < 1:
            raise ValueError("min_delay must be >= 1")

        self.min_delay = min_delay

        self._running: Optional[int] = None
        self._any_different: bool = False
        self._frame_count: int = 0

    def update(self, delay: int) -> None:
        """
        Fold one frame delay into the running value.

        Args:
            delay: Frame delay in hundredths of a second
        """
        self._frame_count += 1

        if self._running is None:
            self._running = delay
            return

        if delay != self._running:
            self._running = gcd(self._running, max(delay, self.min_delay))
            self._any_different = True

    @property
    def any_different(self) -> bool:
        """Whether any delay differed from the running value."""
        return self._any_different

    @property
    def frame_count(self) -> int:
        """Number of delays scanned."""
        return self._frame_count

    @property
    def uniform_delay(self) -> Optional[int]:
        """Delay for every output frame, or None if no change is needed."""
        if self._running is None or not self._any_different:
            return None
        return max(self._running, self.min_delay)

    def reset(self) -> None:
        """Reset scanner state."""
        self._running = None
        self._any_different = False
        self._frame_count = 0

    def get_metrics(self) -> dict:
        """Get scanner metrics for observability."""
        return {
            "frame_count": self._frame_count,
            "any_different": self._any_different,
            "uniform_delay": self.uniform_delay,
            "min_delay": self.min_delay,
        }


def compute_uniform_delay(
    delays: Iterable[int],
    min_delay: int = MIN_DELAY,
) -> Optional[int]:
    """
    Uniform delay for a sequence of frame delays.

    Args:
        delays: Frame delays in stream order
        min_delay: Delay floor

    Returns:
        The uniform delay, or None if the delays are already uniform
        (or there are none)
    """
    normalizer = DelayNormalizer(min_delay=min_delay)
    for delay in delays:
        normalizer.update(delay)
    return normalizer.uniform_delay
