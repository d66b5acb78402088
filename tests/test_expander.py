"""
Frame Expander Tests
====================

Tests for tick counting and the disposal-aware expansion policy.
"""

import numpy as np
import pytest

from gifpace.models.frame import DisposalMethod
from gifpace.timing.expander import (
    BackgroundSplit,
    LeadFillerTail,
    Repeat,
    expand_frame,
    make_filler_frame,
    tick_count,
)


class TestTickCount:
    """Tests for tick counting."""

    def test_exact_and_rounded_up(self):
        """Verify ceil(d / u)."""
        assert tick_count(6, 2) == 3
        assert tick_count(7, 2) == 4
        assert tick_count(2, 2) == 1
        assert tick_count(10, 4) == 3

    def test_small_delay_uses_zero_delay(self):
        """Verify delays below the minimum count as ZERO_DELAY."""
        assert tick_count(0, 4) == 3
        assert tick_count(1, 2) == 5
        assert tick_count(0, 20) == 1

    @pytest.mark.parametrize("delay", [2, 3, 5, 9, 17, 100])
    @pytest.mark.parametrize("uniform", [2, 3, 4, 7])
    def test_covers_original_duration(self, delay, uniform):
        """Verify the ticks never shorten a frame."""
        n = tick_count(delay, uniform)
        assert n * uniform >= delay
        assert (n - 1) * uniform < delay

    def test_invalid_uniform_delay(self):
        """Verify a non-positive tick is rejected."""
        with pytest.raises(ValueError):
            tick_count(4, 0)


class TestFillerFrame:
    """Tests for the filler frame."""

    def test_shape(self):
        """Verify the filler is a 1x1 transparent leave-in-place frame."""
        filler = make_filler_frame(3)
        assert (filler.width, filler.height) == (1, 1)
        assert filler.buffer.tolist() == [0]
        assert filler.transparent == 0
        assert filler.dispose == DisposalMethod.KEEP
        assert filler.delay == 3
        assert filler.palette is None


class TestExpandFrame:
    """Tests for the expansion policy."""

    def test_short_run_repeats(self, make_frame):
        """Verify n < 3 repeats the frame with disposal untouched."""
        frame = make_frame(delay=4, dispose=DisposalMethod.BACKGROUND)
        filler = make_filler_frame(2)

        expansion = expand_frame(frame, 2, filler)
        out = list(expansion)

        assert isinstance(expansion, Repeat)
        assert len(out) == 2
        assert all(f is frame for f in out)
        assert frame.dispose == DisposalMethod.BACKGROUND

    @pytest.mark.parametrize("dispose", [DisposalMethod.KEEP, DisposalMethod.ANY])
    def test_keep_uses_fillers(self, make_frame, dispose):
        """Verify leave-in-place frames are followed by fillers."""
        frame = make_frame(delay=8, dispose=dispose)
        filler = make_filler_frame(2)

        expansion = expand_frame(frame, 2, filler)
        out = list(expansion)

        assert isinstance(expansion, LeadFillerTail)
        assert len(out) == 4
        assert out[0] is frame
        assert all(f is filler for f in out[1:])
        assert expansion.filler_count == 3

    def test_restore_previous_repeats(self, make_frame):
        """Verify n = 4 restore-previous emits four verbatim copies."""
        frame = make_frame(delay=8, dispose=DisposalMethod.PREVIOUS)
        filler = make_filler_frame(2)

        expansion = expand_frame(frame, 2, filler)
        out = list(expansion)

        assert isinstance(expansion, Repeat)
        assert len(out) == 4
        assert all(f is frame for f in out)
        assert expansion.filler_count == 0

    def test_restore_background_split(self, make_frame):
        """Verify n = 5 restore-background defers the clear to the last tick."""
        frame = make_frame(delay=10, dispose=DisposalMethod.BACKGROUND)
        filler = make_filler_frame(2)

        expansion = expand_frame(frame, 2, filler)
        out = list(expansion)

        assert isinstance(expansion, BackgroundSplit)
        assert len(out) == 5

        lead = out[0]
        assert lead is not frame
        assert lead.dispose == DisposalMethod.KEEP
        assert np.array_equal(lead.buffer, frame.buffer)
        assert lead.buffer is not frame.buffer

        assert all(f is filler for f in out[1:4])

        assert out[4] is frame
        assert frame.dispose == DisposalMethod.BACKGROUND

    def test_all_frames_stamped_with_uniform_delay(self, make_frame):
        """Verify every emitted frame carries the uniform delay."""
        filler = make_filler_frame(3)
        for dispose in DisposalMethod:
            frame = make_frame(delay=13, dispose=dispose)
            out = list(expand_frame(frame, 3, filler))
            assert len(out) == 5
            assert {f.delay for f in out} == {3}

    def test_zero_delay_frame(self, make_frame):
        """Verify a zero-delay frame spans ZERO_DELAY worth of ticks."""
        frame = make_frame(delay=0)
        out = list(expand_frame(frame, 5, make_filler_frame(5)))
        assert len(out) == 2

    def test_filler_threshold_configurable(self, make_frame):
        """Verify a higher threshold falls back to repeats."""
        frame = make_frame(delay=8)
        expansion = expand_frame(frame, 2, make_filler_frame(2), filler_min_ticks=5)
        assert isinstance(expansion, Repeat)
        assert len(expansion) == 4
