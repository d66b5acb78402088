"""
Pipeline Tests
==============

Tests for stream normalization and file-to-stream retiming.
"""

import io

import numpy as np
import pytest

from gifpace.codec.decoder import GifDecoder
from gifpace.codec.errors import FormatError
from gifpace.models.frame import DisposalMethod
from gifpace.timing.pipeline import normalize_stream, retime_gif


class TestNormalizeStream:
    """Tests for the pure normalization function."""

    def test_uniform_stream_returns_none(self, make_frame):
        """Verify an already uniform stream is left alone."""
        frames = [make_frame(delay=5) for _ in range(3)]
        assert normalize_stream(frames, None, None) is None
        assert all(f.delay == 5 for f in frames)

    def test_empty_stream_returns_none(self):
        """Verify an empty stream is left alone."""
        assert normalize_stream([], None, None) is None

    def test_expansion_and_stats(self, make_frame):
        """Verify [6, 6, 4] expands to 3 + 3 + 2 ticks of 2."""
        frames = [make_frame(delay=6), make_frame(delay=6), make_frame(delay=4)]

        stream = normalize_stream(frames, None, None)
        assert stream.delay == 2

        out = list(stream.frames)
        assert len(out) == 8
        assert {f.delay for f in out} == {2}
        assert out[0] is frames[0]
        assert out[3] is frames[1]
        assert out[6] is frames[2] and out[7] is frames[2]

        assert stream.stats.to_dict() == {
            "uniform_delay": 2,
            "frames_in": 3,
            "frames_out": 8,
            "filler_frames": 4,
            "repeated_frames": 1,
        }

    def test_fillers_shared(self, make_frame):
        """Verify one filler object serves the whole stream."""
        frames = [make_frame(delay=8), make_frame(delay=6)]
        out = list(normalize_stream(frames, None, None).frames)
        fillers = [f for f in out if f.width == 1]
        assert len(fillers) == 5
        assert all(f is fillers[0] for f in fillers)

    def test_global_palette_rewritten(self, make_frame, sample_palette):
        """Verify the background index moves to palette slot 0."""
        frames = [make_frame(delay=4), make_frame(delay=6)]

        stream = normalize_stream(frames, sample_palette, 3)

        assert stream.palette[0].tolist() == [0, 0, 255]
        assert sample_palette[0].tolist() == [0, 0, 0]


class TestRetimeGif:
    """Tests for the file-level pipeline."""

    def test_rewrites_file(self, write_gif, make_frame):
        """Verify a mixed-delay GIF is rewritten with one delay."""
        path = write_gif([
            make_frame(delay=10, transparent=2, buffer=(2, 0, 1, 2)),
            make_frame(delay=4, dispose=DisposalMethod.BACKGROUND),
        ])
        out = io.BytesIO()

        assert retime_gif(path, out) is True

        out.seek(0)
        decoder = GifDecoder(out).read_info()
        frames = list(decoder)

        assert decoder.loop_count == 0
        assert (decoder.width, decoder.height) == (2, 2)
        assert len(frames) == 5 + 2
        assert {f.delay for f in frames} == {2}

        first = frames[0]
        assert first.transparent == 0
        assert first.buffer.tolist() == [0, 2, 1, 0]
        assert all((f.width, f.height) == (1, 1) for f in frames[1:5])
        assert [f.dispose for f in frames[5:]] == [
            DisposalMethod.BACKGROUND,
            DisposalMethod.BACKGROUND,
        ]

    def test_uniform_file_writes_nothing(self, write_gif, make_frame):
        """Verify an already uniform GIF produces no output."""
        path = write_gif([make_frame(delay=7), make_frame(delay=7)])
        out = io.BytesIO()

        assert retime_gif(path, out) is False
        assert out.getvalue() == b""

    def test_no_loop_block(self, write_gif, make_frame):
        """Verify loop_forever=False omits the NETSCAPE block."""
        path = write_gif([make_frame(delay=3), make_frame(delay=6)])
        out = io.BytesIO()

        retime_gif(path, out, loop_forever=False)

        out.seek(0)
        decoder = GifDecoder(out).read_info()
        assert len(list(decoder)) == 1 + 2
        assert decoder.loop_count is None

    def test_invalid_file_raises(self, tmp_path):
        """Verify decoding errors propagate."""
        path = tmp_path / "broken.gif"
        path.write_bytes(b"not a gif at all")
        with pytest.raises(FormatError):
            retime_gif(path, io.BytesIO())

    def test_missing_file_raises(self, tmp_path):
        """Verify a missing source raises OSError."""
        with pytest.raises(OSError):
            retime_gif(tmp_path / "missing.gif", io.BytesIO())

    def test_output_is_idempotent(self, write_gif, make_frame, tmp_path):
        """Verify retiming a retimed GIF is a no-op."""
        path = write_gif([make_frame(delay=9), make_frame(delay=6)])
        first = io.BytesIO()
        retime_gif(path, first)

        again = tmp_path / "again.gif"
        again.write_bytes(first.getvalue())
        second = io.BytesIO()

        assert retime_gif(again, second) is False
        assert second.getvalue() == b""

    def test_pixels_preserved(self, write_gif, make_frame, sample_palette):
        """Verify content frames keep their indices and palette."""
        local = sample_palette[::-1].copy()
        path = write_gif([
            make_frame(delay=2, buffer=(3, 2, 1, 0), palette=local),
            make_frame(delay=4),
        ])
        out = io.BytesIO()
        retime_gif(path, out)

        out.seek(0)
        frames = list(GifDecoder(out).read_info())
        assert frames[0].buffer.tolist() == [3, 2, 1, 0]
        assert np.array_equal(frames[0].palette, local)
