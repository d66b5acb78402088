"""
Test Configuration
==================

Pytest fixtures and test configuration for gifpace.
"""

import io

import numpy as np
import pytest

from gifpace.codec.encoder import GifEncoder
from gifpace.models.frame import DisposalMethod, Frame


# Smallest valid GIF: 1x1, two-color global palette, transparent pixel
TINY_GIF = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00"
    b"\x00\x00\x00\xff\xff\xff"
    b"\x21\xf9\x04\x01\x00\x00\x00\x00"
    b"\x2c\x00\x00\x00\x00\x01\x00\x01\x00\x00"
    b"\x02\x02\x44\x01\x00"
    b"\x3b"
)


@pytest.fixture
def tiny_gif() -> bytes:
    """Provide the bytes of a minimal one-frame GIF."""
    return TINY_GIF


@pytest.fixture
def sample_palette():
    """Provide a four-color palette."""
    return np.array(
        [
            [0, 0, 0],
            [255, 0, 0],
            [0, 255, 0],
            [0, 0, 255],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def make_frame():
    """Provide a factory for small 2x2 frames."""

    def _make(
        delay=10,
        dispose=DisposalMethod.KEEP,
        buffer=(0, 1, 2, 3),
        palette=None,
        transparent=None,
    ) -> Frame:
        return Frame(
            width=2,
            height=2,
            buffer=np.array(buffer, dtype=np.uint8),
            palette=palette,
            transparent=transparent,
            dispose=dispose,
            delay=delay,
        )

    return _make


@pytest.fixture
def write_gif(tmp_path, sample_palette):
    """Provide a factory writing frames to a GIF file under tmp_path."""

    def _write(frames, name="anim.gif", palette=None, repeat=0) -> str:
        path = tmp_path / name
        if palette is None:
            palette = sample_palette
        out = io.BytesIO()
        with GifEncoder(out, 2, 2, palette) as encoder:
            if repeat is not None:
                encoder.set_repeat(repeat)
            for frame in frames:
                encoder.write_frame(frame)
        path.write_bytes(out.getvalue())
        return str(path)

    return _write
