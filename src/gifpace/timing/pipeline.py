"""
Retiming Pipeline
=================

Drives decode -> transparency rewrite -> delay scan -> expansion -> encode.

The uniform delay depends on every frame's delay, so all frames are decoded
before the first one can be emitted. Emission itself is lazy: expanded frames
go straight from the expander to the encoder.

Stages:
    1. Decode every frame, rewriting transparency to index 0 as decoded
    2. Scan delays; stop without output if the stream is already uniform
    3. Rewrite the global palette for the background index
    4. Expand each frame into uniform-delay ticks and encode them in order
"""

import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Optional, Sequence, Union

import numpy as np

from gifpace.codec.decoder import GifDecoder
from gifpace.codec.encoder import GifEncoder
from gifpace.models.frame import Frame
from gifpace.timing.delay import MIN_DELAY, ZERO_DELAY, DelayNormalizer
from gifpace.timing.expander import (
    FILLER_MIN_TICKS,
    expand_frame,
    make_filler_frame,
)
from gifpace.timing.transparency import swap_global_palette, swap_transparent


logger = logging.getLogger(__name__)


@dataclass
class ExpansionStats:
    """
    Counters describing one normalization run.

    Attributes:
        uniform_delay: Delay stamped on every output frame
        frames_in: Original frames expanded so far
        frames_out: Frames emitted so far
        filler_frames: Emitted frames that are 1x1 fillers
        repeated_frames: Real-content frames beyond the first of each run
    """

    uniform_delay: int
    frames_in: int = 0
    frames_out: int = 0
    filler_frames: int = 0
    repeated_frames: int = 0

    def to_dict(self) -> dict:
        """Export as dictionary for logging."""
        return {
            "uniform_delay": self.uniform_delay,
            "frames_in": self.frames_in,
            "frames_out": self.frames_out,
            "filler_frames": self.filler_frames,
            "repeated_frames": self.repeated_frames,
        }


@dataclass
class NormalizedStream:
    """
    Result of normalizing a frame sequence.

    Attributes:
        delay: Uniform delay of every frame in ``frames``
        palette: Global palette to encode with (may be None)
        frames: Output frames in emission order, produced lazily
        stats: Counters, complete once ``frames`` is exhausted
    """

    delay: int
    palette: Optional[np.ndarray]
    frames: Iterator[Frame]
    stats: ExpansionStats = field(repr=False)


def _emit(
    frames: Sequence[Frame],
    uniform_delay: int,
    stats: ExpansionStats,
    min_delay: int,
    zero_delay: int,
    filler_min_ticks: int,
) -> Iterator[Frame]:
    filler = make_filler_frame(uniform_delay)

    for frame in frames:
        expansion = expand_frame(
            frame,
            uniform_delay,
            filler,
            min_delay=min_delay,
            zero_delay=zero_delay,
            filler_min_ticks=filler_min_ticks,
        )
        stats.frames_in += 1
        stats.frames_out += len(expansion)
        stats.filler_frames += expansion.filler_count
        stats.repeated_frames += len(expansion) - expansion.filler_count - 1
        yield from expansion


def normalize_stream(
    frames: Sequence[Frame],
    global_palette: Optional[np.ndarray],
    bg_color: Optional[int],
    *,
    min_delay: int = MIN_DELAY,
    zero_delay: int = ZERO_DELAY,
    filler_min_ticks: int = FILLER_MIN_TICKS,
) -> Optional[NormalizedStream]:
    """
    Normalize a decoded frame sequence to one uniform delay.

    No file or process I/O happens here. Frames must already have their
    transparency rewritten; their delays are overwritten as they are
    expanded.

    Args:
        frames: Original frames in stream order
        global_palette: Decoder's global palette, or None
        bg_color: Background color index, or None
        min_delay: Delay floor
        zero_delay: Effective duration of a zero delay
        filler_min_ticks: Shortest run that may use fillers

    Returns:
        NormalizedStream, or None if the delays are already uniform
    """
    normalizer = DelayNormalizer(min_delay=min_delay)
    for frame in frames:
        normalizer.update(frame.delay)

    uniform_delay = normalizer.uniform_delay
    if uniform_delay is None:
        return None

    stats = ExpansionStats(uniform_delay=uniform_delay)
    return NormalizedStream(
        delay=uniform_delay,
        palette=swap_global_palette(global_palette, bg_color),
        frames=_emit(frames, uniform_delay, stats, min_delay, zero_delay, filler_min_ticks),
        stats=stats,
    )


def retime_gif(
    source: Union[str, os.PathLike],
    out: BinaryIO,
    *,
    min_delay: int = MIN_DELAY,
    zero_delay: int = ZERO_DELAY,
    filler_min_ticks: int = FILLER_MIN_TICKS,
    loop_forever: bool = True,
) -> bool:
    """
    Rewrite a GIF file to a uniform delay.

    Args:
        source: Path of the input GIF
        out: Binary stream receiving the rewritten GIF
        min_delay: Delay floor
        zero_delay: Effective duration of a zero delay
        filler_min_ticks: Shortest run that may use fillers
        loop_forever: Write an infinite NETSCAPE2.0 loop block

    Returns:
        True if a rewritten GIF was written, False if the input was
        already uniform (nothing is written)

    Raises:
        OSError: If the source cannot be opened or the output written
        DecodingError: If the source is not a valid GIF
        EncodingError: If an output frame cannot be serialized
    """
    with open(source, "rb") as f:
        decoder = GifDecoder(f).read_info()
        frames = [swap_transparent(frame) for frame in decoder]

    logger.info(
        f"Decoded {len(frames)} frames, canvas {decoder.width}x{decoder.height}, "
        f"loop count {decoder.loop_count}"
    )

    stream = normalize_stream(
        frames,
        decoder.global_palette,
        decoder.bg_color,
        min_delay=min_delay,
        zero_delay=zero_delay,
        filler_min_ticks=filler_min_ticks,
    )
    if stream is None:
        logger.info("Frame delays already uniform, nothing to do")
        return False

    with GifEncoder(out, decoder.width, decoder.height, stream.palette) as encoder:
        if loop_forever:
            encoder.set_repeat(0)
        for frame in stream.frames:
            encoder.write_frame(frame)

    logger.info(f"Retimed stream: {stream.stats.to_dict()}")
    return True
