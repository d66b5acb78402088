"""
GIF Encoder
===========

Sequential GIF89a writer for raw indexed frames.

Frames are written exactly as given: sub-rectangle, indices, local palette,
disposal, transparency and delay. Nothing is re-quantized or composited.

Example:
    with GifEncoder(out, 64, 64, palette) as encoder:
        encoder.set_repeat(0)
        for frame in frames:
            encoder.write_frame(frame)
"""

import logging
import struct
from typing import BinaryIO, Optional

import numpy as np

from gifpace.codec.errors import EncodingError
from gifpace.codec.lzw import lzw_encode
from gifpace.models.frame import Frame


logger = logging.getLogger(__name__)


MAX_U16 = 0xFFFF
SUB_BLOCK_SIZE = 255


def _color_table(palette: np.ndarray) -> tuple:
    """
    Pad a palette to a power-of-two color table.

    Returns:
        (size field for the packed byte, table bytes)
    """
    entries = len(palette)
    if entries > 256:
        raise EncodingError(f"palette has {entries} entries, at most 256 allowed")

    size_field = 0
    while (2 << size_field) < entries:
        size_field += 1

    table = np.zeros((2 << size_field, 3), dtype=np.uint8)
    table[:entries] = palette
    return size_field, table.tobytes()


def _sub_blocks(data: bytes) -> bytes:
    out = bytearray()
    for i in range(0, len(data), SUB_BLOCK_SIZE):
        chunk = data[i:i + SUB_BLOCK_SIZE]
        out.append(len(chunk))
        out += chunk
    out.append(0)
    return bytes(out)


def _u16(value: int, name: str) -> bytes:
    if not 0 <= value <= MAX_U16:
        raise EncodingError(f"{name} {value} does not fit in 16 bits")
    return struct.pack("<H", value)


class GifEncoder:
    """
    Streaming GIF89a encoder over a binary file object.

    The header, logical screen descriptor and global color table are
    written on construction. The trailer is written by finish(), or when
    leaving the context manager without an exception.

    Attributes:
        width: Logical screen width
        height: Logical screen height
        frames_written: Number of frames written so far
    """

    def __init__(
        self,
        out: BinaryIO,
        width: int,
        height: int,
        global_palette: Optional[np.ndarray] = None,
    ) -> None:
        self._out = out
        self.width = width
        self.height = height
        self.frames_written = 0
        self._finished = False

        if global_palette is not None and len(global_palette) == 0:
            global_palette = None
        self._global_size = 0 if global_palette is None else len(global_palette)

        header = bytearray(b"GIF89a")
        header += _u16(width, "width")
        header += _u16(height, "height")
        if global_palette is None:
            header += bytes((0, 0, 0))
            table = b""
        else:
            size_field, table = _color_table(global_palette)
            # Global table present, 8-bit color resolution
            header += bytes((0x80 | 0x70 | size_field, 0, 0))
        self._out.write(bytes(header) + table)

    def set_repeat(self, count: int = 0) -> None:
        """
        Write a NETSCAPE2.0 looping block.

        Args:
            count: Number of repetitions, 0 = loop forever
        """
        self._out.write(
            b"\x21\xFF\x0BNETSCAPE2.0\x03\x01" + _u16(count, "repeat count") + b"\x00"
        )

    def write_frame(self, frame: Frame) -> None:
        """
        Serialize one frame.

        Raises:
            EncodingError: If the frame cannot be represented in GIF
        """
        if self._finished:
            raise EncodingError("encoder already finished")

        flags = int(frame.dispose) << 2
        transparent = 0
        if frame.transparent is not None:
            flags |= 0x01
            transparent = frame.transparent
        if not 0 <= transparent <= 0xFF:
            raise EncodingError(f"transparent index {transparent} out of range")

        block = bytearray(b"\x21\xF9\x04")
        block.append(flags)
        block += _u16(frame.delay, "delay")
        block += bytes((transparent, 0))

        block.append(0x2C)
        block += _u16(frame.left, "left")
        block += _u16(frame.top, "top")
        block += _u16(frame.width, "frame width")
        block += _u16(frame.height, "frame height")

        palette_size = self._global_size
        if frame.palette is not None and len(frame.palette) > 0:
            size_field, table = _color_table(frame.palette)
            block.append(0x80 | size_field)
            block += table
            palette_size = len(frame.palette)
        else:
            block.append(0)

        max_index = int(frame.buffer.max()) if frame.buffer.size else 0
        min_code_size = max(
            2,
            max_index.bit_length(),
            (max(palette_size, 1) - 1).bit_length(),
        )
        block.append(min_code_size)
        block += _sub_blocks(lzw_encode(frame.buffer, min_code_size))

        self._out.write(bytes(block))
        self.frames_written += 1

    def finish(self) -> None:
        """Write the trailer. Further writes are rejected."""
        if not self._finished:
            self._out.write(b"\x3B")
            self._finished = True
            logger.debug(f"GIF finished: {self.frames_written} frames")

    def __enter__(self) -> "GifEncoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()
