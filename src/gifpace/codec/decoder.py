"""
GIF Decoder
===========

Sequential GIF decoder producing raw indexed frames.

Unlike image libraries that composite each frame onto a full canvas, this
decoder yields every image block as stored: its sub-rectangle, palette
indices, local palette, and graphic-control metadata.

Design Rules:
    - One frame is decoded per read_next_frame() call
    - Interlaced images are returned in row order
    - Unknown extensions are skipped, unknown block types are errors
    - A clean EOF at a block boundary ends the stream like a trailer
"""

import logging
import struct
from typing import BinaryIO, Iterator, Optional

import numpy as np

from gifpace.codec.errors import DecodingIoError, FormatError, InternalError
from gifpace.codec.lzw import deinterlace, lzw_decode
from gifpace.models.frame import DisposalMethod, Frame


logger = logging.getLogger(__name__)


EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B

GRAPHIC_CONTROL_LABEL = 0xF9
APPLICATION_LABEL = 0xFF

SIGNATURES = (b"GIF87a", b"GIF89a")


class GifDecoder:
    """
    Streaming decoder over a binary file object.

    Example:
        with open("anim.gif", "rb") as f:
            decoder = GifDecoder(f).read_info()
            for frame in decoder:
                print(frame)
    """

    def __init__(self, fp: BinaryIO) -> None:
        self._fp = fp
        self._info_read = False
        self._done = False

        self.width = 0
        self.height = 0
        self.global_palette: Optional[np.ndarray] = None
        self.loop_count: Optional[int] = None
        self._bg_index = 0

        # Pending graphic control extension for the next image
        self._delay = 0
        self._dispose = DisposalMethod.KEEP
        self._transparent: Optional[int] = None

    @property
    def bg_color(self) -> Optional[int]:
        """Background color index; only meaningful with a global palette."""
        if self.global_palette is None:
            return None
        return self._bg_index

    # -------------------------------------------------------------------------
    # Low-level reads
    # -------------------------------------------------------------------------

    def _read(self, n: int) -> bytes:
        try:
            data = self._fp.read(n)
        except OSError as e:
            raise DecodingIoError(e) from e
        if len(data) < n:
            raise FormatError("unexpected end of file")
        return data

    def _read_u8(self) -> int:
        return self._read(1)[0]

    def _read_sub_blocks(self) -> bytes:
        chunks = []
        while True:
            size = self._read_u8()
            if size == 0:
                return b"".join(chunks)
            chunks.append(self._read(size))

    def _read_palette(self, size_field: int) -> np.ndarray:
        entries = 1 << (size_field + 1)
        raw = self._read(3 * entries)
        return np.frombuffer(raw, dtype=np.uint8).reshape(entries, 3).copy()

    # -------------------------------------------------------------------------
    # Header
    # -------------------------------------------------------------------------

    def read_info(self) -> "GifDecoder":
        """
        Read the header, logical screen descriptor and global color table.

        Returns:
            self, for chaining

        Raises:
            FormatError: If the signature or descriptor is invalid
            DecodingIoError: If the source cannot be read
        """
        if self._info_read:
            raise InternalError("stream info already read")

        signature = self._read(6)
        if signature not in SIGNATURES:
            raise FormatError("malformed GIF header")

        self.width, self.height, flags, self._bg_index, _aspect = struct.unpack(
            "<HHBBB", self._read(7)
        )
        if flags & 0x80:
            self.global_palette = self._read_palette(flags & 0x07)

        self._info_read = True
        logger.debug(
            f"GIF {signature.decode('ascii')} {self.width}x{self.height}, "
            f"global palette: {self.global_palette is not None}"
        )
        return self

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def _read_extension(self) -> None:
        label = self._read_u8()
        data = self._read_sub_blocks()

        if label == GRAPHIC_CONTROL_LABEL:
            if len(data) < 4:
                raise FormatError("graphic control extension too short")
            flags, delay, transparent = struct.unpack("<BHB", data[:4])
            self._dispose = DisposalMethod.from_wire((flags >> 2) & 0x07)
            self._delay = delay
            self._transparent = transparent if flags & 0x01 else None
        elif label == APPLICATION_LABEL:
            # Identifier block and the loop sub-block arrive concatenated
            if data[:11] in (b"NETSCAPE2.0", b"ANIMEXTS1.0") and len(data) >= 14:
                if data[11] == 1:
                    self.loop_count = data[12] | (data[13] << 8)
        else:
            logger.debug(f"Skipping extension 0x{label:02X} ({len(data)} bytes)")

    def _read_image(self) -> Frame:
        left, top, width, height, flags = struct.unpack("<HHHHB", self._read(9))

        palette = None
        if flags & 0x80:
            palette = self._read_palette(flags & 0x07)

        min_code_size = self._read_u8()
        data = self._read_sub_blocks()
        buffer = lzw_decode(data, min_code_size, width * height)
        if flags & 0x40:
            buffer = deinterlace(buffer, width, height)

        frame = Frame(
            width=width,
            height=height,
            buffer=buffer,
            left=left,
            top=top,
            palette=palette,
            transparent=self._transparent,
            dispose=self._dispose,
            delay=self._delay,
        )

        # Graphic control applies to the next image only
        self._delay = 0
        self._dispose = DisposalMethod.KEEP
        self._transparent = None
        return frame

    def read_next_frame(self) -> Optional[Frame]:
        """
        Decode the next image block.

        Returns:
            The next Frame, or None once the trailer (or EOF) is reached

        Raises:
            FormatError: On malformed blocks or LZW data
            DecodingIoError: If the source cannot be read
        """
        if not self._info_read:
            self.read_info()
        if self._done:
            return None

        while True:
            try:
                introducer = self._fp.read(1)
            except OSError as e:
                raise DecodingIoError(e) from e
            if not introducer:
                logger.debug("Stream ended without trailer")
                self._done = True
                return None

            block = introducer[0]
            if block == EXTENSION_INTRODUCER:
                self._read_extension()
            elif block == IMAGE_SEPARATOR:
                return self._read_image()
            elif block == TRAILER:
                self._done = True
                return None
            else:
                raise FormatError(f"unknown block type encountered: 0x{block:02X}")

    def __iter__(self) -> Iterator[Frame]:
        while True:
            frame = self.read_next_frame()
            if frame is None:
                return
            yield frame
