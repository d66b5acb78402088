"""
GIF LZW Coding
==============

Variable-width LZW compression as used by GIF image data.

Codes start at (min_code_size + 1) bits and grow up to 12 bits. The first
two codes after the literal range are CLEAR (reset the table) and END
(end of data). The encoder emits CLEAR whenever the 4096-entry table fills.

Both directions work on the concatenated sub-block payload; splitting into
255-byte sub-blocks is the container's job.
"""

import logging

import numpy as np

from gifpace.codec.errors import FormatError


logger = logging.getLogger(__name__)


MAX_CODE_SIZE = 12
MAX_CODES = 1 << MAX_CODE_SIZE

# (start row, row step) of the four interlace passes
INTERLACE_PASSES = ((0, 8), (4, 8), (2, 4), (1, 2))


class _BitWriter:
    """Packs variable-width codes least-significant bit first."""

    def __init__(self) -> None:
        self._out = bytearray()
        self._acc = 0
        self._bits = 0

    def write(self, code: int, size: int) -> None:
        self._acc |= code << self._bits
        self._bits += size
        while self._bits >= 8:
            self._out.append(self._acc & 0xFF)
            self._acc >>= 8
            self._bits -= 8

    def getvalue(self) -> bytes:
        if self._bits:
            return bytes(self._out) + bytes((self._acc & 0xFF,))
        return bytes(self._out)


def lzw_encode(indices: np.ndarray, min_code_size: int) -> bytes:
    """
    Compress palette indices into a GIF LZW code stream.

    Args:
        indices: Palette indices, each < 2 ** min_code_size
        min_code_size: LZW minimum code size (2..8 for valid GIFs)

    Returns:
        Packed code stream, starting with CLEAR and ending with END
    """
    if not 2 <= min_code_size <= 11:
        raise ValueError(f"invalid LZW minimum code size: {min_code_size}")

    clear_code = 1 << min_code_size
    end_code = clear_code + 1
    code_size = min_code_size + 1

    writer = _BitWriter()
    writer.write(clear_code, code_size)

    data = np.asarray(indices, dtype=np.uint8).tobytes()
    if data:
        table: dict = {}
        next_code = end_code + 1
        prefix = data[0]

        for k in data[1:]:
            code = table.get((prefix, k))
            if code is not None:
                prefix = code
                continue

            writer.write(prefix, code_size)
            # The decoder adds its entry one code later, so widen on the
            # count of entries that existed before this one.
            if next_code >= (1 << code_size) and code_size < MAX_CODE_SIZE:
                code_size += 1

            if next_code < MAX_CODES:
                table[(prefix, k)] = next_code
                next_code += 1
            else:
                writer.write(clear_code, code_size)
                table.clear()
                next_code = end_code + 1
                code_size = min_code_size + 1
            prefix = k

        writer.write(prefix, code_size)
        if next_code >= (1 << code_size) and code_size < MAX_CODE_SIZE:
            code_size += 1

    writer.write(end_code, code_size)
    return writer.getvalue()


def lzw_decode(data: bytes, min_code_size: int, pixel_count: int) -> np.ndarray:
    """
    Decompress a GIF LZW code stream into palette indices.

    Output shorter than pixel_count is padded with index 0, longer output
    is truncated. Data after the END code is ignored.

    Args:
        data: Concatenated image data sub-blocks
        min_code_size: LZW minimum code size from the image block
        pixel_count: Expected number of indices (width * height)

    Returns:
        uint8 array of length pixel_count

    Raises:
        FormatError: If the code size or a code is invalid
    """
    if not 1 <= min_code_size <= 11:
        raise FormatError(f"invalid minimal code size: {min_code_size}")

    clear_code = 1 << min_code_size
    end_code = clear_code + 1
    initial = [bytes((i,)) for i in range(clear_code)] + [b"", b""]

    table = list(initial)
    code_size = min_code_size + 1
    prev = None
    out = bytearray()

    acc = 0
    bits = 0
    finished = False
    for byte in data:
        acc |= byte << bits
        bits += 8
        while bits >= code_size:
            code = acc & ((1 << code_size) - 1)
            acc >>= code_size
            bits -= code_size

            if code == clear_code:
                table = list(initial)
                code_size = min_code_size + 1
                prev = None
                continue
            if code == end_code:
                finished = True
                break

            if code < len(table):
                entry = table[code]
            elif code == len(table) and prev is not None:
                entry = prev + prev[:1]
            else:
                raise FormatError(f"invalid code in LZW stream: {code}")

            out += entry
            if prev is not None and len(table) < MAX_CODES:
                table.append(prev + entry[:1])
                if len(table) == (1 << code_size) and code_size < MAX_CODE_SIZE:
                    code_size += 1
            prev = entry

            if len(out) >= pixel_count:
                finished = True
                break
        if finished:
            break

    if len(out) < pixel_count:
        logger.debug(f"LZW data short by {pixel_count - len(out)} pixels, padding")
        out += bytes(pixel_count - len(out))

    return np.frombuffer(bytes(out[:pixel_count]), dtype=np.uint8).copy()


def deinterlace(buffer: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Reorder an interlaced index buffer into plain row order.

    Args:
        buffer: Flat indices in interlaced row order
        width: Image width
        height: Image height

    Returns:
        Flat indices in top-to-bottom row order
    """
    rows = np.concatenate([
        np.arange(start, height, step) for start, step in INTERLACE_PASSES
    ])
    out = np.empty((height, width), dtype=np.uint8)
    out[rows] = np.asarray(buffer, dtype=np.uint8).reshape(height, width)
    return out.reshape(-1)
