"""
Frame Data Model
=================

Internal frame representation for the decode -> retime -> encode pipeline.

A Frame is one image block of a GIF stream, exactly as stored: a sub-rectangle
of the logical screen holding palette indices, not composited pixels.

Design Rules:
    - Buffers are flat uint8 index arrays in row order (never interlaced)
    - Palettes are uint8 arrays of shape (n, 3)
    - Frames are mutable; whoever holds a frame owns it
    - Use clone() when an independent copy is needed
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional

import numpy as np


class DisposalMethod(IntEnum):
    """
    What the renderer does with the canvas after a frame's delay elapses.

    Values match the 3-bit disposal field of the graphic control extension.

    Attributes:
        ANY: Unspecified, renderers treat it like KEEP
        KEEP: Leave the frame in place
        BACKGROUND: Restore the frame's area to the background
        PREVIOUS: Restore the canvas to what it was before the frame
    """

    ANY = 0
    KEEP = 1
    BACKGROUND = 2
    PREVIOUS = 3

    @classmethod
    def from_wire(cls, value: int) -> "DisposalMethod":
        """Map a raw disposal field to a method; reserved values become ANY."""
        try:
            return cls(value)
        except ValueError:
            return cls.ANY


def _empty_buffer() -> np.ndarray:
    return np.zeros(0, dtype=np.uint8)


@dataclass(slots=True, eq=False)
class Frame:
    """
    Single indexed-color GIF frame.

    Attributes:
        width: Frame width in pixels
        height: Frame height in pixels
        buffer: Flat palette indices, len == width * height
        left: Horizontal offset on the logical screen
        top: Vertical offset on the logical screen
        palette: Local color table, shape (n, 3), or None to use the global one
        transparent: Transparent palette index, or None
        dispose: Disposal method applied after the frame is shown
        delay: Display duration in hundredths of a second
    """

    width: int = 0
    height: int = 0
    buffer: np.ndarray = field(default_factory=_empty_buffer)
    left: int = 0
    top: int = 0
    palette: Optional[np.ndarray] = None
    transparent: Optional[int] = None
    dispose: DisposalMethod = DisposalMethod.KEEP
    delay: int = 0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be non-negative")
        if self.left < 0 or self.top < 0:
            raise ValueError("left and top must be non-negative")
        if self.delay < 0:
            raise ValueError("delay must be non-negative")
        self.buffer = np.asarray(self.buffer, dtype=np.uint8).reshape(-1)
        if self.buffer.size != self.width * self.height:
            raise ValueError(
                f"buffer holds {self.buffer.size} indices, "
                f"expected {self.width * self.height}"
            )
        if self.palette is not None:
            self.palette = np.asarray(self.palette, dtype=np.uint8)
            if self.palette.ndim != 2 or self.palette.shape[1] != 3:
                raise ValueError("palette must have shape (n, 3)")
        self.dispose = DisposalMethod(self.dispose)

    def clone(self, **changes) -> "Frame":
        """
        Deep copy of this frame, optionally overriding fields.

        Buffer and palette are copied so the clone can be mutated
        independently of the original.
        """
        palette = None if self.palette is None else self.palette.copy()
        values = {"buffer": self.buffer.copy(), "palette": palette}
        values.update(changes)
        return replace(self, **values)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"Frame({self.width}x{self.height}+{self.left}+{self.top}, "
            f"delay={self.delay}, dispose={self.dispose.name}, "
            f"transparent={self.transparent})"
        )
