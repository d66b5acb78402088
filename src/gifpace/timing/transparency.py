"""
Transparency Rewriter
=====================

Relocates a frame's transparent color to palette index 0.

The encoder side of the pipeline assumes transparency lives at index 0.
Any other transparent index t is moved there by swapping palette rows 0 and t
and swapping the pixel values 0 and t in the index buffer, which leaves the
decoded image unchanged.

Ownership:
    swap_transparent() mutates the frame it is given unless copy=True.
    Callers must not assume the input frame survives unchanged.
"""

import logging
from typing import Optional

import numpy as np

from gifpace.models.frame import Frame


logger = logging.getLogger(__name__)


def swap_palette_entries(palette: np.ndarray, index: int) -> np.ndarray:
    """
    Swap palette rows 0 and index in place.

    Palettes too short to hold index are left untouched.

    Args:
        palette: Color table of shape (n, 3)
        index: Palette row to exchange with row 0

    Returns:
        The same palette array
    """
    if len(palette) > index:
        palette[[0, index]] = palette[[index, 0]]
    return palette


def swap_transparent(frame: Frame, copy: bool = False) -> Frame:
    """
    Move the frame's transparent index to 0.

    Frames without transparency, or already transparent at 0, are
    returned as-is.

    Args:
        frame: Frame to rewrite
        copy: Clone the frame before rewriting instead of mutating it

    Returns:
        The rewritten frame (the input frame unless copy=True)
    """
    index = frame.transparent
    if not index:
        return frame

    if copy:
        frame = frame.clone()

    if frame.palette is not None:
        swap_palette_entries(frame.palette, index)

    buffer = frame.buffer
    was_zero = buffer == 0
    buffer[buffer == index] = 0
    buffer[was_zero] = index

    frame.transparent = 0
    return frame


def swap_global_palette(
    palette: Optional[np.ndarray],
    bg_color: Optional[int],
) -> Optional[np.ndarray]:
    """
    Rewrite the global palette so the background index sits at 0.

    The decoder's palette is never modified: a swapped copy is returned
    when a swap is needed, the original array otherwise.

    Args:
        palette: Global color table, or None
        bg_color: Background color index, or None

    Returns:
        Palette to hand to the encoder
    """
    if palette is None or not bg_color:
        return palette

    logger.debug(f"Swapping global palette entries 0 and {bg_color}")
    return swap_palette_entries(palette.copy(), bg_color)
