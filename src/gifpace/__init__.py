"""
gifpace
=======

Uniform-delay rewriting for animated GIFs.

Many players clamp or mis-render small per-frame delays, and handle a single
global delay more predictably than per-frame variation. gifpace rewrites an
animation so every frame carries one uniform delay while keeping the original
visual timing, by repeating frames or inserting 1x1 transparent fillers.

Components:
    - models: Frame and disposal data model
    - codec: Minimal GIF decoder/encoder working on raw indexed frames
    - timing: Transparency rewrite, delay normalization, frame expansion
    - config: YAML/env configuration and logging setup

Example:
    from gifpace.timing import retime_gif

    with open("out.gif", "wb") as out:
        changed = retime_gif("in.gif", out)
"""

__version__ = "0.1.0"
__author__ = "gifpace contributors"

__all__ = [
    "__version__",
]
