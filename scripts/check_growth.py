#!/usr/bin/env python3
"""
Size Growth Report
==================

Compares file sizes of original GIFs against their retimed versions.

For every file in the output directory, prints its name, the size of the
same-named file in the originals directory, and its own size, as a
tab-separated table on stdout.

With --retime, every *.gif in the originals directory is first rewritten
into the output directory (already-uniform files are copied unchanged).

Usage:
    python scripts/check_growth.py --originals emots --outputs out
    python scripts/check_growth.py --originals emots --outputs out --retime
"""

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from gifpace.timing import retime_gif


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def retime_directory(originals: Path, outputs: Path) -> int:
    """
    Rewrite every GIF in originals into outputs.

    Returns:
        Number of files that needed rewriting
    """
    outputs.mkdir(parents=True, exist_ok=True)
    rewritten = 0

    for source in sorted(originals.glob("*.gif")):
        target = outputs / source.name
        with open(target, "wb") as out:
            changed = retime_gif(source, out)
        if changed:
            rewritten += 1
        else:
            shutil.copyfile(source, target)
            logger.info(f"{source.name}: already uniform, copied")

    return rewritten


def growth_rows(originals: Path, outputs: Path) -> list:
    """
    Collect (name, before, after) for every file in outputs.

    Files without a same-named original are skipped with a warning.
    """
    rows = []
    for output in sorted(outputs.iterdir()):
        if not output.is_file():
            continue
        original = originals / output.name
        if not original.exists():
            logger.warning(f"No original for {output.name}, skipping")
            continue
        rows.append((output.name, original.stat().st_size, output.stat().st_size))
    return rows


def main():
    parser = argparse.ArgumentParser(
        description="Compare original and retimed GIF sizes"
    )
    parser.add_argument(
        "--originals",
        type=Path,
        default=Path("emots"),
        help="Directory with the original GIFs (default: emots)",
    )
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("out"),
        help="Directory with the retimed GIFs (default: out)",
    )
    parser.add_argument(
        "--retime",
        action="store_true",
        help="Retime the originals into the output directory first",
    )

    args = parser.parse_args()

    if args.retime:
        rewritten = retime_directory(args.originals, args.outputs)
        logger.info(f"Retimed {rewritten} files into {args.outputs}")

    rows = growth_rows(args.originals, args.outputs)

    print("file\tbefore\tafter")
    for name, before, after in rows:
        print(f"{name}\t{before}\t{after}")

    total_before = sum(row[1] for row in rows)
    total_after = sum(row[2] for row in rows)
    if total_before:
        logger.info(
            f"Total: {total_before} -> {total_after} bytes "
            f"({100.0 * (total_after - total_before) / total_before:+.1f}%)"
        )


if __name__ == "__main__":
    main()
