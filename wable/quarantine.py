"""
Relocation of disqualified candidates.

Works purely on the local tree: each candidate record whose stored baseline
has "disqualified": true is copied into the destination directory (same-named
files are overwritten, other files there are left alone) and then removed from
the active candidates directory.
"""

import shutil
from pathlib import Path
from typing import Union

from .logger import get_logger
from .storage import INDEX_FILE, ensure_dir, load_json

logger = get_logger()


def relocate_flagged(base_dir: Union[str, Path], move_to_dir: Union[str, Path]) -> int:
    """
    Move disqualified candidate records out of <base_dir>/candidates.

    Args:
        base_dir: Root that contains the candidates directory
        move_to_dir: Destination root; each record keeps its directory name

    Returns:
        Number of records moved
    """
    move_to = Path(move_to_dir)
    logger.info(f"Moving disqualified candidates from {base_dir} to {move_to}")

    candidates_root = Path(base_dir) / "candidates"
    if not candidates_root.is_dir():
        logger.info("No candidates directory found")
        return 0

    ensure_dir(move_to)

    moved = 0
    for record_dir in sorted(p for p in candidates_root.iterdir() if p.is_dir()):
        try:
            metadata = load_json(record_dir / INDEX_FILE)
            if not isinstance(metadata, dict) or metadata.get("disqualified") is not True:
                continue
            logger.info(f"Moving disqualified candidate: {record_dir.name}")
            move_record(record_dir, move_to / record_dir.name)
            moved += 1
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to process candidate {record_dir.name}: {e}")

    logger.info(f"Moved {moved} disqualified candidates")
    return moved


def move_record(source: Path, destination: Path) -> None:
    """Copy every file of source into destination, then delete source."""
    ensure_dir(destination)
    for item in source.iterdir():
        target = destination / item.name
        if item.is_dir():
            shutil.copytree(item, target, dirs_exist_ok=True)
        else:
            shutil.copyfile(item, target)
    shutil.rmtree(source)
