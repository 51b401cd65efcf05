"""
Relocation of the pre-platformdirs data directory (~/.elastic-explorer).

Two strategies: an atomic rename, and a copy-then-delete used when the
rename fails (typically across devices). FallbackRelocator chains them.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class RelocationStrategy(Protocol):
    def relocate(self, src: Path, dst: Path) -> None: ...


class AtomicMove:
    """Move an entry with a single rename."""

    def relocate(self, src: Path, dst: Path) -> None:
        os.replace(src, dst)


class CopyThenDelete:
    """Copy an entry into place, then remove the source."""

    def relocate(self, src: Path, dst: Path) -> None:
        if src.is_dir() and not src.is_symlink():
            shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
            shutil.rmtree(src)
        else:
            shutil.copy2(src, dst, follow_symlinks=False)
            src.unlink()


class FallbackRelocator:
    """Try the primary strategy, use the fallback on OSError."""

    def __init__(
        self,
        primary: RelocationStrategy | None = None,
        fallback: RelocationStrategy | None = None,
    ) -> None:
        self.primary = primary or AtomicMove()
        self.fallback = fallback or CopyThenDelete()

    def relocate(self, src: Path, dst: Path) -> None:
        try:
            self.primary.relocate(src, dst)
        except OSError as e:
            logger.debug("Legacy move fallback for %s: %s", src, e)
            self.fallback.relocate(src, dst)


def resolve_legacy_layout(
    legacy_dir: Path,
    app_dir: Path,
    relocator: RelocationStrategy | None = None,
) -> bool:
    """Move everything from legacy_dir into app_dir. Returns True if anything moved.

    Existing directories in app_dir are merged into; existing files are
    replaced. An entry whose counterpart in app_dir is a file where it is a
    directory (or the reverse) stays behind, and so does the legacy root.
    """
    legacy_dir = Path(legacy_dir)
    app_dir = Path(app_dir)
    if not legacy_dir.is_dir():
        return False
    if legacy_dir.resolve() == app_dir.resolve():
        return False

    if not any(legacy_dir.iterdir()):
        legacy_dir.rmdir()
        return False

    moved = _merge_into(legacy_dir, app_dir, relocator or FallbackRelocator())

    if not any(legacy_dir.iterdir()):
        legacy_dir.rmdir()
    logger.info("Moved legacy data from %s to %s", legacy_dir, app_dir)
    return moved


def _merge_into(src_dir: Path, dst_dir: Path, relocator: RelocationStrategy) -> bool:
    dst_dir.mkdir(parents=True, exist_ok=True)
    moved = False
    for src in sorted(src_dir.iterdir()):
        dst = dst_dir / src.name
        src_is_dir = src.is_dir() and not src.is_symlink()
        if dst.exists() or dst.is_symlink():
            dst_is_dir = dst.is_dir() and not dst.is_symlink()
            if src_is_dir and dst_is_dir:
                moved = _merge_into(src, dst, relocator) or moved
                if not any(src.iterdir()):
                    src.rmdir()
                continue
            if src_is_dir or dst_is_dir:
                logger.warning(
                    "Leaving legacy %s in place: %s exists and is not the same kind of entry",
                    src,
                    dst,
                )
                continue
        relocator.relocate(src, dst)
        moved = True
    return moved
