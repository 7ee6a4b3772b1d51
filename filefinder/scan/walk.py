"""Directory enumeration for the scan coordinator."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Iterator
from pathlib import Path

from filefinder.scan.models import EnumerationError

logger = logging.getLogger(__name__)


def iter_files(
    root: Path,
    *,
    ignore_dirs: frozenset[str] = frozenset(),
    on_error: Callable[[EnumerationError], None] | None = None,
) -> Iterator[Path]:
    """Yield regular files under ``root`` in a stable, sorted order.

    Symbolic links are never followed, so link cycles cannot recurse.
    Directories named in ``ignore_dirs`` are pruned. Entries that cannot be
    listed or inspected are reported through ``on_error`` and skipped.

    Args:
        root: Directory to walk
        ignore_dirs: Directory base names to prune
        on_error: Callback receiving enumeration failures

    Yields:
        Paths of regular files
    """

    def report(path: str | Path, exc: OSError) -> None:
        logger.debug("Cannot enumerate %s: %s", path, exc)
        if on_error is not None:
            on_error(EnumerationError(path=Path(path), message=exc.strerror or str(exc)))

    def walk_error(exc: OSError) -> None:
        report(exc.filename or root, exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=walk_error, followlinks=False):
        dirnames[:] = sorted(d for d in dirnames if d not in ignore_dirs)

        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            try:
                mode = path.lstat().st_mode
            except OSError as exc:
                report(path, exc)
                continue

            if stat.S_ISREG(mode):
                yield path
