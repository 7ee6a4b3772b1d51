"""Per-file fault boundary."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from filefinder.scan.models import Errored, FileOutcome

logger = logging.getLogger(__name__)


def isolate(path: Path, operation: Callable[[], FileOutcome]) -> FileOutcome:
    """Run ``operation`` for ``path``, converting any exception into ``Errored``.

    Decoders and the PDF library can fail in ways that are not modelled as
    typed outcomes; those failures are confined to the one file.
    """
    try:
        return operation()
    except Exception as exc:  # noqa: BLE001 - one file must not abort the run
        logger.debug("Scan failed for %s", path, exc_info=True)
        return Errored(path=path, message=f"{type(exc).__name__}: {exc}")
